"""Read off a probabilistic context-free grammar from a treebank.

A PCFG is estimated with relative frequencies: the probability of a
production is its frequency divided by the total frequency of the
productions sharing its left-hand side (head)."""
import math
import logging
import multiprocessing
from collections import Counter, deque
import numpy as np
from .tree import Tree
from .util import workerfunc


class InductionError(ValueError):
	"""Raised when no rules could be read off a tree of the treebank.

	:ivar index: the index of the offending tree in the input sequence."""

	def __init__(self, index, tree=None):
		self.index = index
		msg = 'There are no rules to read from tree %d' % index
		if tree is not None:
			msg += ':\n%s' % tree
		super(InductionError, self).__init__(msg)


class Lexical(object):
	"""The body of a lexical rule: a single terminal (word)."""
	__slots__ = ('word', )

	def __init__(self, word):
		self.word = word

	def __eq__(self, other):
		return isinstance(other, Lexical) and self.word == other.word

	def __ne__(self, other):
		return not self.__eq__(other)

	def __hash__(self):
		return hash(('Lexical', self.word))

	def __iter__(self):
		return iter((self.word, ))

	def __len__(self):
		return 1

	def __repr__(self):
		return '%s(%r)' % (self.__class__.__name__, self.word)

	def __str__(self):
		return self.word


class NonLexical(object):
	"""The body of a non-lexical rule: a non-empty sequence of nonterminals.

	The order of the symbols is significant."""
	__slots__ = ('symbols', )

	def __init__(self, symbols):
		self.symbols = tuple(symbols)
		if not self.symbols:
			raise ValueError('non-lexical rule body may not be empty')

	def __eq__(self, other):
		return isinstance(other, NonLexical) and self.symbols == other.symbols

	def __ne__(self, other):
		return not self.__eq__(other)

	def __hash__(self):
		return hash(('NonLexical', self.symbols))

	def __iter__(self):
		return iter(self.symbols)

	def __len__(self):
		return len(self.symbols)

	def __repr__(self):
		return '%s(%r)' % (self.__class__.__name__, self.symbols)

	def __str__(self):
		return ' '.join(self.symbols)


class Rule(object):
	"""A production ``head -> body``, compared and hashed structurally.

	>>> rule = Rule('VP', NonLexical(['VB', 'NP']))
	>>> print(rule)
	VP -> VB NP
	>>> rule == Rule('VP', NonLexical(('VB', 'NP')))
	True
	>>> rule == Rule('VP', NonLexical(('NP', 'VB')))
	False
	>>> Rule('NN', Lexical('him')).lexical
	True
	"""
	__slots__ = ('head', 'body')

	def __init__(self, head, body):
		if not isinstance(body, (Lexical, NonLexical)):
			raise TypeError('body should be Lexical or NonLexical; got: %r'
					% (body, ))
		self.head = head
		self.body = body

	@property
	def lexical(self):
		"""True if this rule rewrites its head to a word."""
		return isinstance(self.body, Lexical)

	def _key(self):
		return self.head, self.lexical, tuple(self.body)

	def __eq__(self, other):
		if not isinstance(other, Rule):
			return False
		return self.head == other.head and self.body == other.body

	def __ne__(self, other):
		return not self.__eq__(other)

	def __lt__(self, other):
		if not isinstance(other, Rule):
			return NotImplemented
		return self._key() < other._key()

	def __hash__(self):
		return hash((self.head, self.body))

	def __repr__(self):
		return '%s(%r, %r)' % (self.__class__.__name__, self.head, self.body)

	def __str__(self):
		return '%s -> %s' % (self.head, self.body)


def wholetree(start, tree):
	"""Select the tree itself as the starting point for reading off rules."""
	return tree


def firstmatchingsubtree(start, tree):
	"""Select the first subtree labeled ``start``, in breadth-first order.

	:returns: a Tree, or None if no node is labeled ``start``.

	>>> tree = Tree('(ROOT (S (NP (NNP A)) (VP (VB screams))))')
	>>> print(firstmatchingsubtree('S', tree))
	(S (NP (NNP A)) (VP (VB screams)))
	>>> firstmatchingsubtree('PP', tree) is None
	True
	"""
	agenda = deque([tree])
	while agenda:
		node = agenda.popleft()
		if node.label == start:
			return node
		if node.atom is None:
			agenda.extend(node)
	return None


def readrules(start, tree, selectsubtree=wholetree):
	"""Read off the productions of a tree in breadth-first order.

	Every node yields a rule: a preterminal yields a lexical rule, any other
	node yields a non-lexical rule with the labels of its children.

	:param start: the start symbol; passed on to ``selectsubtree``.
	:param selectsubtree: a function ``(start, tree) -> Tree or None``
		selecting the subtree from which rules are read.
	:returns: a list of Rule objects (with duplicates), or None if no subtree
		was selected.

	>>> tree = Tree('(S (NP (NNP Julius)) (VP (VB stabs)))')
	>>> for rule in readrules('S', tree):
	...		print(rule)
	S -> NP VP
	NP -> NNP
	VP -> VB
	NNP -> Julius
	VB -> stabs
	"""
	if tree is None:
		return None
	subtree = selectsubtree(start, tree)
	if subtree is None:
		return None
	rules = []
	agenda = deque([subtree])
	while agenda:
		node = agenda.popleft()
		if node.atom is not None:
			rules.append(Rule(node.label, Lexical(node.atom)))
		else:
			rules.append(Rule(node.label,
					NonLexical(child.label for child in node)))
			agenda.extend(node)
	return rules


def countrules(occurrences, rules):
	"""Add one to the count of each rule in the sequence ``rules``.

	:param occurrences: a Counter mapping rules to frequencies; updated
		in-place.
	:returns: ``occurrences``"""
	occurrences.update(rules)
	return occurrences


def mergecounts(*tables):
	"""Sum several mappings of rules to frequencies into a new Counter."""
	result = Counter()
	for table in tables:
		result.update(table)
	return result


def normaliserules(weights):
	"""Convert rule frequencies to relative frequencies per head.

	:param weights: a mapping of Rule objects to non-negative counts or
		weights (e.g., probabilities to be renormalized). Rules with weight
		zero are left out.
	:returns: a dictionary mapping each rule to its probability; the
		probabilities of the rules sharing a head sum to 1.

	>>> occurrences = Counter({Rule('VP', Lexical('some')): 2,
	...		Rule('VP', Lexical('other')): 1})
	>>> probs = normaliserules(occurrences)
	>>> probs[Rule('VP', Lexical('other'))] == 1 / 3
	True
	"""
	rules = list(weights)
	values = np.array([weights[rule] for rule in rules], dtype=np.double)
	if (values < 0).any():
		raise ValueError('rule weights should be non-negative.')
	if not values.all():
		rules = [rule for rule, value in zip(rules, values) if value]
		values = values[values != 0]
	if not rules:
		return {}
	_, heads = np.unique([rule.head for rule in rules], return_inverse=True)
	heads = heads.ravel()
	totals = np.bincount(heads, weights=values)
	return dict(zip(rules, (values / totals[heads]).tolist()))


class Grammar(object):
	"""A PCFG: a start symbol and a mapping of rules to probabilities.

	Nonterminals and terminals are derived from the rules. A Grammar is not
	modified after construction; the query methods return new collections.

	>>> grammar = induce('S', [Tree('(S (NP (NNP Julius)) '
	...		'(VP (VB stabs) (NP (NN him))))')])
	>>> grammar.rules[Rule('NP', NonLexical(['NN']))]
	0.5
	>>> sorted(grammar.terminals())
	['Julius', 'him', 'stabs']
	"""
	__slots__ = ('start', 'rules')

	def __init__(self, start, rules):
		"""
		:param start: the start symbol.
		:param rules: a mapping of Rule objects to probabilities."""
		self.start = start
		self.rules = dict(rules)

	@classmethod
	def fromcounts(cls, start, counts):
		"""Construct a grammar with relative frequencies from rule counts."""
		return cls(start, normaliserules(counts))

	def renormalise(self):
		""":returns: a new Grammar with the probabilities of this grammar
			renormalized per head, treating them as relative weights."""
		return self.fromcounts(self.start, self.rules)

	def nonterminals(self):
		""":returns: the set of nonterminals: the start symbol, the heads of
			the rules, and the symbols in non-lexical rule bodies."""
		result = {self.start}
		for rule in self.rules:
			result.add(rule.head)
			if not rule.lexical:
				result.update(rule.body)
		return result

	def terminals(self):
		""":returns: the set of words in lexical rules."""
		return {rule.body.word for rule in self.rules if rule.lexical}

	def lexicalrules(self):
		""":returns: a dictionary with the lexical rules and their
			probabilities."""
		return {rule: prob for rule, prob in self.rules.items()
				if rule.lexical}

	def nonlexicalrules(self):
		""":returns: a dictionary with the non-lexical rules and their
			probabilities."""
		return {rule: prob for rule, prob in self.rules.items()
				if not rule.lexical}

	def testgrammar(self, epsilon=1e-9):
		"""Test whether the probabilities of the rules of each head sum to 1.

		:returns: a tuple ``(result, msg)`` with a boolean and a message."""
		sums = {}
		for rule, prob in self.rules.items():
			sums.setdefault(rule.head, []).append(prob)
		for head, probs in sorted(sums.items()):
			total = math.fsum(probs)
			if abs(total - 1.0) > epsilon:
				return False, ('rules with head %r sum to %.17g, not 1.'
						% (head, total))
		return True, 'All %d heads have rules that sum to 1 (epsilon=%g)' % (
				len(sums), epsilon)

	def __eq__(self, other):
		if not isinstance(other, Grammar):
			return False
		return self.start == other.start and self.rules == other.rules

	def __ne__(self, other):
		return not self.__eq__(other)

	def __len__(self):
		return len(self.rules)

	def __repr__(self):
		return '%s(%r, %r)' % (self.__class__.__name__, self.start, self.rules)

	def __str__(self):
		return 'start: %s\n%s' % (self.start, ''.join(
				'%s\t%r\n' % (rule, self.rules[rule])
				for rule in sorted(self.rules)))


def _flatten(tree):
	"""Encode a tree as a flat pre-order list of ``(label, body)`` tuples,
	where body is a word, or the number of children."""
	return [(node.label, len(node) if node.atom is None else node.atom)
			for node in tree.subtrees()]


def _unflatten(nodes):
	"""Inverse of ``_flatten()``; neither recurses, so that trees of any
	depth can be passed to worker processes."""
	stack = []
	for label, body in reversed(nodes):
		if isinstance(body, str):
			stack.append(Tree(label, [body]))
		else:
			stack.append(Tree(label, [stack.pop() for _ in range(body)]))
	return stack.pop()


@workerfunc
def _countchunk(args):
	"""Count the rules of a chunk of trees in a worker process.

	:returns: tuple ``(occurrences, failed)``, where ``failed`` is the index
		of the first tree without rules, or None."""
	start, trees, offset, selectsubtree = args
	occurrences = Counter()
	for n, tree in enumerate(map(_unflatten, trees), offset):
		rules = readrules(start, tree, selectsubtree)
		if not rules:
			return occurrences, n
		countrules(occurrences, rules)
	return occurrences, None


def induce(start, trees, selectsubtree=wholetree, numproc=1):
	"""Induce a PCFG with relative frequencies of productions.

	:param start: the start symbol of the grammar.
	:param trees: a sequence of Tree objects.
	:param selectsubtree: a function ``(start, tree) -> Tree or None``
		selecting the subtree of each tree from which rules are read; with
		``numproc > 1`` it should be a module-level function.
	:param numproc: number of processes for reading off rules; None or 0
		means the number of CPUs.
	:raises InductionError: if no rules could be read from one of the trees.
	:returns: a Grammar."""
	if not numproc:
		numproc = multiprocessing.cpu_count()
	if numproc == 1:
		occurrences = Counter()
		numtrees = 0
		for n, tree in enumerate(trees):
			rules = readrules(start, tree, selectsubtree)
			if not rules:
				raise InductionError(n, tree)
			countrules(occurrences, rules)
			numtrees += 1
	else:
		trees = list(trees)
		numtrees = len(trees)
		chunksize = max(1, -(-numtrees // numproc))
		chunks = [(start, [_flatten(tree) for tree in trees[n:n + chunksize]],
				n, selectsubtree)
				for n in range(0, numtrees, chunksize)]
		with multiprocessing.Pool(processes=numproc) as pool:
			results = pool.map(_countchunk, chunks)
		failed = [n for _, n in results if n is not None]
		if failed:
			raise InductionError(min(failed), trees[min(failed)])
		occurrences = mergecounts(*(table for table, _ in results))
	logging.info('read off %d rules (%d distinct) from %d trees',
			sum(occurrences.values()), len(occurrences), numtrees)
	return Grammar.fromcounts(start, occurrences)


def writegrammar(grammar):
	"""Write a grammar in a simple text format.

	:returns: a tuple of strings ``(rules, lexicon, words)``:

		:rules: one non-lexical rule per line: ``head -> sym... probability``
		:lexicon: one lexical rule per line: ``head word probability``
		:words: one terminal per line.

	>>> rules, lexicon, words = writegrammar(induce('S',
	...		[Tree('(S (NP (VP some)) (NP (VP some)) (NP (VP other)))')]))
	>>> print(rules, end='')
	NP -> VP 1.0
	S -> NP NP NP 1.0
	>>> print(lexicon, end='')
	VP other 0.3333333333333333
	VP some 0.6666666666666666
	>>> print(words, end='')
	other
	some
	"""
	nonlexical = grammar.nonlexicalrules()
	lexical = grammar.lexicalrules()
	rules = ''.join('%s %r\n' % (rule, nonlexical[rule])
			for rule in sorted(nonlexical))
	lexicon = ''.join('%s %s %r\n' % (rule.head, rule.body.word, lexical[rule])
			for rule in sorted(lexical))
	words = ''.join('%s\n' % word for word in sorted(grammar.terminals()))
	return rules, lexicon, words


def grammarinfo(grammar):
	"""Summarize the labels and rules of a grammar."""
	nonlexical = grammar.nonlexicalrules()
	result = 'start: %s; labels: %d of which preterminals: %d; words: %d\n' % (
			grammar.start, len(grammar.nonterminals()),
			len({rule.head for rule in grammar.rules if rule.lexical}),
			len(grammar.terminals()))
	result += 'rules: %d  lexical rules: %d  non-lexical rules: %d' % (
			len(grammar), len(grammar) - len(nonlexical), len(nonlexical))
	if nonlexical:
		rule = max(sorted(nonlexical), key=lambda rule: len(rule.body))
		result += '\nlongest rule: %s (%d nonterminals)' % (
				rule, len(rule.body))
	return result


__all__ = ['InductionError', 'Lexical', 'NonLexical', 'Rule', 'wholetree',
		'firstmatchingsubtree', 'readrules', 'countrules', 'mergecounts',
		'normaliserules', 'Grammar', 'induce', 'writegrammar', 'grammarinfo']
