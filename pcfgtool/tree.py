"""Labeled trees for constituency (phrase-structure) syntax trees."""
# This is an adaptation of the tree.py file from NLTK, by way of disco-dop.
# Removed: parented & immutable trees, tree positions of leaves, drawing;
# the regex-driven stack parser is replaced by a recursive-descent reader
# which reports malformed input with a ParseError.
# Original notice:
# Natural Language Toolkit: Text Trees
#
# Copyright (C) 2001-2010 NLTK Project
# Author: Edward Loper <edloper@gradient.cis.upenn.edu>
#         Steven Bird <sb@csse.unimelb.edu.au>
#         Nathan Bodenstab <bodenstab@cslu.ogi.edu> (tree transforms)
# URL: <http://www.nltk.org/>
# For license information, see LICENSE.TXT
import re

# a token is a bracket, or a run of characters other than brackets and ASCII
# whitespace; only ASCII whitespace separates tokens.
WHITESPACE = ' \t\r\n\f\v'
TOKENRE = re.compile(r'[()]|[^ \t\r\n\f\v()]+')
LABELRE = re.compile(r'[^ \t\r\n\f\v()]+\Z')

# classifications of parse errors
EXPECTEDOPEN = 'expected open paren'
EXPECTEDLABEL = 'expected label'
EXPECTEDBODY = 'expected word or open paren'
EXPECTEDCLOSE = 'expected close paren'
UNEXPECTEDEND = 'unexpected end of input'
TRAILINGINPUT = 'unexpected input after tree'
TOODEEP = 'tree nested too deeply'


class ParseError(ValueError):
	"""Raised when a bracketed tree string is malformed.

	:ivar kind: the classification of the error, e.g., ``EXPECTEDOPEN``.
	:ivar pos: index in the original string where the error occurred.
	:ivar rest: the remaining, unconsumed input starting at ``pos``.
	:ivar token: the offending token; None at the end of the input.
	:ivar orig: the original string."""

	def __init__(self, orig, pos, kind, token=None):
		self.orig = orig
		self.pos = pos
		self.kind = kind
		self.rest = orig[pos:]
		self.token = token
		msg = 'Tree.parse(): %s but got %r at index %d.' % (
				kind, 'end-of-string' if token is None else token, pos)
		# Add a display showing the error token itself:
		s = orig.replace('\n', ' ').replace('\t', ' ')
		offset = pos
		if len(s) > pos + 10:
			s = s[:pos + 10] + '...'
		if pos > 10:
			s = '...' + s[pos - 10:]
			offset = 13
		msg += '\n%s"%s"\n%s^' % (' ' * 4, s, ' ' * (5 + offset))
		super(ParseError, self).__init__(msg)


class Tree(object):
	"""A labeled, n-ary tree structure.

	A node either dominates a single word (a string; the node is then a
	preterminal), or an ordered, non-empty sequence of subtrees. Words and
	subtrees are never mixed under one node. Each subtree belongs to exactly
	one parent.

	The constructor can be called in two ways:

	- ``Tree(label, children)`` constructs a new tree with the specified label
		and list of children; ``children`` is either ``[word]`` or a list of
		Tree objects.
	- ``Tree(s)`` constructs a new tree by parsing the string s. Equivalent to
		calling the class method ``Tree.parse(s)``.

	>>> tree = Tree('(S (NP (NNP Julius)) (VP (VB stabs) (NP (NN him))))')
	>>> tree[1].label
	'VP'
	>>> tree[1][1][0].atom
	'him'
	"""
	__slots__ = ('label', 'children')

	def __new__(cls, label_or_str=None, children=None):
		if label_or_str is None:
			return object.__new__(cls)  # used by copy.deepcopy
		if children is None:
			if not isinstance(label_or_str, str):
				raise TypeError("%s: Expected a label and child list "
						"or a single string; got: %s" % (
						cls.__name__, type(label_or_str)))
			return cls.parse(label_or_str)
		if isinstance(children, str) or not hasattr(children, '__iter__'):
			raise TypeError("%s() argument 2 should be a list, not a "
					"string" % cls.__name__)
		return object.__new__(cls)

	def __init__(self, label_or_str, children=None):
		# Because __new__ may delegate to Tree.parse(), the __init__
		# method may end up getting called more than once; if `children` is
		# None, __init__ has already been called by Tree.parse().
		if children is None:
			return
		children = list(children)
		if not isinstance(label_or_str, str):
			raise TypeError('label should be a string; got: %r'
					% (label_or_str, ))
		if LABELRE.match(label_or_str) is None:
			raise ValueError('label should be non-empty and contain no ASCII '
					'whitespace or brackets: %r' % label_or_str)
		if not children:
			raise ValueError('node %r has no children' % label_or_str)
		for child in children:
			if isinstance(child, str):
				if len(children) != 1:
					raise ValueError('node %r mixes a word with other '
							'children: %r' % (label_or_str, children))
				if LABELRE.match(child) is None:
					raise ValueError('word should be non-empty and contain no '
							'ASCII whitespace or brackets: %r' % child)
			elif not isinstance(child, Tree):
				raise TypeError('child should be a Tree or a string; got: %r'
						% (child, ))
		self.label = label_or_str
		self.children = children

	# === Comparison operators ==================================
	def __eq__(self, other):
		if not isinstance(other, Tree):
			return False
		return (self.label == other.label
				and self.children == other.children)

	def __ne__(self, other):
		return not self.__eq__(other)

	# === Delegated list operations ==============================
	def __iter__(self):
		return self.children.__iter__()

	def __len__(self):
		return self.children.__len__()

	def __getitem__(self, index):
		return self.children.__getitem__(index)

	# === Basic tree operations =================================
	@property
	def atom(self):
		"""The word dominated by this node if it is a preterminal,
		otherwise None."""
		child = self.children[0]
		return child if isinstance(child, str) else None

	def subtrees(self):
		"""Yield subtrees of this tree in depth-first, pre-order traversal."""
		# Non-recursive version
		agenda = [self]
		while agenda:
			node = agenda.pop()
			yield node
			if node.atom is None:
				agenda.extend(node[::-1])

	# === Parsing ===============================================
	@classmethod
	def parse(cls, s, strict=True):
		"""Parse a bracketed tree string and return the resulting tree.
		Trees are represented as nested bracketings, such as:
		``(S (NP (NNP John)) (VP (V runs)))``

		Whitespace around tokens is insignificant::

			expression := '(' label body ')'
			body := word | expression+

		:param s: The string to parse.
		:param strict: if True, any non-whitespace input after the first
			complete tree is an error; otherwise it is ignored.
		:returns: A tree corresponding to the string representation s.
			If this class method is called using a subclass of Tree, then it
			will return a tree of that type.
		:raises ParseError: if ``s`` is not a well-formed tree.

		>>> print(Tree.parse(' (S (NP ( NP \\t John   ) (NP Maria )) ) '))
		(S (NP (NP John) (NP Maria)))
		>>> print(Tree.parse('(A a) (B b)', strict=False))
		(A a)
		"""
		if not isinstance(s, str):
			raise TypeError('expected a string; got: %r' % type(s))
		tokens = _Tokens(s)
		try:
			tree = cls._expression(tokens)
		except RecursionError:
			raise ParseError(s, tokens.pos(), TOODEEP,
					tokens.peek()[1]) from None
		if strict and tokens.peek()[1] is not None:
			pos, token = tokens.peek()
			raise ParseError(s, pos, TRAILINGINPUT, token)
		return tree

	@classmethod
	def _expression(cls, tokens):
		"""Read ``'(' label body ')'``."""
		pos, token = tokens.next()
		if token != '(':
			raise ParseError(tokens.s, pos,
					UNEXPECTEDEND if token is None else EXPECTEDOPEN, token)
		pos, label = tokens.next()
		if label is None:
			raise ParseError(tokens.s, pos, UNEXPECTEDEND)
		elif label in ('(', ')'):
			raise ParseError(tokens.s, pos, EXPECTEDLABEL, label)
		children = cls._body(tokens)
		pos, token = tokens.next()
		if token is None:
			raise ParseError(tokens.s, pos, UNEXPECTEDEND)
		elif token != ')':
			raise ParseError(tokens.s, pos, EXPECTEDCLOSE, token)
		return cls(label, children)

	@classmethod
	def _body(cls, tokens):
		"""Read a single word, or one or more expressions."""
		pos, token = tokens.peek()
		if token is None:
			raise ParseError(tokens.s, pos, UNEXPECTEDEND)
		elif token == ')':
			raise ParseError(tokens.s, pos, EXPECTEDBODY, token)
		elif token != '(':
			tokens.next()
			return [token]
		children = []
		while tokens.peek()[1] == '(':
			children.append(cls._expression(tokens))
		return children

	# === String Representations ================================
	def __repr__(self):
		childstr = ", ".join(repr(c) for c in self)
		return '%s(%r, [%s])' % (self.__class__.__name__, self.label, childstr)

	def __str__(self):
		return self._pprint_flat()

	def _pprint_flat(self):
		"""Canonical single-line bracketing, single spaces between tokens."""
		if self.atom is not None:
			return '(%s %s)' % (self.label, self.atom)
		return '(%s %s)' % (self.label,
				' '.join(child._pprint_flat() for child in self.children))


class _Tokens(object):
	"""A cursor over the tokens of a bracketed tree string."""
	__slots__ = ('s', 'tokens', 'idx')

	def __init__(self, s):
		self.s = s
		self.tokens = [(match.start(), match.group())
				for match in TOKENRE.finditer(s)]
		self.idx = 0

	def peek(self):
		""":returns: tuple ``(pos, token)``; token is None at the end."""
		if self.idx < len(self.tokens):
			return self.tokens[self.idx]
		return len(self.s), None

	def next(self):
		"""Like peek(), but consume the token."""
		result = self.peek()
		if result[1] is not None:
			self.idx += 1
		return result

	def pos(self):
		"""Index in the string of the next token."""
		return self.peek()[0]


__all__ = ['Tree', 'ParseError', 'WHITESPACE', 'EXPECTEDOPEN', 'EXPECTEDLABEL',
		'EXPECTEDBODY', 'EXPECTEDCLOSE', 'UNEXPECTEDEND', 'TRAILINGINPUT',
		'TOODEEP']
