"""Read treebanks in bracket notation, one tree per line."""
import logging
from collections import OrderedDict
from .tree import Tree, ParseError, WHITESPACE
from .util import openread


def readtrees(lines, strict=True, errors=None):
	"""Parse trees from an iterable of lines, skipping malformed lines.

	Blank lines are ignored. A line that cannot be parsed is logged and
	skipped, so that one malformed tree does not abort reading a treebank.

	:param strict: whether trailing input after a tree is an error.
	:param errors: if a list is given, tuples ``(lineno, ParseError)`` are
		appended to it for each skipped line.
	:returns: a generator of tuples ``(lineno, tree)``; line numbers start
		at 1.

	>>> lines = ['(S (NP Mary) (VP rich))', '', '(S (NP', '(NP John)']
	>>> errors = []
	>>> for n, tree in readtrees(lines, errors=errors):
	...		print(n, tree)
	1 (S (NP Mary) (VP rich))
	4 (NP John)
	>>> [(n, err.kind) for n, err in errors]
	[(3, 'unexpected end of input')]
	"""
	for n, line in enumerate(lines, 1):
		if not line.strip(WHITESPACE):
			continue
		try:
			tree = Tree.parse(line, strict=strict)
		except ParseError as err:
			logging.warning('line %d: skipping malformed tree; %s', n, err)
			if errors is not None:
				errors.append((n, err))
			continue
		yield n, tree


class BracketCorpusReader(object):
	"""Corpus reader for phrase-structures in bracket notation.

	Each non-blank line contains one tree; for example::

		(S (NP (NNP John)) (VP (VB is) (JJ rich)) (. .))"""

	def __init__(self, path, encoding='utf8', strict=True):
		"""
		:param path: filename of corpus, or ``'-'`` for standard input;
			``.gz`` files are decompressed on-the-fly.
		:param strict: whether trailing input after a tree is an error."""
		self._path = path
		self._encoding = encoding
		self.strict = strict
		self.errors = []

	def trees(self):
		"""
		:returns: an ordered dictionary mapping line numbers to Tree objects.
			Lines that could not be parsed are left out and recorded in the
			``errors`` attribute."""
		self.errors = []
		with openread(self._path, encoding=self._encoding) as inp:
			result = OrderedDict(readtrees(inp, self.strict, self.errors))
		if self.errors:
			logging.warning('skipped %d malformed trees out of %d',
					len(self.errors), len(self.errors) + len(result))
		return result


__all__ = ['readtrees', 'BracketCorpusReader']
