"""Treebank PCFG induction (pcfgtool).

Main components:

- A recursive-descent reader for bracketed constituency trees
  (Penn-Treebank style), one tree per line.
- Reading off the productions of a treebank and estimating
  relative-frequency (maximum-likelihood) rule probabilities.
"""
__version__ = '0.1.0'
