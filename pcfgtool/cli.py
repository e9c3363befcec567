"""Command-line interface."""
import sys
from sys import argv, stderr
from sys import exit as sysexit

COMMANDS = {
		'induce': 'Read off a PCFG from a treebank in bracket notation.',
	}


def main():
	"""Expose command-line interfaces."""
	from os.path import basename
	thiscmd = basename(argv[0])
	if len(argv) == 2 and argv[1] in ('-v', '--version'):
		from pcfgtool import __version__
		print(__version__)
	elif len(argv) <= 1 or argv[1] not in COMMANDS:
		print('Usage: %s <command> [arguments]\n' % thiscmd, file=stderr)
		print('Command is one of:', file=stderr)
		for a, b in COMMANDS.items():
			print('   %s  %s' % (a.ljust(15), b))
		print('for additional instructions issue: %s <command> --help'
			% thiscmd, file=stderr)
	else:
		globals()[argv[1]](argv[2:])


def induce(args=None):
	"""Read off a PCFG from a treebank with one bracketed tree per line.
Usage: pcfgtool induce [GRAMMAR] [options]

Trees are read from standard input. Lines with malformed trees are reported
and skipped. Without GRAMMAR, the rules, lexicon, and words are written to
standard output; otherwise to the files GRAMMAR.rules, GRAMMAR.lexicon, and
GRAMMAR.words.

Options:
  -s START         start symbol [default: label of the first tree]
  --input=FILE     read trees from FILE instead of standard input.
  --encoding=ENC   encoding of input [default: utf8]
  --numproc=N      number of processes for reading off rules;
                   0 means all CPUs [default: 1]
  --findstart      read off rules from the first subtree labeled START,
                   instead of from the whole tree.
  --loose          ignore input following a complete tree on a line.
  -q, --quiet      only report warnings and errors."""
	import io
	import logging
	from getopt import gnu_getopt, GetoptError
	from .treebank import BracketCorpusReader
	from .grammar import induce as inducegrammar, InductionError, \
			wholetree, firstmatchingsubtree, writegrammar, grammarinfo
	shortoptions = 'hs:q'
	options = ('help', 'input=', 'encoding=', 'numproc=', 'findstart',
			'loose', 'quiet')
	try:
		opts, args = gnu_getopt(argv[2:] if args is None else args,
				shortoptions, options)
		opts = dict(opts)
		if len(args) > 1:
			raise ValueError('expected at most one argument; got %r' % args)
		numproc = int(opts.get('--numproc', 1))
		if numproc < 0:
			raise ValueError('numproc should be >= 0; got %d' % numproc)
	except (GetoptError, ValueError) as err:
		print('error: %s' % err, file=stderr)
		print(induce.__doc__, file=stderr)
		sysexit(2)
	if '-h' in opts or '--help' in opts:
		print(induce.__doc__)
		return
	quiet = '-q' in opts or '--quiet' in opts
	logging.basicConfig(level=logging.WARNING if quiet else logging.INFO,
			format='%(message)s')

	corpus = BracketCorpusReader(opts.get('--input', '-'),
			encoding=opts.get('--encoding', 'utf8'),
			strict='--loose' not in opts)
	trees = list(corpus.trees().values())
	if not trees:
		print('error: no trees could be read.', file=stderr)
		sysexit(1)
	logging.info('read %d trees', len(trees))
	start = opts.get('-s', trees[0].label)
	selectsubtree = (firstmatchingsubtree if '--findstart' in opts
			else wholetree)
	try:
		grammar = inducegrammar(start, trees, selectsubtree, numproc)
	except InductionError as err:
		print('error: %s' % err, file=stderr)
		sysexit(1)

	rules, lexicon, words = writegrammar(grammar)
	if args:
		for ext, data in (('rules', rules), ('lexicon', lexicon),
				('words', words)):
			with io.open('%s.%s' % (args[0], ext), 'w',
					encoding='utf8') as out:
				out.write(data)
		logging.info('wrote grammar to %s.{rules,lexicon,words}', args[0])
	else:
		sys.stdout.write(rules)
		sys.stdout.write(lexicon)
		sys.stdout.write(words)
	logging.info(grammarinfo(grammar))


if __name__ == "__main__":
	main()

__all__ = ['induce', 'main']
