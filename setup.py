"""setup.py for pcfgtool."""
from setuptools import setup

from pcfgtool import __version__

with open('README.rst') as inp:
	README = inp.read()

REQUIRES = [
		'numpy',  # '>=1.13'
		]
METADATA = dict(name='pcfgtool',
		version=__version__,
		description='Read off probabilistic context-free grammars '
			'from treebanks',
		long_description=README,
		classifiers=[
				'Development Status :: 4 - Beta',
				'Environment :: Console',
				'Intended Audience :: Science/Research',
				'Operating System :: POSIX',
				'Programming Language :: Python :: 3',
				'Topic :: Text Processing :: Linguistic',
		],
		packages=['pcfgtool'],
		python_requires='>=3.6',
		install_requires=REQUIRES,
		extras_require={'test': ['pytest']},
		entry_points={
			'console_scripts': ['pcfgtool = pcfgtool.cli:main']},
	)

if __name__ == '__main__':
	setup(**METADATA)
