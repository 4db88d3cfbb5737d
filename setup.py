"""
Packaging script for PyPI.
"""
import setuptools
from pathlib import Path

try:
	from boozetools.macroparse.runtime import make_tables
except ImportError:
	pass
else:
	make_tables(Path(__file__).parent / "rexpr" / "Rust.md")

setuptools.setup(
	name='rexpr-json',
	author='rexpr contributors',
	version='0.1.0',
	packages=['rexpr', ],
	package_data={
		'rexpr': ["Rust.md", "Rust.automaton"],
	},
	entry_points={
		'console_scripts': ["rexpr = rexpr.cmdline:main"],
	},
	license='MIT',
	description='Parse one Rust expression and print its syntax tree as canonical JSON',
	long_description=open('README.md').read(),
	long_description_content_type="text/markdown",
	classifiers=[
		"Programming Language :: Python :: 3.9",
		"License :: OSI Approved :: MIT License",
		"Operating System :: OS Independent",
		"Development Status :: 3 - Alpha",
		"Intended Audience :: Developers",
		"Topic :: Software Development :: Compilers",
		"Topic :: Software Development :: Testing",
		"Environment :: Console",
	],
	python_requires='>=3.9',
	install_requires=[
		"booze-tools>=0.6.3",
	],
)
