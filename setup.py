#!/usr/bin/env python

'''
setup.py file for peptag
'''

from setuptools import setup
import re
import os


def read(rel_path):
    here = os.path.abspath(os.path.dirname(__file__))
    with open(os.path.join(here, rel_path), 'r') as fp:
        return fp.read()


def get_version(rel_path):
    for line in read(rel_path).splitlines():
        if line.startswith('__version__'):
            delim = '"' if '"' in line else "'"
            return line.split(delim)[1]
    raise RuntimeError("Unable to find version string.")


long_description = re.sub(r':py:\w+:`([^`]+)`',
        lambda m: '**{}**'.format(m.group(1)),
        read('README.rst') + '\n' + read('INSTALL'))


extras_require = {'exhaustive': ['numpy']}
extras_require['all'] = sorted(set(sum(extras_require.values(), [])))
extras_require['test'] = extras_require['all'] + ['pytest']


setup(
    name               = 'peptag',
    version            = get_version('peptag/version.py'),
    description        = 'Peptide patterns and sequence tags with mass gaps.',
    long_description   = long_description,
    long_description_content_type = 'text/x-rst',
    author             = 'Anton Goloborodko & Lev Levitsky',
    packages           = ['peptag', 'peptag.auxiliary'],
    python_requires    = '>=3.6',
    extras_require     = extras_require,
    classifiers        = ['Intended Audience :: Science/Research',
                          'Programming Language :: Python :: 3',
                          'Topic :: Scientific/Engineering :: Bio-Informatics',
                          'Topic :: Scientific/Engineering :: Chemistry',
                          'Topic :: Software Development :: Libraries'],
    license            = 'License :: OSI Approved :: Apache Software License',
    zip_safe           = False,
    )
