#!/usr/bin/env python

from setuptools import setup, find_packages

import bitdecoder

short_description = 'A library for decoding bit packed binary data.'
long_description = """\
A library for decoding binary data given a specification put together in
python. Specifications read individual bits and bytes, choose between
sub-specifications and check the decoded values, producing a tree of named
values. Decoded trees can be written out as xml.
"""

setup(name='bitdecoder',
      version=bitdecoder.__version__,
      description=short_description,
      long_description=long_description,
      author='Henry Ludemann',
      author_email='henry@protocollogic.com',
      url='http://www.protocollogic.com/',
      packages=find_packages(exclude=['*.test', '*.test.*']),
      entry_points={'console_scripts': [
          'bitdecode = bitdecoder.tools.decode:main',
          ]},
      install_requires=['pyparsing>=3.0'],
      extras_require={'test': ['pytest']},
      python_requires='>=3.7',
      zip_safe=True,
      license="GNU LGPL",
      classifiers=[
          'Development Status :: 3 - Alpha',
          'Environment :: Console',
          'Intended Audience :: Developers',
          'License :: OSI Approved :: GNU Library or Lesser General Public License (LGPL)',
          'Operating System :: OS Independent',
          'Programming Language :: Python :: 3',
          'Topic :: Software Development :: Libraries :: Python Modules',
          'Topic :: Utilities',
          ],
     )
