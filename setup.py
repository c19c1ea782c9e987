#!/usr/bin/env python3

from setuptools import setup, find_packages

setup(name = 'befunge',
      version = '0.1.1',
      description = 'Befunge interpreter.',
      author = 'Delfad0r',
      author_email = 'filippo.gianni.baroni@gmail.com',
      license = 'LGPL3',
      packages = find_packages(exclude = ['tests']),
      python_requires = '>=3.6',
      extras_require = {
          'test' : ['pytest']
      },
      entry_points = {
          'console_scripts' : [
              'befunge=befunge.befunge:main'
          ]
      })
