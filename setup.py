#!/usr/bin/env python
#
# Authors:
# rafael@postgresql.org.es / http://www.postgresql.org.es/
#
# Copyright (c) 2014-2016 USIT-University of Oslo
#
# This file is part of Zabbix-triggers
# https://github.com/unioslo/zabbix-triggers
#
# Zabbix-triggers is free software: you can redistribute it and/or modify
# it under the terms of the GNU General Public License as published by
# the Free Software Foundation, either version 3 of the License, or
# (at your option) any later version.
#
# Zabbix-triggers is distributed in the hope that it will be useful,
# but WITHOUT ANY WARRANTY; without even the implied warranty of
# MERCHANTABILITY or FITNESS FOR A PARTICULAR PURPOSE.  See the
# GNU General Public License for more details.
#
# You should have received a copy of the GNU General Public License
# along with Zabbix-triggers.  If not, see <http://www.gnu.org/licenses/>.

import os.path

from setuptools import find_packages
from setuptools import setup

here = os.path.abspath(os.path.dirname(__file__))

'''
setup.py installation file
'''
about = {}
with open(os.path.join(here, 'zabbix_triggers', '__about__.py'), 'r') as version_file:
    exec(version_file.read(), about)

install_requires = [
    'httpx>=0.26',
    'packaging',
    'platformdirs>=3.0',
    'pydantic>=2.6',
    'rich>=13.0',
    'strenum>=0.4',
    'tomli>=2.0',
    'typer>=0.12',
    'typing_extensions>=4.8',
]

test_requires = [
    'freezegun',
    'inline-snapshot',
    'pytest',
    'pytest-httpserver',
    'werkzeug',
]

setup(name='zabbix-triggers',
      version=about['__version__'],
      description=about['DESCRIPTION'],
      author='USIT-University of Oslo',
      url='https://github.com/unioslo/zabbix-triggers',
      packages=find_packages(include=['zabbix_triggers', 'zabbix_triggers.*']),
      entry_points={
          'console_scripts': [
              'zabbix-triggers = zabbix_triggers.main:main',
          ],
      },
      python_requires='>=3.9',
      install_requires=install_requires,
      extras_require={'test': test_requires},
      platforms=['Linux'],
      classifiers=[
          'Environment :: Console',
          'Development Status :: 5 - Production/Stable',
          'Topic :: System :: Monitoring',
          'Intended Audience :: System Administrators',
          'License :: OSI Approved :: GNU General Public License v3 or later (GPLv3+)',
          'Programming Language :: Python',
          'Programming Language :: Python :: 3',
      ],
      )
