#!/usr/bin/python3

# --- BEGIN COPYRIGHT BLOCK ---
# Copyright (C) 2026 Red Hat, Inc.
# All rights reserved.
#
# License: GPL (version 3 or any later version).
# See LICENSE for details.
# --- END COPYRIGHT BLOCK ---

#
# A setup.py file
#

from setuptools import setup, find_packages
from os import path

here = path.abspath(path.dirname(__file__))

version = "0.1.0"

with open(path.join(here, 'README.md'), 'r') as f:
    long_description = f.read()

setup(
    name='ldapacct',
    license='GPLv3+',
    version=version,
    description='Provisioning of POSIX user accounts in an LDAP directory',
    long_description=long_description,
    long_description_content_type='text/markdown',

    classifiers=[
        'Development Status :: 4 - Beta',
        'Intended Audience :: System Administrators',
        'Operating System :: POSIX :: Linux',
        'Programming Language :: Python :: 3',
        'Topic :: System :: Systems Administration :: Authentication/Directory :: LDAP',
        'Topic :: Software Development :: Libraries'],

    keywords='ldap posix account provisioning ssha',
    packages=find_packages(exclude=['tests*']),
    python_requires='>=3.6',

    install_requires=[
        'python-ldap',
        'python-dotenv',
        'setuptools',
        ],

    extras_require={
        'test': ['pytest'],
    },
)
