# --- BEGIN COPYRIGHT BLOCK ---
# Copyright (C) 2026 Red Hat, Inc.
# All rights reserved.
#
# License: GPL (version 3 or any later version).
# See LICENSE for details.
# --- END COPYRIGHT BLOCK ---

from enum import Enum
import ldap


class OrganizationalUnit(Enum):
    """The subtree category an entry lives under: ou=<value>,<basedn>"""
    PEOPLE = "People"
    GROUP = "Group"
    OTHER = "Other"

    def __str__(self):
        return self.value


class SearchScope(Enum):
    BASE = ldap.SCOPE_BASE
    ONELEVEL = ldap.SCOPE_ONELEVEL
    SUBTREE = ldap.SCOPE_SUBTREE


# Short names accepted wherever a SearchScope is.
SCOPE_NAMES = {
    'base': SearchScope.BASE,
    'one': SearchScope.ONELEVEL,
    'onelevel': SearchScope.ONELEVEL,
    'subtree': SearchScope.SUBTREE,
}

# State of a DirectorySession object
SESSION_STATE_INIT = 1
SESSION_STATE_UNBOUND = 2
SESSION_STATE_BOUND = 3
SESSION_STATE_CLOSED = 4

# Password storage
SSHA_TAG = '{SSHA}'
SSHA_SALT_LENGTH = 4
SHA1_DIGEST_LENGTH = 20

# Attributes that should be masked from logging output
SENSITIVE_ATTRS = ['userpassword']

POSIX_ACCOUNT_OBJECTCLASSES = [
    'inetOrgPerson',
    'posixAccount',
    'shadowAccount',
]

DEFAULT_LOGIN_SHELL = '/bin/bash'
DEFAULT_HOME_PREFIX = '/home'

DEFAULT_SUFFIX = 'dc=example,dc=com'
DEFAULT_CONNECT_TIMEOUT = 5

# Configuration file and environment overlay
DEFAULT_CONFIG_PATH = '~/.ldapacctrc'
DEFAULT_CONFIG_SECTION = 'default'
ENV_BIND_IP = 'BIND_IP'
ENV_BASE_DN = 'BASE_DN'
ENV_BIND_DN = 'BIND_DN'
ENV_BIND_PW = 'BIND_PW'
