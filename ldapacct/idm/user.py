# --- BEGIN COPYRIGHT BLOCK ---
# Copyright (C) 2026 Red Hat, Inc.
# All rights reserved.
#
# License: GPL (version 3 or any later version).
# See LICENSE for details.
# --- END COPYRIGHT BLOCK ---

from ldapacct._constants import (
    OrganizationalUnit,
    POSIX_ACCOUNT_OBJECTCLASSES,
    DEFAULT_LOGIN_SHELL,
    DEFAULT_HOME_PREFIX,
)
from ldapacct.dn import build_dn, to_ou
from ldapacct.exceptions import InvalidArgumentError
from ldapacct.passwd import PasswordHasher

MUST_ATTRIBUTES = [
    'uid',
    'cn',
    'sn',
    'uidNumber',
    'gidNumber',
    'homeDirectory',
]

# LDAP attribute name -> AccountRecord field
ATTRIBUTE_FIELDS = [
    ('cn', 'cn'),
    ('sn', 'sn'),
    ('uid', 'uid'),
    ('userPassword', 'password'),
    ('homeDirectory', 'home_directory'),
    ('loginShell', 'login_shell'),
    ('gecos', 'gecos'),
    ('givenName', 'given_name'),
    ('displayName', 'display_name'),
    ('uidNumber', 'uid_number'),
    ('gidNumber', 'gid_number'),
]


class AccountRecord(object):
    """A POSIX account to be provisioned.

    Naming attributes that are not given default to the uid, the home
    directory to /home/<uid> and the shell to /bin/bash. uid_number and
    gid_number have no default.

    :param uid: login identifier, used as the RDN
    :type uid: str
    :param password: plaintext password, only ever stored hashed
    :type password: str
    :param ou: subtree the account belongs to
    :type ou: OrganizationalUnit
    """

    def __init__(self, uid, password, cn=None, sn=None, home_directory=None,
                 login_shell=None, given_name=None, display_name=None,
                 uid_number=None, gid_number=None, gecos=None,
                 ou=OrganizationalUnit.PEOPLE):
        if not uid:
            raise InvalidArgumentError("uid must not be empty")
        self.uid = uid
        self.password = password
        self.cn = cn if cn is not None else uid
        self.sn = sn if sn is not None else uid
        self.home_directory = home_directory if home_directory is not None else '%s/%s' % (DEFAULT_HOME_PREFIX, uid)
        self.login_shell = login_shell if login_shell is not None else DEFAULT_LOGIN_SHELL
        self.given_name = given_name if given_name is not None else self.cn
        self.display_name = display_name if display_name is not None else self.cn
        self.gecos = gecos if gecos is not None else self.cn
        self.uid_number = uid_number
        self.gid_number = gid_number
        self.ou = to_ou(ou)

    @classmethod
    def from_properties(cls, properties, ou=OrganizationalUnit.PEOPLE):
        """Build a record from LDAP attribute names, eg.
        {'uid': 'testuser', 'userPassword': 'password', 'uidNumber': '1000', ...}

        Values may be single values or one-element lists.
        """
        lower = dict((k.lower(), v) for k, v in properties.items())
        kwargs = {}
        for attr, field in ATTRIBUTE_FIELDS:
            value = lower.get(attr.lower())
            if isinstance(value, (list, tuple)):
                if len(value) != 1:
                    raise InvalidArgumentError("Attribute %s takes exactly one value" % attr)
                value = value[0]
            kwargs[field] = value
        uid = kwargs.pop('uid')
        password = kwargs.pop('password')
        return cls(uid, password, ou=ou, **kwargs)

    def __repr__(self):
        return "%s(uid=%r, ou=%s)" % (self.__class__.__name__, self.uid, self.ou)

    def get_dn(self, basedn):
        return build_dn(self.uid, self.ou, basedn)

    def _validate(self):
        if self.password is None:
            raise InvalidArgumentError('Attribute userPassword must not be None')
        for attr, field in ATTRIBUTE_FIELDS:
            if attr in MUST_ATTRIBUTES and getattr(self, field) in (None, ''):
                raise InvalidArgumentError('Attribute %s must not be None' % attr)

    def to_attribute_set(self, hasher=None):
        """Return the attributes used to create the entry.

        userPassword is hashed with hasher, never copied from the plaintext.

        :param hasher: PasswordHasher, a default one if None
        :type hasher: ldapacct.passwd.PasswordHasher
        :returns: {attr: [value, ...]}
        :raises: InvalidArgumentError - if a must attribute is missing
        """
        self._validate()
        if hasher is None:
            hasher = PasswordHasher()
        attrs = {'objectClass': list(POSIX_ACCOUNT_OBJECTCLASSES)}
        for attr, field in ATTRIBUTE_FIELDS:
            if field == 'password':
                attrs[attr] = [hasher.hash(self.password)]
            else:
                attrs[attr] = [str(getattr(self, field))]
        return attrs
