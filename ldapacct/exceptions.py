# --- BEGIN COPYRIGHT BLOCK ---
# Copyright (C) 2026 Red Hat, Inc.
# All rights reserved.
#
# License: GPL (version 3 or any later version).
# See LICENSE for details.
# --- END COPYRIGHT BLOCK ---

import ldap


class Error(Exception):
    pass


class InvalidArgumentError(Error):
    pass


class LDAPResultError(Error):
    """Base for errors carrying a server result.

    :param result: the result dict python-ldap attached to the error
    :type result: dict
    """

    def __init__(self, result=None):
        if not isinstance(result, dict):
            result = {'desc': str(result) if result is not None else ''}
        super(LDAPResultError, self).__init__(result)
        self.result = result

    @property
    def desc(self):
        return self.result.get('desc', '')

    @property
    def info(self):
        return self.result.get('info', '')

    def __str__(self):
        if self.info:
            return '%s: %s' % (self.desc, self.info)
        return self.desc


class ConnectError(LDAPResultError):
    """The transport failed. The session is unusable."""
    pass


class BindError(LDAPResultError):
    pass


class ProtocolError(LDAPResultError):
    pass


class AlreadyExists(LDAPResultError, ldap.ALREADY_EXISTS):
    pass


class NoSuchEntryError(LDAPResultError, ldap.NO_SUCH_OBJECT):
    pass


class VerificationError(Error):
    """The password was replaced but a bind with it did not succeed.

    :param result: the outcome of the change
    :type result: ldapacct.PasswordChangeResult
    """

    def __init__(self, result):
        super(VerificationError, self).__init__(
            "Password of %s was changed but could not be verified: %s" % (result.dn, result.error))
        self.result = result
