# --- BEGIN COPYRIGHT BLOCK ---
# Copyright (C) 2026 Red Hat, Inc.
# All rights reserved.
#
# License: GPL (version 3 or any later version).
# See LICENSE for details.
# --- END COPYRIGHT BLOCK ---

"""The ldapacct module.
    Provisioning of POSIX accounts in an LDAP directory: a DirectorySession
    owns one connection, binds as an administrator or a user, and creates,
    searches, re-passwords and deletes accounts under ou=People of its
    base DN.
"""

import ldap

from ldapacct._constants import *
from ldapacct._entry import Entry
from ldapacct._mapped_object import (
    DSLogging, _gen_and, _gen_filter, _simple_bind_s, _add_ext_s, _modify_ext_s,
    _delete_ext_s, _search_ext_s, _translate,
)
from ldapacct.dn import build_people_dn, dn_to_uid
from ldapacct.idm.user import AccountRecord
from ldapacct.passwd import PasswordHasher
from ldapacct.utils import ensure_bytes, display_log_data
from ldapacct.exceptions import *


class PasswordChangeResult(object):
    """Outcome of DirectorySession.change_password

    :param dn: DN of the account
    :param modified: the userPassword replace was accepted
    :param verified: a bind with the new password succeeded
    :param error: the error that stopped verification, if any
    """

    def __init__(self, dn, modified, verified, error=None):
        self.dn = dn
        self.modified = modified
        self.verified = verified
        self.error = error

    @property
    def uid(self):
        return dn_to_uid(self.dn)

    def __bool__(self):
        return self.modified and self.verified

    def __repr__(self):
        return "PasswordChangeResult(dn=%r, modified=%r, verified=%r, error=%r)" % (
            self.dn, self.modified, self.verified, self.error)


class DirectorySession(DSLogging):
    """One connection to a directory server and the identity bound on it.

    The session starts UNBOUND when given a connection (or INIT, until
    open() is called). A successful bind moves it to BOUND as that DN.
    A failed bind leaves it UNBOUND: the identity held before the attempt
    is gone and the caller has to bind again.

    Not safe for concurrent use; a bind changes the identity every other
    operation runs under.

    :param basedn: root of searches and account DNs
    :type basedn: str
    :param conn: a python-ldap LDAPObject, None to call open() later
    :type conn: ldap.ldapobject.LDAPObject
    :param uri: server uri, used for logging when conn is given
    :type uri: str
    :param hasher: password hasher, PasswordHasher() by default
    :type hasher: ldapacct.passwd.PasswordHasher
    :param verbose: debug logging
    :type verbose: bool
    """

    def __init__(self, basedn, conn=None, uri=None, hasher=None, verbose=False):
        super(DirectorySession, self).__init__(verbose)
        self.verbose = verbose
        self.basedn = basedn
        self.uri = uri if uri is not None else getattr(conn, '_uri', None)
        self._conn = conn
        self._hasher = hasher if hasher is not None else PasswordHasher()
        self._identity = None
        # The last explicit bind, restored by rebind()
        self.binddn = None
        self.bindpw = None
        if conn is None:
            self.state = SESSION_STATE_INIT
        else:
            self.state = SESSION_STATE_UNBOUND

    def __str__(self):
        return "%s (%s)" % (self.uri, self.basedn)

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc_value, traceback):
        self.close()

    @property
    def conn(self):
        return self._conn

    @property
    def identity(self):
        """DN the session is currently bound as, None when unbound"""
        return self._identity

    @property
    def is_bound(self):
        return self.state == SESSION_STATE_BOUND

    def _require_state(self, *states):
        if self.state not in states:
            raise ValueError("Invalid state %s for this operation on %s" % (self.state, self))

    def _require_bound(self):
        self._require_state(SESSION_STATE_BOUND)

    def open(self, uri=None, starttls=False, timeout=DEFAULT_CONNECT_TIMEOUT, reqcert=None):
        """Create the connection. Nothing is sent to the server until the
        first operation, unless starttls is requested.

        :param uri: ldap://host:port or ldaps://host:port
        :type uri: str
        :param starttls: negotiate StartTLS on a plain ldap:// connection
        :type starttls: bool
        :param timeout: connect timeout in seconds
        :type timeout: int
        :param reqcert: ldap.OPT_X_TLS_NEVER, _ALLOW or _HARD; None leaves
            the policy from ldap.conf
        :type reqcert: int
        :raises: ConnectError
        """
        self._require_state(SESSION_STATE_INIT)
        if uri is not None:
            self.uri = uri
        if self.uri is None:
            raise InvalidArgumentError("No uri to open")

        self._log.debug('open(): Connecting to uri %s', self.uri)
        try:
            conn = ldap.initialize(self.uri)
            conn.set_option(ldap.OPT_PROTOCOL_VERSION, ldap.VERSION3)
            conn.set_option(ldap.OPT_REFERRALS, 0)
            conn.set_option(ldap.OPT_NETWORK_TIMEOUT, timeout)
            if reqcert is not None:
                self._log.debug("Using certificate policy %s", reqcert)
                conn.set_option(ldap.OPT_X_TLS_REQUIRE_CERT, reqcert)
                # Tell python ldap to make a new TLS context with this information.
                conn.set_option(ldap.OPT_X_TLS_NEWCTX, 0)
            if starttls and not self.uri.startswith('ldaps'):
                conn.start_tls_s()
        except ldap.LDAPError as e:
            self._log.debug("Cannot connect to %r: %s", self.uri, e)
            error = _translate(e)
            if not isinstance(error, ConnectError):
                error = ConnectError(error.result)
            raise error from e
        self._conn = conn
        self.state = SESSION_STATE_UNBOUND

    def close(self):
        """Unbind and drop the connection. The session can not be reused."""
        try:
            if self.state in (SESSION_STATE_UNBOUND, SESSION_STATE_BOUND):
                self._conn.unbind_s()
        finally:
            self._identity = None
            self.state = SESSION_STATE_CLOSED

    def _authenticate(self, dn, password):
        self._require_state(SESSION_STATE_UNBOUND, SESSION_STATE_BOUND)
        self._log.debug("bind as %s", dn)
        try:
            if dn and not password:
                # A DN with an empty password is an unauthenticated bind, not a login
                raise BindError({'desc': 'Invalid credentials', 'info': 'empty password'})
            _simple_bind_s(self, dn, password)
        except Error:
            # Whatever was bound before is no longer trusted.
            self._identity = None
            self.state = SESSION_STATE_UNBOUND
            raise
        self._identity = dn
        self.state = SESSION_STATE_BOUND

    def bind(self, dn, password):
        """Authenticate as dn, usually the administrator. The credentials
        are kept so rebind() can come back to this identity.

        :raises: BindError, ConnectError
        """
        self._authenticate(dn, password)
        self.binddn = dn
        self.bindpw = password
        self._log.debug("bound as %s", dn)

    def rebind(self):
        """Bind again as the identity of the last successful bind()"""
        if self.binddn is None:
            raise ValueError("No identity to rebind, call bind() first")
        self._authenticate(self.binddn, self.bindpw)

    def verify_password(self, dn, password):
        """Bind as dn with password. On success the session is bound as dn.

        :raises: BindError - the credential was rejected, the session is unbound
        """
        self._authenticate(dn, password)

    def check_login(self, uid, password):
        """Bind as the People account uid with password.

        :raises: BindError - the credential was rejected, the session is unbound
        """
        dn = build_people_dn(uid, self.basedn)
        try:
            self.verify_password(dn, password)
        except BindError:
            self._log.info("Login failed for %s", dn)
            raise
        self._log.info("Login successful for %s", dn)

    def search(self, scope=SearchScope.SUBTREE, filterstr='(objectClass=*)', attrlist=None):
        """Search below the session base DN

        :param scope: SearchScope, or 'base', 'one', 'subtree'
        :param filterstr: LDAP filter
        :type filterstr: str
        :param attrlist: attributes to return, None for all
        :type attrlist: list
        :returns: list of Entry, possibly empty
        """
        self._require_bound()
        if not isinstance(scope, SearchScope):
            try:
                scope = SCOPE_NAMES[str(scope).lower()]
            except KeyError:
                raise InvalidArgumentError("Unknown search scope %r" % (scope,))
        self._log.debug("search %s %s %s %s", self.basedn, scope.name, filterstr, attrlist)
        results = _search_ext_s(self, self.basedn, scope.value, filterstr, attrlist=attrlist)
        # Search references come back with a None dn
        return [Entry(r) for r in results if r[0] is not None]

    def get_account(self, uid, attrlist=None):
        """Find the posixAccount with this uid anywhere under the base DN

        :returns: Entry or None
        :raises: ProtocolError - if more than one entry has this uid
        """
        filterstr = _gen_and(_gen_filter(['objectClass', 'uid'], ['posixAccount', uid]))
        entries = self.search(SearchScope.SUBTREE, filterstr, attrlist)
        if len(entries) == 0:
            return None
        if len(entries) > 1:
            raise ProtocolError({'desc': 'Too many objects matched selection criteria',
                                 'info': filterstr})
        return entries[0]

    def account_exists(self, uid):
        return self.get_account(uid, attrlist=['uid']) is not None

    def add_account(self, record):
        """Create the entry for record with its password hashed

        :param record: the account to create, or a dict of its LDAP
            attributes (see AccountRecord.from_properties)
        :type record: ldapacct.idm.user.AccountRecord
        :returns: DN of the new entry
        :raises: AlreadyExists, ProtocolError, InvalidArgumentError
        """
        self._require_bound()
        if isinstance(record, dict):
            record = AccountRecord.from_properties(record)
        dn = record.get_dn(self.basedn)
        e = Entry(dn)
        e.update(record.to_attribute_set(self._hasher))
        self._log.debug('Creating %s : %s', dn, display_log_data(e.toDict()))
        _add_ext_s(self, dn, e.toTupleList())
        self._log.info("Entry added successfully: %s", dn)
        return dn

    def delete_account(self, uid):
        """Delete the People account uid

        :raises: NoSuchEntryError, ProtocolError
        """
        self._require_bound()
        dn = build_people_dn(uid, self.basedn)
        _delete_ext_s(self, dn)
        self._log.info("User %s deleted successfully from DN: %s", uid, dn)

    def change_password(self, uid, new_password):
        """Replace the userPassword of the People account uid, then bind
        with the new password to prove it works. Nothing is rolled back if
        that bind fails.

        On success the session is bound as the account; call rebind() to
        go back to the administrator.

        :returns: PasswordChangeResult with modified and verified set
        :raises: NoSuchEntryError, ProtocolError - the password was not changed
        :raises: VerificationError - the password was changed, the bind failed
        """
        self._require_bound()
        dn = build_people_dn(uid, self.basedn)
        hashed = self._hasher.hash(new_password)
        mods = [(ldap.MOD_REPLACE, 'userPassword', [ensure_bytes(hashed)])]
        self._log.debug("%s modify: %s", dn, display_log_data(mods))
        _modify_ext_s(self, dn, mods)
        self._log.info("Password modification successful for DN: %s", dn)

        try:
            self.verify_password(dn, new_password)
        except (BindError, ConnectError) as e:
            self._log.error("Password verification failed for %s: %s", dn, e)
            raise VerificationError(PasswordChangeResult(dn, True, False, e)) from e
        self._log.info("Password verification successful for DN: %s", dn)
        return PasswordChangeResult(dn, True, True)


def connect_session(cfg, hasher=None, verbose=False):
    """Open a session from a config dict (see ldapacct.config.load_config)
    and bind with its binddn, if there is one.

    :returns: DirectorySession
    :raises: ConnectError, BindError
    """
    session = DirectorySession(cfg['basedn'], hasher=hasher, verbose=verbose)
    session.open(cfg['uri'], starttls=cfg.get('starttls', False),
                 timeout=cfg.get('timeout', DEFAULT_CONNECT_TIMEOUT),
                 reqcert=cfg.get('tls_reqcert'))
    if cfg.get('binddn'):
        try:
            session.bind(cfg['binddn'], cfg.get('bindpw') or '')
        except Error:
            session.close()
            raise
    return session
