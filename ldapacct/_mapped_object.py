# --- BEGIN COPYRIGHT BLOCK ---
# Copyright (C) 2026 Red Hat, Inc.
# All rights reserved.
#
# License: GPL (version 3 or any later version).
# See LICENSE for details.
# --- END COPYRIGHT BLOCK ---

import ldap
from ldap import filter as ldap_filter
import logging
from ldapacct.exceptions import (
        AlreadyExists, BindError, ConnectError, NoSuchEntryError, ProtocolError
        )

# python-ldap errors meaning the transport is gone
CONNECTION_ERRORS = (ldap.SERVER_DOWN, ldap.CONNECT_ERROR, ldap.TIMEOUT)


def _gen(op=None, extra=None):
    filt = ''
    if type(extra) == list:
        for ext in extra:
            filt += ext
    elif type(extra) == str:
        filt += extra
    if filt != '':
        filt = '(%s%s)' % (op, filt)
    return filt


def _gen_and(extra=None):
    return _gen('&', extra)


def _gen_filter(attrtypes, values, extra=None):
    filt = ''
    if attrtypes is None:
        raise ValueError("Attempting to filter on type that doesn't support filtering!")
    for attr, value in zip(attrtypes, values):
        if attr is not None and value is not None:
            filt += '(%s=%s)' % (attr, ldap_filter.escape_filter_chars(value))
    if extra is not None:
        filt += '{FILT}'.format(FILT=extra)
    return filt


def _result_of(e):
    if len(e.args) >= 1 and isinstance(e.args[0], dict):
        return e.args[0]
    return {'desc': str(e)}


def _translate(e, bind=False):
    """Map a python-ldap error to the ldapacct error taxonomy"""
    result = _result_of(e)
    if isinstance(e, CONNECTION_ERRORS):
        return ConnectError(result)
    if bind:
        return BindError(result)
    if isinstance(e, ldap.ALREADY_EXISTS):
        return AlreadyExists(result)
    if isinstance(e, ldap.NO_SUCH_OBJECT):
        return NoSuchEntryError(result)
    return ProtocolError(result)


# Define wrappers around the ldap operation to have a clear diagnostic
def _ldap_op_s(session, f, fname, *args, **kwargs):
    # f.__name__ may be anything, so the wanted name is provided as argument
    bind = kwargs.pop('bind', False)
    try:
        return f(*args, **kwargs)
    except ldap.LDAPError as e:
        new_desc = f"{fname}({args[:1]}) on {session.uri}"
        if len(e.args) >= 1 and isinstance(e.args[0], dict):
            e.args[0]['ldap_request'] = new_desc
        logging.getLogger(__name__).debug(f"{new_desc} failed: args={e.args}")
        raise _translate(e, bind=bind) from e


def _simple_bind_s(session, *args, **kwargs):
    return _ldap_op_s(session, session.conn.simple_bind_s, 'simple_bind_s', *args, bind=True, **kwargs)


def _add_ext_s(session, *args, **kwargs):
    return _ldap_op_s(session, session.conn.add_ext_s, 'add_ext_s', *args, **kwargs)


def _modify_ext_s(session, *args, **kwargs):
    return _ldap_op_s(session, session.conn.modify_ext_s, 'modify_ext_s', *args, **kwargs)


def _delete_ext_s(session, *args, **kwargs):
    return _ldap_op_s(session, session.conn.delete_ext_s, 'delete_ext_s', *args, **kwargs)


def _search_ext_s(session, *args, **kwargs):
    return _ldap_op_s(session, session.conn.search_ext_s, 'search_ext_s', *args, **kwargs)


class DSLogging(object):
    """The benefit of this is automatic name detection, and correct application
    of level and verbosity to the object.

    :param verbose: False by default
    :type verbose: bool
    """

    def __init__(self, verbose=False):
        self._log = logging.getLogger(type(self).__name__)
        if verbose:
            self._log.setLevel(logging.DEBUG)
        else:
            self._log.setLevel(logging.INFO)
