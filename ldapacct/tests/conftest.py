# --- BEGIN COPYRIGHT BLOCK ---
# Copyright (C) 2026 Red Hat, Inc.
# All rights reserved.
#
# License: GPL (version 3 or any later version).
# See LICENSE for details.
# --- END COPYRIGHT BLOCK ---

import re
import ldap
import ldap.dn
import pytest
from ldap.cidict import cidict

from ldapacct import DirectorySession
from ldapacct._constants import DEFAULT_SUFFIX
from ldapacct.passwd import password_verify

ADMIN_DN = 'cn=admin,%s' % DEFAULT_SUFFIX
ADMIN_PW = 'password'
PEOPLE_DN = 'ou=People,%s' % DEFAULT_SUFFIX

TEST_USER_PROPERTIES = {
    'uid': 'testuser',
    'userPassword': 'password',
    'cn': 'testuser',
    'sn': 'user',
    'uidNumber': '1000',
    'gidNumber': '2000',
    'homeDirectory': '/home/testuser',
}


def _norm(dn):
    return ldap.dn.dn2str(ldap.dn.str2dn(dn)).lower()


def _unescape(value):
    return re.sub(r'\\([0-9a-fA-F]{2})', lambda m: chr(int(m.group(1), 16)), value)


def _filter_error():
    return ldap.FILTER_ERROR({'desc': 'Bad search filter'})


def _parse(s, i):
    if i >= len(s) or s[i] != '(':
        raise _filter_error()
    i += 1
    if s[i] in '&|!':
        op = s[i]
        i += 1
        children = []
        while i < len(s) and s[i] == '(':
            child, i = _parse(s, i)
            children.append(child)
        if i >= len(s) or s[i] != ')':
            raise _filter_error()
        return (op, children), i + 1
    end = s.find(')', i)
    if end < 0 or '=' not in s[i:end]:
        raise _filter_error()
    attr, _, value = s[i:end].partition('=')
    return ('=', attr.strip(), value), end + 1


def parse_filter(filterstr):
    filterstr = filterstr.strip()
    if not filterstr.startswith('('):
        filterstr = '(%s)' % filterstr
    node, pos = _parse(filterstr, 0)
    if pos != len(filterstr):
        raise _filter_error()
    return node


def _match(node, attrs):
    op = node[0]
    if op == '&':
        return all(_match(c, attrs) for c in node[1])
    if op == '|':
        return any(_match(c, attrs) for c in node[1])
    if op == '!':
        return not _match(node[1][0], attrs)
    _, attr, value = node
    values = [v.decode('utf-8').lower() for v in attrs.get(attr, [])]
    if value == '*':
        return len(values) > 0
    return _unescape(value).lower() in values


class FakeLDAPObject(object):
    """Stands in for ldap.ldapobject.LDAPObject.

    Entries live in a dict. Simple binds are checked against the admin
    credentials or the entry's userPassword ({SSHA} or clear). Writes need
    the admin identity. Errors are the python-ldap ones a server would
    cause. Every call is recorded in self.calls.
    """

    def __init__(self, admin_dn=ADMIN_DN, admin_pw=ADMIN_PW, suffix=DEFAULT_SUFFIX):
        self._uri = 'ldap://fake.example.com:389'
        self.admin_dn = admin_dn
        self.admin_pw = admin_pw
        self.entries = {}
        self.bound_dn = None
        self.calls = []
        self.down = False
        self.unbound = False
        self.options = {}
        self.seed(suffix, {'objectClass': ['top', 'domain'], 'dc': ['example']})
        self.seed('ou=People,%s' % suffix, {'objectClass': ['top', 'organizationalUnit'], 'ou': ['People']})

    def seed(self, dn, attrs):
        data = cidict()
        for k, v in attrs.items():
            data[k] = [x if isinstance(x, bytes) else x.encode('utf-8') for x in v]
        self.entries[_norm(dn)] = (dn, data)

    def get(self, dn):
        return self.entries.get(_norm(dn))

    def _check_up(self):
        if self.down:
            raise ldap.SERVER_DOWN({'desc': "Can't contact LDAP server"})

    def _check_write(self):
        if self.bound_dn != _norm(self.admin_dn):
            raise ldap.INSUFFICIENT_ACCESS({'desc': 'Insufficient access'})

    def simple_bind_s(self, who='', cred='', serverctrls=None, clientctrls=None):
        self.calls.append(('bind', who))
        self._check_up()
        self.bound_dn = None
        if _norm(who) == _norm(self.admin_dn) and cred == self.admin_pw:
            self.bound_dn = _norm(who)
            return (97, [], 1, [])
        entry = self.get(who)
        if entry is not None:
            for v in entry[1].get('userPassword', []):
                stored = v.decode('utf-8')
                if (stored.upper().startswith('{SSHA}') and password_verify(cred, stored)) or stored == cred:
                    self.bound_dn = _norm(who)
                    return (97, [], 1, [])
        raise ldap.INVALID_CREDENTIALS({'desc': 'Invalid credentials'})

    def add_ext_s(self, dn, modlist, serverctrls=None, clientctrls=None):
        self.calls.append(('add', dn, modlist))
        self._check_up()
        self._check_write()
        if self.get(dn) is not None:
            raise ldap.ALREADY_EXISTS({'desc': 'Already exists'})
        parent = _norm(dn).split(',', 1)[1]
        if parent not in self.entries:
            raise ldap.NO_SUCH_OBJECT({'desc': 'No such object', 'matched': parent})
        data = cidict()
        for attr, values in modlist:
            for v in values:
                if not isinstance(v, bytes):
                    raise TypeError("('Tuple_to_LDAPMod(): expected a byte string in the list', %r)" % v)
            data[attr] = list(values)
        self.entries[_norm(dn)] = (dn, data)
        return (105, [], 2, [])

    def modify_ext_s(self, dn, modlist, serverctrls=None, clientctrls=None):
        self.calls.append(('modify', dn, modlist))
        self._check_up()
        self._check_write()
        entry = self.get(dn)
        if entry is None:
            raise ldap.NO_SUCH_OBJECT({'desc': 'No such object'})
        data = entry[1]
        for op, attr, values in modlist:
            if op == ldap.MOD_REPLACE:
                data[attr] = list(values)
            elif op == ldap.MOD_ADD:
                data[attr] = data.get(attr, []) + list(values)
            elif op == ldap.MOD_DELETE:
                if values is None:
                    data.pop(attr, None)
                else:
                    data[attr] = [v for v in data.get(attr, []) if v not in values]
        return (103, [], 3, [])

    def delete_ext_s(self, dn, serverctrls=None, clientctrls=None):
        self.calls.append(('delete', dn))
        self._check_up()
        self._check_write()
        if self.get(dn) is None:
            raise ldap.NO_SUCH_OBJECT({'desc': 'No such object'})
        del self.entries[_norm(dn)]
        return (107, [], 4, [])

    def search_ext_s(self, base, scope, filterstr='(objectClass=*)', attrlist=None, attrsonly=0,
                     serverctrls=None, clientctrls=None, timeout=-1, sizelimit=0):
        self.calls.append(('search', base, scope, filterstr, attrlist))
        self._check_up()
        nbase = _norm(base)
        if nbase not in self.entries:
            raise ldap.NO_SUCH_OBJECT({'desc': 'No such object'})
        node = parse_filter(filterstr)
        wanted = None
        if attrlist is not None and '*' not in attrlist:
            wanted = set(a.lower() for a in attrlist)
        results = []
        for ndn, (dn, data) in sorted(self.entries.items()):
            if scope == ldap.SCOPE_BASE and ndn != nbase:
                continue
            if scope == ldap.SCOPE_ONELEVEL and ndn.split(',', 1)[1:] != [nbase]:
                continue
            if scope == ldap.SCOPE_SUBTREE and not (ndn == nbase or ndn.endswith(',' + nbase)):
                continue
            if not _match(node, data):
                continue
            attrs = dict((k, list(v)) for k, v in data.items()
                         if wanted is None or k.lower() in wanted)
            results.append((dn, attrs))
        return results

    def set_option(self, option, invalue):
        self.options[option] = invalue

    def start_tls_s(self):
        self.calls.append(('starttls',))
        self._check_up()

    def unbind_s(self):
        self.calls.append(('unbind',))
        self.unbound = True
        self.bound_dn = None


@pytest.fixture
def fake_conn():
    return FakeLDAPObject()


@pytest.fixture
def session(fake_conn):
    return DirectorySession(DEFAULT_SUFFIX, conn=fake_conn)


@pytest.fixture
def admin_session(session):
    session.bind(ADMIN_DN, ADMIN_PW)
    return session


@pytest.fixture
def fixed_randbytes():
    """A random source that always returns the same salt"""
    def randbytes(n):
        return bytes(range(1, n + 1))
    return randbytes
