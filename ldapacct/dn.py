# --- BEGIN COPYRIGHT BLOCK ---
# Copyright (C) 2026 Red Hat, Inc.
# All rights reserved.
#
# License: GPL (version 3 or any later version).
# See LICENSE for details.
# --- END COPYRIGHT BLOCK ---

"""Account DN construction.

An account DN is uid=<uid>,ou=<ou>,<basedn>. It is assembled as a list of
RDNs in the python-ldap str2dn form and only turned into a string at the end,
so a uid that would change the DN structure is rejected instead of producing
a malformed DN.
"""

import ldap
import ldap.dn
from ldapacct._constants import OrganizationalUnit
from ldapacct.exceptions import InvalidArgumentError

RDN = 'uid'
OU_ATTR = 'ou'


def to_ou(ou):
    """Return the OrganizationalUnit for a member, its value or its name"""
    if isinstance(ou, OrganizationalUnit):
        return ou
    for member in OrganizationalUnit:
        if str(ou).lower() in (member.value.lower(), member.name.lower()):
            return member
    raise InvalidArgumentError("Unknown organizational unit %r" % (ou,))


def _check_uid(uid):
    if uid is None or uid == '':
        raise InvalidArgumentError("uid must not be empty")
    if ldap.dn.escape_dn_chars(uid) != uid:
        raise InvalidArgumentError("uid %r contains characters that are special in a DN" % uid)


def _parse_basedn(basedn):
    if basedn is None:
        raise InvalidArgumentError("basedn must not be None")
    try:
        return ldap.dn.str2dn(basedn)
    except ldap.DECODING_ERROR:
        raise InvalidArgumentError("basedn %r is not a valid DN" % basedn)


def dn_components(uid, ou, basedn):
    """Build the structured form of an account DN

    :param uid: the login identifier
    :type uid: str
    :param ou: the subtree category
    :type ou: OrganizationalUnit
    :param basedn: the root for application entries
    :type basedn: str
    :returns: list of RDNs, each a list of (attr, value, flags)
    :raises: InvalidArgumentError
    """
    _check_uid(uid)
    return [
        [(RDN, uid, ldap.AVA_STRING)],
        [(OU_ATTR, to_ou(ou).value, ldap.AVA_STRING)],
    ] + _parse_basedn(basedn)


def build_dn(uid, ou, basedn):
    return ldap.dn.dn2str(dn_components(uid, ou, basedn))


def build_people_dn(uid, basedn):
    return build_dn(uid, OrganizationalUnit.PEOPLE, basedn)


def dn_to_uid(dn):
    """Return the uid value of the leading RDN of dn"""
    try:
        rdns = ldap.dn.str2dn(dn)
    except ldap.DECODING_ERROR:
        raise InvalidArgumentError("%r is not a valid DN" % dn)
    if not rdns or rdns[0][0][0].lower() != RDN:
        raise InvalidArgumentError("%r is not a uid= DN" % dn)
    return rdns[0][0][1]
