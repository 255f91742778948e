# --- BEGIN COPYRIGHT BLOCK ---
# Copyright (C) 2026 Red Hat, Inc.
# All rights reserved.
#
# License: GPL (version 3 or any later version).
# See LICENSE for details.
# --- END COPYRIGHT BLOCK ---

import io
import ldif
from ldap.cidict import cidict

from ldapacct.utils import ensure_str, ensure_list_str, ensure_list_bytes, display_log_data


class Entry(object):
    """This class represents an LDAP Entry object.

        An LDAP entry consists of a DN and a list of attributes.
        Each attribute consists of a name and a *list* of values.
            ex. {
                'uid': ['user01'],
                'cn': ['User'],
                'objectclass': ['inetOrgPerson', 'posixAccount']
             }

        Values are kept as str. Instance variables:
          dn - string - the string DN of the entry
          data - cidict - case insensitive dict of the attributes and values
    """

    def __init__(self, entrydata):
        """entrydata is either a search result entry (dn, {dict...}) as
        returned by python-ldap, or a string DN for a new empty entry.
        """
        self.dn = None
        self.data = cidict()
        if isinstance(entrydata, tuple):
            self.dn = ensure_str(entrydata[0])
            for k, v in entrydata[1].items():
                self.data[ensure_str(k)] = ensure_list_str(v)
        elif isinstance(entrydata, str):
            if '=' not in entrydata:
                raise ValueError('Entry dn must contain "="')
            self.dn = entrydata
        elif entrydata is not None:
            raise TypeError("unknown entry data type %s" % type(entrydata))

    def __bool__(self):
        return self.dn is not None

    def __eq__(self, other):
        """Two entries are the same if they share the DN and the value sets
        of every attribute. Both must have been retrieved with the same
        attribute list for this to be meaningful.
        """
        if not isinstance(other, Entry):
            return False
        if self.dn != other.dn:
            return False
        if set(a.lower() for a in self.getAttrs()) != set(a.lower() for a in other.getAttrs()):
            return False
        for key in self.getAttrs():
            if set(self.getValues(key)) != set(other.getValues(key)):
                return False
        return True

    def __ne__(self, other):
        return not self.__eq__(other)

    def hasAttr(self, name):
        return ensure_str(name) in self.data

    def __getitem__(self, name):
        return self.getValues(name)

    def __getattr__(self, name):
        """
        If name is the name of an LDAP attribute, return the first
        value for that attribute, so entry.cn can be used instead of
        entry.getValue('cn'). Missing attributes give None.
        """
        if name.startswith('__') or name in ('dn', 'data'):
            raise AttributeError(name)
        return self.getValue(name)

    def getValues(self, name):
        """Get the list (array) of values for the attribute named name"""
        return self.data.get(name, [])

    def getValue(self, name):
        """Get the first value for the attribute named name"""
        return self.data.get(name, [None])[0]

    def hasValue(self, name, val):
        return val in self.getValues(name)

    def setValues(self, name, *value):
        if len(value) == 1 and isinstance(value[0], (list, tuple)):
            value = value[0]
        self.data[name] = ensure_list_str(value)

    def update(self, dct):
        for k, v in dct.items():
            self.setValues(k, v)

    def getAttrs(self):
        return list(self.data.keys())

    def toTupleList(self):
        """
        Convert the attrs and values to the [(attr, [bytes, ...]), ...]
        form python-ldap wants for an add.
        """
        return [(k, ensure_list_bytes(v)) for k, v in self.data.items()]

    def toDict(self):
        return dict((k, list(v)) for k, v in self.data.items())

    def __repr__(self):
        """Convert the Entry to its LDIF representation, masking sensitive
        values.
        """
        sio = io.StringIO()
        ldif.LDIFWriter(sio).unparse(self.dn, dict(
            (k, ensure_list_bytes(v)) for k, v in display_log_data(self.toDict()).items()))
        return sio.getvalue()

    def __str__(self):
        return self.__repr__()
