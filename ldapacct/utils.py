# --- BEGIN COPYRIGHT BLOCK ---
# Copyright (C) 2026 Red Hat, Inc.
# All rights reserved.
#
# License: GPL (version 3 or any later version).
# See LICENSE for details.
# --- END COPYRIGHT BLOCK ---

"""Utilities shared by the session and the entry model."""

import os
from ldap.cidict import cidict
from ldapacct._constants import SENSITIVE_ATTRS

# Set DEBUGGING to see sensitive values in debug logs.
DEBUGGING = os.getenv('DEBUGGING', default=False)

HIDDEN_VALUE = '********'


def ensure_bytes(val):
    if val is not None and not isinstance(val, bytes):
        return val.encode()
    return val


def ensure_str(val):
    if val is not None and not isinstance(val, str):
        try:
            result = val.decode('utf-8')
        except UnicodeDecodeError:
            # binary value, just return str repr?
            result = str(val)
        return result
    return val


def ensure_list_bytes(val):
    return [ensure_bytes(v) for v in val]


def ensure_list_str(val):
    return [ensure_str(v) for v in val]


def display_log_value(attr, value, hide_value=HIDDEN_VALUE):
    # Mask all the sensitive attribute values
    if DEBUGGING:
        return value
    if attr.lower() in SENSITIVE_ATTRS:
        if type(value) in (list, tuple):
            return [hide_value for _ in value]
        return hide_value
    return value


def display_log_data(data, hide_value=HIDDEN_VALUE):
    """Return a copy of an attribute dict, or a modlist, with the sensitive
    values masked.

    :param data: {attr: [values]} or [(attr, [values])] or [(op, attr, [values])]
    :returns: masked copy of the same shape
    """
    if isinstance(data, (dict, cidict)):
        return dict((k, display_log_value(k, v, hide_value)) for k, v in data.items())
    masked = []
    for item in data:
        if len(item) == 3:
            op, attr, value = item
            masked.append((op, attr, display_log_value(attr, value, hide_value)))
        else:
            attr, value = item
            masked.append((attr, display_log_value(attr, value, hide_value)))
    return masked
