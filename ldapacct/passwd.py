# --- BEGIN COPYRIGHT BLOCK ---
# Copyright (C) 2026 Red Hat, Inc.
# All rights reserved.
#
# License: GPL (version 3 or any later version).
# See LICENSE for details.
# --- END COPYRIGHT BLOCK ---

"""
This file contains helpers to generate salted SHA-1 (SSHA) password hashes
for the userPassword attribute. The format is understood by OpenLDAP,
389 Directory Server and every other SSHA-compatible consumer:

    {SSHA}base64(sha1(password + salt) + salt)
"""

import base64
import binascii
import hashlib
import hmac
import os

from ldapacct._constants import SSHA_TAG, SSHA_SALT_LENGTH, SHA1_DIGEST_LENGTH
from ldapacct.utils import ensure_bytes


class PasswordHasher(object):
    """Produce SSHA hashes of plaintext passwords.

    :param randbytes: callable returning n random bytes, os.urandom by default.
        Tests substitute a fixed source to get deterministic output.
    :type randbytes: callable
    :param salt_length: number of salt bytes
    :type salt_length: int
    """

    def __init__(self, randbytes=None, salt_length=SSHA_SALT_LENGTH):
        if randbytes is None:
            randbytes = os.urandom
        self._randbytes = randbytes
        self._salt_length = salt_length

    def salt(self):
        salt = self._randbytes(self._salt_length)
        if len(salt) != self._salt_length:
            raise ValueError("Random source returned %d bytes, expected %d" % (len(salt), self._salt_length))
        return salt

    def hash(self, pw):
        """Generate an SSHA hash with a fresh salt.

        :param pw: the password, may be empty
        :type pw: str
        :returns: a string with a password hash
        """
        salt = self.salt()
        digest = hashlib.sha1(ensure_bytes(pw) + salt).digest()
        return SSHA_TAG + base64.b64encode(digest + salt).decode('ascii')

    def verify(self, pw, hashed):
        """Check a plaintext against an SSHA value. Any salt length is accepted.

        :param pw: the password to check
        :type pw: str
        :param hashed: a {SSHA} value, as str or bytes
        :type hashed: str
        :returns: True if the password matches
        """
        if isinstance(hashed, bytes):
            hashed = hashed.decode('ascii', errors='replace')
        if not hashed.upper().startswith(SSHA_TAG):
            return False
        try:
            raw = base64.b64decode(hashed[len(SSHA_TAG):], validate=True)
        except (binascii.Error, ValueError):
            return False
        if len(raw) <= SHA1_DIGEST_LENGTH:
            return False
        digest, salt = raw[:SHA1_DIGEST_LENGTH], raw[SHA1_DIGEST_LENGTH:]
        return hmac.compare_digest(hashlib.sha1(ensure_bytes(pw) + salt).digest(), digest)


def password_hash(pw, randbytes=None):
    """Generate an SSHA password hash

    :param pw: the password
    :type pw: str
    :param randbytes: random source for the salt, os.urandom by default
    :type randbytes: callable

    :returns: a string with a password hash
    """
    return PasswordHasher(randbytes).hash(pw)


def password_verify(pw, hashed):
    return PasswordHasher().verify(pw, hashed)
