# --- BEGIN COPYRIGHT BLOCK ---
# Copyright (C) 2026 Red Hat, Inc.
# All rights reserved.
#
# License: GPL (version 3 or any later version).
# See LICENSE for details.
# --- END COPYRIGHT BLOCK ---

import base64
import hashlib
import pytest

from ldapacct.passwd import PasswordHasher, password_hash, password_verify


def _decode(hashed):
    return base64.b64decode(hashed[len('{SSHA}'):])


@pytest.mark.parametrize('pw', ['test12345678', '', 'päss wörd', 'x' * 256])
def test_hash_format(pw):
    hashed = password_hash(pw)
    assert hashed.startswith('{SSHA}')
    raw = _decode(hashed)
    # 20 bytes of sha1 digest followed by 4 bytes of salt
    assert len(raw) == 24
    digest, salt = raw[:20], raw[20:]
    assert hashlib.sha1(pw.encode('utf-8') + salt).digest() == digest


def test_hash_is_salted():
    assert password_hash('test12345678') != password_hash('test12345678')


def test_hash_with_fixed_salt(fixed_randbytes):
    hasher = PasswordHasher(randbytes=fixed_randbytes)
    first = hasher.hash('secret')
    assert first == hasher.hash('secret')
    expected = hashlib.sha1(b'secret' + b'\x01\x02\x03\x04').digest() + b'\x01\x02\x03\x04'
    assert first == '{SSHA}' + base64.b64encode(expected).decode('ascii')


def test_salt_source_is_checked():
    hasher = PasswordHasher(randbytes=lambda n: b'\x00')
    with pytest.raises(ValueError):
        hasher.hash('secret')


def test_verify():
    hashed = password_hash('test12345678')
    assert password_verify('test12345678', hashed)
    assert password_verify('test12345678', hashed.encode('ascii'))
    assert not password_verify('12345678', hashed)


def test_verify_other_salt_length():
    salt = b'12345678'
    value = '{SSHA}' + base64.b64encode(hashlib.sha1(b'pw' + salt).digest() + salt).decode('ascii')
    assert password_verify('pw', value)


@pytest.mark.parametrize('value', [
    'test12345678',
    '{SHA}' + base64.b64encode(hashlib.sha1(b'test12345678').digest()).decode('ascii'),
    '{SSHA}not base64!',
    '{SSHA}' + base64.b64encode(b'short').decode('ascii'),
])
def test_verify_rejects_other_values(value):
    assert not password_verify('test12345678', value)
