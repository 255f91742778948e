# --- BEGIN COPYRIGHT BLOCK ---
# Copyright (C) 2026 Red Hat, Inc.
# All rights reserved.
#
# License: GPL (version 3 or any later version).
# See LICENSE for details.
# --- END COPYRIGHT BLOCK ---

import configparser
import logging
import os
import ldap
from dotenv import dotenv_values
from ldapacct._constants import (
    DEFAULT_CONFIG_PATH, DEFAULT_CONFIG_SECTION, DEFAULT_CONNECT_TIMEOUT,
    ENV_BIND_IP, ENV_BASE_DN, ENV_BIND_DN, ENV_BIND_PW,
)
from ldapacct.exceptions import InvalidArgumentError

log = logging.getLogger(__name__)

TLS_REQCERT = {
    'never': ldap.OPT_X_TLS_NEVER,
    'allow': ldap.OPT_X_TLS_ALLOW,
    'hard': ldap.OPT_X_TLS_HARD,
}

# environment variable -> config key
ENV_OVERLAY = [
    (ENV_BIND_IP, 'uri'),
    (ENV_BASE_DN, 'basedn'),
    (ENV_BIND_DN, 'binddn'),
    (ENV_BIND_PW, 'bindpw'),
]


def _empty_config():
    return {
        'uri': None,
        'basedn': None,
        'binddn': None,
        'bindpw': None,
        'starttls': False,
        'tls_reqcert': None,
        'timeout': DEFAULT_CONNECT_TIMEOUT,
    }


def _normalise_uri(uri):
    if uri is not None and '://' not in uri:
        return 'ldap://%s' % uri
    return uri


def _read_config(path, log):
    path = os.path.expanduser(path)
    log.debug("config path: %s" % path)
    config = configparser.ConfigParser()
    config.read([path])
    log.debug("config sections: %s" % config.sections())
    return config


def config_to_ldap(path, section, log=log):
    """
    Given a path to a file, return the connection details of a section,
    or None if the file or the section is missing.

    The file should be an ini file with the content:

    [default]
    uri = ldap://hostname:port
    basedn = dc=example,dc=com
    binddn = cn=admin,dc=example,dc=com
    bindpw = secret
    starttls = [true, false]
    tls_reqcert = [never, allow, hard]
    timeout = 5
    """
    config = _read_config(path, log)
    if not config.has_section(section):
        log.debug("config no such section: %s" % section)
        return None

    cfg = _empty_config()
    cfg['uri'] = _normalise_uri(config.get(section, 'uri', fallback=None))
    cfg['basedn'] = config.get(section, 'basedn', fallback=None)
    cfg['binddn'] = config.get(section, 'binddn', fallback=None)
    cfg['bindpw'] = config.get(section, 'bindpw', fallback=None)
    try:
        cfg['starttls'] = config.getboolean(section, 'starttls', fallback=False)
        cfg['timeout'] = config.getint(section, 'timeout', fallback=DEFAULT_CONNECT_TIMEOUT)
    except ValueError as e:
        raise InvalidArgumentError("%s [%s] %s" % (path, section, e))

    reqcert = config.get(section, 'tls_reqcert', fallback=None)
    if reqcert is not None:
        if reqcert not in TLS_REQCERT:
            raise InvalidArgumentError("%s [%s] tls_reqcert should be one of never, allow or hard" % (path, section))
        cfg['tls_reqcert'] = TLS_REQCERT[reqcert]

    log.debug("config completed with uri=%s basedn=%s binddn=%s" % (cfg['uri'], cfg['basedn'], cfg['binddn']))
    return cfg


def config_from_env(environ=None, cfg=None):
    """Overlay BIND_IP, BASE_DN, BIND_DN and BIND_PW from the environment on
    top of cfg (or an empty config).
    """
    if environ is None:
        environ = os.environ
    if cfg is None:
        cfg = _empty_config()
    for var, key in ENV_OVERLAY:
        value = environ.get(var)
        if value:
            cfg[key] = _normalise_uri(value) if key == 'uri' else value
    return cfg


def config_from_dotenv(dotenv_path, environ=None):
    """Return the variables of a .env file, overridden by the ones already
    set in environ.
    """
    if environ is None:
        environ = os.environ
    dotenv_path = os.path.expanduser(dotenv_path)
    log.debug("dotenv path: %s" % dotenv_path)
    merged = dict((k, v) for k, v in dotenv_values(dotenv_path).items() if v is not None)
    merged.update(environ)
    return merged


def load_config(path=DEFAULT_CONFIG_PATH, section=DEFAULT_CONFIG_SECTION, environ=None,
                dotenv_path=None):
    """Read the config file section, then the environment overlay. With
    dotenv_path, variables missing from the environment are taken from that
    .env file.

    :returns: dict with uri, basedn, binddn, bindpw, starttls, tls_reqcert, timeout
    :raises: InvalidArgumentError - if no uri or basedn is known
    """
    if dotenv_path is not None:
        environ = config_from_dotenv(dotenv_path, environ)
    cfg = config_to_ldap(path, section)
    cfg = config_from_env(environ, cfg)
    for key in ('uri', 'basedn'):
        if not cfg[key]:
            raise InvalidArgumentError("No %s configured in %s [%s] or the environment" % (key, path, section))
    return cfg
