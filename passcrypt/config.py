"""passcrypt.config - configuration for hashing & authentication

:class:`AuthConfig` collects the handful of settings an application needs
to create hashers & authenticators, and can load them from an INI file::

    [passcrypt]
    algorithm = sha512
    iterations = 30000
    table_name = users
    identity_column = username
    credential_column = password
    dummy_hash = $6$rounds=30000$...
"""
#=========================================================
#imports
#=========================================================
#core
from configparser import ConfigParser
from io import StringIO
import logging; log = logging.getLogger(__name__)
#site
#pkg
from passcrypt.algorithms import norm_algorithm
from passcrypt.auth import DEFAULT_DUMMY_HASH, TimingSafeAuthenticator, \
                           DbTableRecordSource
from passcrypt.password import PasswordHasher, DEFAULT_ALGORITHM
#local
__all__ = [
    "AuthConfig",
]

#=========================================================
#config
#=========================================================
class AuthConfig(object):
    """settings for hashing passwords and authenticating against them

    :param algorithm: algorithm name, defaults to ``sha512``
    :param iterations: rounds count, defaults to the algorithm's default
    :param table_name: table searched by :class:`~passcrypt.auth.DbTableRecordSource`
    :param identity_column: record field holding the identity
    :param credential_column: record field holding the stored hash
    :param dummy_hash: hash verified against when an identity isn't found
    :param allow_ambiguous_identity: see :class:`~passcrypt.auth.TimingSafeAuthenticator`

    :raises KeyError: for unknown options
    :raises ~passcrypt.exc.UnsupportedAlgorithmError: for unknown algorithms
    """
    _defaults = dict(
        algorithm=DEFAULT_ALGORITHM,
        iterations=None,
        table_name="users",
        identity_column="username",
        credential_column="password",
        dummy_hash=DEFAULT_DUMMY_HASH,
        allow_ambiguous_identity=False,
        )

    def __init__(self, **kwds):
        for key in kwds:
            if key not in self._defaults:
                raise KeyError("unknown passcrypt option: %r" % (key,))
        opts = dict(self._defaults)
        opts.update(kwds)
        self.algorithm = norm_algorithm(opts['algorithm'])
        self.iterations = self._norm_int(opts['iterations'])
        self.table_name = opts['table_name']
        self.identity_column = opts['identity_column']
        self.credential_column = opts['credential_column']
        self.dummy_hash = opts['dummy_hash']
        self.allow_ambiguous_identity = self._norm_bool(opts['allow_ambiguous_identity'])

    @staticmethod
    def _norm_int(value):
        if value is None or value == "":
            return None
        return int(value)

    @staticmethod
    def _norm_bool(value):
        if isinstance(value, str):
            try:
                return ConfigParser.BOOLEAN_STATES[value.lower()]
            except KeyError:
                raise ValueError("not a boolean: %r" % (value,))
        return bool(value)

    #=========================================================
    #loading / saving
    #=========================================================
    @staticmethod
    def _parse_ini_stream(stream, section, filename):
        "helper read INI from stream, extract passcrypt section as dict"
        # interpolation would choke on '%' inside hashes & salts
        p = ConfigParser(interpolation=None)
        p.read_file(stream, filename)
        return dict(p.items(section))

    @classmethod
    def from_string(cls, source, section="passcrypt"):
        """create new config from an INI-formatted string.

        :param source: str containing INI-formatted content.
        :param section: name of section to read from, defaults to ``"passcrypt"``.
        """
        return cls(**cls._parse_ini_stream(StringIO(source), section, "<string>"))

    @classmethod
    def from_path(cls, path, section="passcrypt", encoding="utf-8"):
        """create new config from an INI-formatted file.

        :param path: path to INI file
        :param section: name of section to read from, defaults to ``"passcrypt"``.
        :param encoding: encoding of the file, defaults to ``"utf-8"``.
        """
        with open(path, "r", encoding=encoding) as stream:
            return cls(**cls._parse_ini_stream(stream, section, path))

    def to_dict(self):
        "return settings as dict of native values"
        return dict((key, getattr(self, key)) for key in self._defaults)

    def to_string(self, section="passcrypt"):
        "serialize to INI format"
        p = ConfigParser(interpolation=None)
        p.add_section(section)
        for key, value in sorted(self.to_dict().items()):
            if value is None:
                continue
            p.set(section, key, str(value))
        buf = StringIO()
        p.write(buf)
        return buf.getvalue()

    #=========================================================
    #factories
    #=========================================================
    def create_hasher(self, **kwds):
        "create :class:`~passcrypt.password.PasswordHasher` using these settings"
        return PasswordHasher(self.algorithm, self.iterations, **kwds)

    def create_authenticator(self, records=None, connection=None,
                             paramstyle="qmark", **kwds):
        """create :class:`~passcrypt.auth.TimingSafeAuthenticator` using these settings

        :param records: record source to authenticate against
        :param connection:
            alternately, a DB-API connection;
            records will be looked up in :attr:`table_name`.
        :param paramstyle: DB-API paramstyle of *connection*
        """
        if records is None and connection is not None:
            records = DbTableRecordSource(connection, self.table_name,
                                          self.identity_column, paramstyle)
        kwds.setdefault("hasher", self.create_hasher())
        return TimingSafeAuthenticator(
            records,
            credential_column=self.credential_column,
            dummy_hash=self.dummy_hash,
            allow_ambiguous_identity=self.allow_ambiguous_identity,
            **kwds)

#=========================================================
#eof
#=========================================================
