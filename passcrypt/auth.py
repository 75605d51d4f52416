"""passcrypt.auth - authentication against stored crypt(3) hashes

:class:`TimingSafeAuthenticator` checks a credential against the records
found for an identity. When no record exists, it still verifies the
credential against a dummy hash before failing, so that a missing identity
costs the same crypt(3) work as a wrong password; otherwise response times
would tell an attacker which identities exist.

The records themselves come from a *record source*: any object with a
``find(identity)`` method returning a sequence of dict-like records.
Two are provided, :class:`MemoryRecordSource` and :class:`DbTableRecordSource`.
"""
#=========================================================
#imports
#=========================================================
#core
from base64 import b64encode
import logging; log = logging.getLogger(__name__)
from warnings import warn
#site
#pkg
from passcrypt.algorithms import Algorithm, norm_algorithm, get_algorithm_info
from passcrypt.descriptor import split_descriptor
from passcrypt.exc import PasscryptConfigWarning
from passcrypt.password import PasswordHasher
from passcrypt.utils import getrandbytes
#local
__all__ = [
    "DEFAULT_DUMMY_HASH",
    "AuthResult",
    "TimingSafeAuthenticator",
    "make_dummy_hash",
    "check_dummy_hash",
    "MemoryRecordSource",
    "DbTableRecordSource",
]

#=========================================================
#constants
#=========================================================

#: dummy hash verified against when an identity isn't found.
#: it uses the default hasher settings (sha512, 5000 rounds); deployments
#: using other settings should replace it (see :func:`make_dummy_hash`).
#: the checksum isn't the output of any known key.
DEFAULT_DUMMY_HASH = ("$6$rounds=5000$YXHvzmVVstW6zJ0o$VCix7vFOjbEltjD.rKnikit0Q6vn"
                      "Gt1yyG7CeuUD78KSjcwg9Ji2HWk0qlzwDtQx9NcNcXeT8BcjRuL./joXk/")

#: same message for unknown identity & wrong credential
GENERIC_FAILURE_MESSAGE = "Supplied credential is invalid."
AMBIGUOUS_MESSAGE = "More than one record matches the supplied identity."
SUCCESS_MESSAGE = "Authentication successful."

#=========================================================
#result
#=========================================================
class AuthResult(object):
    """outcome of a single authentication attempt

    .. attribute:: code

        one of the ``SUCCESS`` / ``FAILURE_xxx`` constants below.

    .. attribute:: identity

        the identity authentication was attempted for.

    .. attribute:: messages

        list of human readable messages. Both identity-not-found and
        credential-invalid failures report :data:`GENERIC_FAILURE_MESSAGE`.

    .. attribute:: record

        on success, the matched record, minus its credential column.
    """
    SUCCESS = 1
    FAILURE = 0
    FAILURE_IDENTITY_NOT_FOUND = -1
    FAILURE_IDENTITY_AMBIGUOUS = -2
    FAILURE_CREDENTIAL_INVALID = -3
    FAILURE_UNCATEGORIZED = -4

    def __init__(self, code, identity=None, messages=None, record=None):
        self.code = code
        self.identity = identity
        self.messages = list(messages or [])
        self.record = record

    def is_valid(self):
        "``True`` if authentication succeeded"
        return self.code > 0

    def __repr__(self):
        return "<AuthResult code=%d identity=%r>" % (self.code, self.identity)

#=========================================================
#authenticator
#=========================================================
class TimingSafeAuthenticator(object):
    """authenticate credentials against stored hashes
    without leaking whether the identity exists.

    :param records:
        record source; required by :meth:`authenticate`,
        but not by :meth:`validate_candidates`.

    :param credential_column:
        name of the record field holding the stored hash.

    :param dummy_hash:
        hash verified against when no record is found. It should use the
        same algorithm & rounds as the stored hashes, and must never be a
        hash that appears in the stored data.

    :param hasher:
        :class:`~passcrypt.password.PasswordHasher` used for verification.

    :param record_validator:
        optional callable run on a record whose hash matched;
        if it returns false, the attempt fails as an invalid credential.

    :param allow_ambiguous_identity:
        if ``False`` (the default), more than one record for an identity
        fails with ``FAILURE_IDENTITY_AMBIGUOUS``.
        if ``True``, each record is tried in order and the first match wins.

    :raises ValueError: if *dummy_hash* isn't a recognizable crypt(3) hash.

    Issues :exc:`~passcrypt.exc.PasscryptConfigWarning` if *dummy_hash*
    doesn't use the hasher's algorithm & rounds (see :func:`check_dummy_hash`).
    """
    def __init__(self, records=None, credential_column="password",
                 dummy_hash=DEFAULT_DUMMY_HASH, hasher=None,
                 record_validator=None, allow_ambiguous_identity=False):
        self.hasher = hasher or PasswordHasher()
        # a dummy crypt() can't parse would fail instantly, defeating its purpose
        check_dummy_hash(dummy_hash, self.hasher.algorithm, self.hasher.iterations)
        self.records = records
        self.credential_column = credential_column
        self.dummy_hash = dummy_hash
        self.record_validator = record_validator
        self.allow_ambiguous_identity = allow_ambiguous_identity

    def authenticate(self, identity, credential):
        """look up *identity* in the record source and check *credential*

        :returns: :class:`AuthResult`
        """
        if self.records is None:
            raise RuntimeError("no record source configured")
        if not identity:
            raise ValueError("an identity must be provided")
        candidates = self.records.find(identity)
        return self.validate_candidates(candidates, credential, identity)

    def validate_candidates(self, candidates, credential, identity=None):
        """check *credential* against the records found for an identity

        every path through this method performs at least one full
        crypt(3) verification before returning.

        :returns: :class:`AuthResult`
        """
        candidates = list(candidates)
        if not candidates:
            self.hasher.verify(credential, self.dummy_hash)
            log.debug("authentication failed for %r: identity not found", identity)
            return AuthResult(AuthResult.FAILURE_IDENTITY_NOT_FOUND, identity,
                              [GENERIC_FAILURE_MESSAGE])
        if len(candidates) > 1 and not self.allow_ambiguous_identity:
            self._validate_record(candidates[0], credential, identity)
            log.debug("authentication failed for %r: %d records found",
                      identity, len(candidates))
            return AuthResult(AuthResult.FAILURE_IDENTITY_AMBIGUOUS, identity,
                              [AMBIGUOUS_MESSAGE])
        for record in candidates:
            result = self._validate_record(record, credential, identity)
            if result.is_valid():
                break
        log.debug("authentication for %r: code %d", identity, result.code)
        return result

    def _validate_record(self, record, credential, identity):
        stored = record.get(self.credential_column)
        if isinstance(stored, bytes):
            try:
                stored = stored.decode("ascii")
            except UnicodeDecodeError:
                stored = None
        if not isinstance(stored, str) or not stored:
            # no usable hash stored (eg missing or NULL column); still pay the cost
            self.hasher.verify(credential, self.dummy_hash)
            return AuthResult(AuthResult.FAILURE_CREDENTIAL_INVALID, identity,
                              [GENERIC_FAILURE_MESSAGE])
        if not self.hasher.verify(credential, stored):
            return AuthResult(AuthResult.FAILURE_CREDENTIAL_INVALID, identity,
                              [GENERIC_FAILURE_MESSAGE])
        if self.record_validator is not None and not self.record_validator(record):
            return AuthResult(AuthResult.FAILURE_CREDENTIAL_INVALID, identity,
                              [GENERIC_FAILURE_MESSAGE])
        record = dict((k, v) for k, v in record.items()
                      if k != self.credential_column)
        return AuthResult(AuthResult.SUCCESS, identity, [SUCCESS_MESSAGE], record)

#=========================================================
#dummy hash helpers
#=========================================================
def make_dummy_hash(algorithm=Algorithm.sha512, iterations=None):
    """generate a dummy hash with the given cost settings

    the hashed key is random and immediately discarded,
    so the result can't match any real credential.
    """
    key = b64encode(getrandbytes(24)).decode("ascii")
    return PasswordHasher(algorithm, iterations).hash(key)

def check_dummy_hash(dummy_hash, algorithm, iterations=None):
    """check if dummy hash uses the given algorithm & rounds

    issues :exc:`~passcrypt.exc.PasscryptConfigWarning` if it doesn't,
    since verifying against it would then take a different amount of time
    than verifying a real hash.

    :raises ValueError: if *dummy_hash* isn't a recognizable crypt(3) hash.

    :returns: ``True`` if the settings match.
    """
    algorithm = norm_algorithm(algorithm)
    info = get_algorithm_info(algorithm)
    dummy_algorithm, dummy_rounds, _ = split_descriptor(dummy_hash)
    if dummy_algorithm is not algorithm:
        warn("dummy hash uses %s, but hashes are configured to use %s" %
             (dummy_algorithm, algorithm), PasscryptConfigWarning)
        return False
    if info.min_rounds is None:
        return True
    if iterations is None:
        iterations = info.default_rounds
    if algorithm is Algorithm.ext_des and iterations % 2 == 0:
        iterations -= 1
    if dummy_rounds != iterations:
        warn("dummy hash uses %d rounds, but hashes are configured to use %d" %
             (dummy_rounds, iterations), PasscryptConfigWarning)
        return False
    return True

#=========================================================
#record sources
#=========================================================
class MemoryRecordSource(object):
    """record source backed by an in-memory list of dicts

    :param records: initial records
    :param identity_column: name of the field holding the identity
    """
    def __init__(self, records=(), identity_column="username"):
        self.identity_column = identity_column
        self._records = [dict(r) for r in records]

    def add(self, record):
        "add a record"
        self._records.append(dict(record))

    def find(self, identity):
        return [dict(r) for r in self._records
                if r.get(self.identity_column) == identity]

class DbTableRecordSource(object):
    """record source backed by a DB-API 2.0 connection

    records are found with a query on the identity column only;
    the credential never appears in the query, it's checked
    afterwards by crypt(3).

    :param connection: DB-API connection
    :param table_name: table to query
    :param identity_column: column holding the identity
    :param paramstyle:
        the driver's DB-API paramstyle
        (``qmark``, ``format``, ``pyformat``, ``named`` or ``numeric``);
        defaults to ``qmark``, as used by :mod:`sqlite3`.
    """
    _placeholders = {
        "qmark": "?",
        "format": "%s",
        "pyformat": "%(identity)s",
        "named": ":identity",
        "numeric": ":1",
        }

    def __init__(self, connection, table_name, identity_column="username",
                 paramstyle="qmark"):
        if paramstyle not in self._placeholders:
            raise ValueError("unknown paramstyle: %r" % (paramstyle,))
        self.connection = connection
        self.table_name = table_name
        self.identity_column = identity_column
        self.paramstyle = paramstyle

    @staticmethod
    def quote_identifier(name):
        "quote an sql identifier"
        return '"%s"' % name.replace('"', '""')

    def get_query(self):
        "return sql used to find records for an identity"
        return "SELECT * FROM %s WHERE %s = %s" % (
            self.quote_identifier(self.table_name),
            self.quote_identifier(self.identity_column),
            self._placeholders[self.paramstyle],
            )

    def find(self, identity):
        if self.paramstyle in ("pyformat", "named"):
            params = {"identity": identity}
        else:
            params = (identity,)
        cursor = self.connection.cursor()
        try:
            cursor.execute(self.get_query(), params)
            columns = [d[0] for d in cursor.description]
            return [dict(zip(columns, row)) for row in cursor.fetchall()]
        finally:
            cursor.close()

#=========================================================
#eof
#=========================================================
