"""passcrypt utility functions"""
#=================================================================================
#imports
#=================================================================================
#core
import logging; log = logging.getLogger(__name__)
import os
#site
try:
    from legacycrypt import crypt as os_crypt
except ImportError: #pragma: no cover - host has no libcrypt / libxcrypt
    os_crypt = None
#pkg
from passcrypt.exc import ExpectedStringError, PasswordSizeError, \
                          WeakEntropyError
#local
__all__ = [
    #crypt(3) access
    'os_crypt',
    'safe_os_crypt',
    'test_crypt',
    'crypt_primitive',

    #secrets
    'MAX_PASSWORD_SIZE',
    'validate_secret',

    # string manipulation
    'consteq',

    #random
    'has_urandom',
    'getrandbytes',
]

#=================================================================================
#constants
#=================================================================================

#: upper bound on password size, see :exc:`~passcrypt.exc.PasswordSizeError`
MAX_PASSWORD_SIZE = int(os.environ.get("PASSCRYPT_MAX_PASSWORD_SIZE") or 4096)

#=================================================================================
#os crypt helpers
#=================================================================================
def safe_os_crypt(secret, hash):
    """wrapper around the host's crypt(3), as exposed by :mod:`legacycrypt`.

    crypt() takes in and returns str, converting to utf-8 internally;
    there is no way to call it using bytes. This wrapper accepts
    the secret as str or utf-8 bytes, and collapses the various ways
    crypt(3) reports failure into a single flag.

    :arg secret: password as bytes or str
    :arg hash: descriptor or full hash, as str

    :raises ValueError: if the secret contains a NUL character,
        which the C call would silently truncate at.

    :returns:
        ``(False, None)`` if the password can't be hashed
        (non utf-8 secret, crypt() unavailable, or descriptor rejected),
        or ``(True, result: str)`` otherwise.
    """
    if isinstance(secret, bytes):
        # decode secret using utf-8, and make sure it re-encodes to
        # match the original - otherwise the call to os_crypt()
        # will encode the wrong password.
        orig = secret
        try:
            secret = secret.decode("utf-8")
        except UnicodeDecodeError:
            return False, None
        if secret.encode("utf-8") != orig:
            return False, None
    if u'\x00' in secret:
        raise ValueError("null char in secret")
    if os_crypt is None:
        return False, None
    result = os_crypt(secret, hash)
    # glibc signals failure with NULL; libxcrypt returns "*0" / "*1"
    if not result or result.startswith("*"):
        return False, None
    return True, result

def test_crypt(secret, hash):
    "check if crypt(3) reproduces a known hash; used to detect supported algorithms"
    ok, result = safe_os_crypt(secret, hash)
    return ok and result == hash

def crypt_primitive(secret, setting):
    """default hashing primitive used by :class:`~passcrypt.password.PasswordHasher`.

    :returns: the crypt(3) output for *setting*, or ``None`` if crypt() failed.
    """
    ok, result = safe_os_crypt(secret, setting)
    return result if ok else None

#=================================================================================
#secret validation
#=================================================================================
def validate_secret(secret):
    "ensure secret has correct type & size"
    if not isinstance(secret, (str, bytes)):
        raise ExpectedStringError(secret, "secret")
    if len(secret) > MAX_PASSWORD_SIZE:
        raise PasswordSizeError()

#=================================================================================
#string helpers
#=================================================================================
def consteq(left, right):
    """compare two hash strings in time proportional to ``len(right)``

    used by :meth:`~passcrypt.password.PasswordHasher.verify` to compare
    crypt(3)'s output against the stored hash; the runtime doesn't depend
    on where (or whether) the two differ.

    :raises TypeError: unless both inputs are str, or both are bytes.
    """
    if isinstance(left, str) and isinstance(right, str):
        left = left.encode("utf-8")
        right = right.encode("utf-8")
    elif not (isinstance(left, bytes) and isinstance(right, bytes)):
        raise TypeError("inputs must be both str or bytes")

    # on a size mismatch, still loop over all of 'right'
    if len(left) == len(right):
        tmp = left
        result = 0
    else:
        tmp = right
        result = 1
    for l, r in zip(tmp, right):
        result |= l ^ r
    return result == 0

#=================================================================================
#randomness
#=================================================================================

#NOTE:
# unlike salts for most schemes, the entropy here feeds a salt that
# must be unpredictable; so only os.urandom() is acceptable, and
# its absence is an error rather than a reason to fall back to a prng.

try:
    os.urandom(1)
    has_urandom = True
except NotImplementedError: #pragma: no cover
    has_urandom = False

def getrandbytes(count):
    """return byte-string containing *count* cryptographically strong random bytes

    :raises ~passcrypt.exc.WeakEntropyError:
        if the os has no strong random source, or it returned short.
    """
    if not has_urandom: #pragma: no cover
        raise WeakEntropyError("os.urandom() is not available on this host")
    try:
        value = os.urandom(count)
    except NotImplementedError: #pragma: no cover
        raise WeakEntropyError("os.urandom() is not available on this host")
    if len(value) != count:
        raise WeakEntropyError("os.urandom() returned %d bytes, expected %d"
                               % (len(value), count))
    return value

#=================================================================================
#eof
#=================================================================================
