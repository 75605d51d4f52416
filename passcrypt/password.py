"""passcrypt.password - hashing & verifying passwords through crypt(3)

:class:`PasswordHasher` holds the settings for a single hash
(algorithm, rounds, salt or the entropy to derive it from, and the key),
builds the crypt(3) descriptor from them, and hands it to the hashing
primitive::

    >>> from passcrypt.password import PasswordHasher
    >>> hasher = PasswordHasher().set_algorithm("sha512").set_iterations(5000)
    >>> hash = hasher.hash("secret")
    >>> hasher.verify("secret", hash)
    True
"""
#=========================================================
#imports
#=========================================================
#core
import logging; log = logging.getLogger(__name__)
from warnings import warn
#site
#pkg
from passcrypt.algorithms import Algorithm, norm_algorithm, is_available
from passcrypt.descriptor import build_descriptor
from passcrypt.exc import AlgorithmUnavailableError, ExpectedStringError, \
                          PasscryptSecurityWarning, WeakEntropyError
from passcrypt.salt import sanitize_salt, salt_from_entropy
from passcrypt.utils import consteq, crypt_primitive, getrandbytes, \
                            validate_secret
#local
__all__ = [
    "PasswordHasher",
    "hash_password",
    "verify_password",
]

#=========================================================
#constants
#=========================================================

#: number of random bytes generated when no entropy was provided;
#: base64 encodes these into a 40 char salt, enough for every algorithm.
DEFAULT_ENTROPY_SIZE = 30

#: smallest entropy size which still yields a 16 char salt
MIN_ENTROPY_SIZE = 12

DEFAULT_ALGORITHM = Algorithm.sha512

#=========================================================
#hasher
#=========================================================
class PasswordHasher(object):
    """Builds a crypt(3) hash for a key, with explicit control over
    the algorithm, rounds and salt.

    All ``set_xxx`` methods return the hasher itself, so calls can be chained.

    :param algorithm:
        algorithm name or :class:`~passcrypt.algorithms.Algorithm`;
        defaults to ``sha512``.

    :param iterations:
        rounds count; if omitted the algorithm's default is used.

    :param key:
        optional key (password) to hash.

    :param crypt:
        hashing primitive, called as ``crypt(key, descriptor_or_hash)``
        and returning the hash string, or ``None`` on failure.
        defaults to the host's crypt(3).

    :param random_bytes:
        entropy source, called as ``random_bytes(count)``.
        defaults to :func:`passcrypt.utils.getrandbytes`.

    :param entropy_size:
        number of bytes to request from *random_bytes*.

    :raises ~passcrypt.exc.AlgorithmUnavailableError:
        if the host's crypt(3) can't compute the algorithm,
        including the default one.

    The salt is derived lazily the first time it's needed (see :meth:`get_salt`),
    and then stays the same for the life of the instance.
    """
    #=========================================================
    #instance attrs
    #=========================================================
    algorithm = DEFAULT_ALGORITHM
    iterations = None
    entropy = None
    salt = None
    key = None
    _hash = None

    #=========================================================
    #init
    #=========================================================
    def __init__(self, algorithm=None, iterations=None, key=None,
                 crypt=None, random_bytes=None,
                 entropy_size=DEFAULT_ENTROPY_SIZE):
        self._crypt = crypt or crypt_primitive
        self._random_bytes = random_bytes or getrandbytes
        self.entropy_size = entropy_size
        self.set_algorithm(self.algorithm if algorithm is None else algorithm)
        if iterations is not None:
            self.set_iterations(iterations)
        if key is not None:
            self.set_key(key)

    def __repr__(self):
        # NOTE: key is deliberately left out
        return "<PasswordHasher algorithm=%s iterations=%r salt=%r>" % \
            (self.algorithm, self.iterations, self.salt)

    #=========================================================
    #configuration
    #=========================================================
    def set_algorithm(self, algorithm):
        """set the algorithm used for hashing the key

        :raises ~passcrypt.exc.UnsupportedAlgorithmError: if the name isn't known
        :raises ~passcrypt.exc.AlgorithmUnavailableError: if the host's
            crypt(3) can't compute it
        """
        algorithm = norm_algorithm(algorithm)
        if not is_available(algorithm):
            raise AlgorithmUnavailableError(algorithm.value)
        self.algorithm = algorithm
        return self

    def set_iterations(self, iterations):
        "set the number of rounds; ``None`` selects the algorithm default"
        if iterations is not None:
            if not isinstance(iterations, int) or isinstance(iterations, bool):
                raise TypeError("iterations must be an integer")
            if iterations < 0:
                raise ValueError("iterations must be >= 0")
        self.iterations = iterations
        return self

    def set_key(self, key):
        "set the key which should be hashed"
        if not isinstance(key, (str, bytes)):
            raise ExpectedStringError(key, "key")
        self.key = key
        return self

    def set_entropy(self, entropy):
        """set the random bytes the salt will be derived from

        only has an effect if the salt hasn't been derived yet.
        """
        if not isinstance(entropy, bytes):
            raise TypeError("entropy must be bytes")
        if entropy and len(entropy) < MIN_ENTROPY_SIZE:
            warn("only %d bytes of entropy provided, salt will be shorter "
                 "than 16 chars" % len(entropy), PasscryptSecurityWarning)
        self.entropy = entropy
        return self

    def set_salt(self, salt):
        """set the salt directly

        any character outside ``[./0-9A-Za-z]`` is replaced with ``.``.
        """
        self.salt = sanitize_salt(salt)
        return self

    def generate_entropy(self):
        """fill :attr:`entropy` from the entropy source

        :raises ~passcrypt.exc.WeakEntropyError: if the source couldn't
            provide strong random bytes.
        """
        entropy = self._random_bytes(self.entropy_size)
        if not entropy or len(entropy) < self.entropy_size:
            raise WeakEntropyError("entropy source returned too few bytes")
        self.entropy = entropy
        return self

    #=========================================================
    #salt & descriptor
    #=========================================================
    def get_salt(self):
        "return the salt, deriving it from the entropy bytes if not set yet"
        if not self.salt:
            if not self.entropy:
                self.generate_entropy()
            self.salt = salt_from_entropy(self.entropy)
        return self.salt

    def get_full_descriptor(self):
        "return the complete descriptor passed to crypt(3)"
        return build_descriptor(self.algorithm, self.iterations, self.get_salt())

    #=========================================================
    #hashing
    #=========================================================
    def hash(self, key=None):
        """compute the hash for the given key

        :arg key: key to hash; if omitted, the key set by :meth:`set_key` is used.

        :raises ValueError:
            if no key was set, or if crypt(3) rejected the descriptor
            (eg rounds value out of range for the host).

        :returns: the hash string (also available via :meth:`get_hash`)
        """
        if key is None:
            key = self.key
            if key is None:
                raise ValueError("no key to hash")
        else:
            self.set_key(key)
        validate_secret(key)
        descriptor = self.get_full_descriptor()
        result = self._crypt(key, descriptor)
        if result is None:
            raise ValueError("crypt() rejected %s descriptor" % (self.algorithm,))
        self._hash = result
        return result

    def get_hash(self):
        "return the last hash computed by :meth:`hash`, or ``None``"
        return self._hash

    def verify(self, key, hash):
        """check if a key matches a hash

        crypt(3) reads the algorithm, rounds & salt back out of *hash*,
        so this works for any hash it produced, regardless of how the
        original descriptor was built.

        :returns: ``True`` if the key matches, ``False`` otherwise
            (including when crypt() can't parse the hash).
        """
        validate_secret(key)
        if not isinstance(hash, str):
            raise ExpectedStringError(hash, "hash")
        result = self._crypt(key, hash)
        if result is None:
            return False
        return consteq(result, hash)

    #=========================================================
    #eoc
    #=========================================================

#=========================================================
#convenience functions
#=========================================================
def hash_password(key, algorithm=DEFAULT_ALGORITHM, iterations=None):
    "hash key using a fresh salt"
    return PasswordHasher(algorithm, iterations).hash(key)

def verify_password(key, hash):
    "verify key against a hash produced by crypt(3)"
    return PasswordHasher().verify(key, hash)

#=========================================================
#eof
#=========================================================
