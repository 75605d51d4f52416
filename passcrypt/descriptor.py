"""passcrypt.descriptor - assembly of crypt(3) hash descriptors

A descriptor is the "salt" argument crypt(3) expects:
the algorithm signature, the encoded rounds, the salt itself,
and (for the modular crypt algorithms) a terminating ``$``::

    $6$rounds=5000$Zm9vYmFyYmF6cXV4$     sha512
    $2a$12$Zm9vYmFyYmF6cXV4Zm9vYm$      blowfish
    _J9..Zm9v                            ext_des
    Zm                                   std_des

crypt(3) embeds the descriptor verbatim at the start of the hash it returns
(truncating over-long salts to the algorithm's maximum), which is what lets
a stored hash be passed back in as the descriptor when verifying.
"""
#=========================================================
#imports
#=========================================================
#core
import logging; log = logging.getLogger(__name__)
import re
from warnings import warn
#site
#pkg
from passcrypt.algorithms import Algorithm, get_algorithm_info, \
     get_rounds_signature, decode_iterations_des_format, identify
from passcrypt.exc import PasscryptConfigWarning, ExpectedStringError
from passcrypt.salt import is_valid_salt
#local
__all__ = [
    "build_descriptor",
    "split_descriptor",
]

#=========================================================
#builder
#=========================================================
def build_descriptor(algorithm, iterations, salt):
    """compose the full crypt(3) descriptor for the given settings

    :arg algorithm: algorithm name or :class:`~passcrypt.algorithms.Algorithm`
    :arg iterations:
        rounds count, or ``None`` to use the algorithm's default.
        ignored by std_des and md5.
    :arg salt: salt string, drawn from ``[./0-9A-Za-z]``.

    :raises ~passcrypt.exc.UnsupportedAlgorithmError: if the algorithm isn't known
    :raises ValueError: if the salt is invalid or too short for the algorithm

    :returns: descriptor string
    """
    info = get_algorithm_info(algorithm)
    if iterations is None:
        iterations = info.default_rounds
    _check_rounds(info, iterations)
    _check_salt(info, salt)
    descriptor = info.signature + \
                 get_rounds_signature(info.algorithm, iterations) + \
                 salt
    if info.modular:
        descriptor += "$"
    return descriptor

def _check_rounds(info, rounds):
    "warn if rounds lie outside the bounds documented for the algorithm"
    #NOTE: out of range values are passed through as-is;
    # the host's crypt() either clamps them or rejects the descriptor.
    if info.min_rounds is None:
        return
    if not isinstance(rounds, int):
        raise TypeError("rounds must be an integer")
    name = info.algorithm.value
    if rounds < info.min_rounds:
        warn("rounds too low (%s requires >= %d rounds)" % (name, info.min_rounds),
             PasscryptConfigWarning)
    elif rounds > info.max_rounds:
        warn("rounds too high (%s requires <= %d rounds)" % (name, info.max_rounds),
             PasscryptConfigWarning)

def _check_salt(info, salt):
    if not isinstance(salt, str):
        raise ExpectedStringError(salt, "salt")
    if not is_valid_salt(salt):
        raise ValueError("invalid characters in salt")
    if len(salt) < info.min_salt_size:
        raise ValueError("salt too small (%s requires >= %d chars)" %
                         (info.algorithm.value, info.min_salt_size))

#=========================================================
#parser
#=========================================================
_bcrypt_pat = re.compile(r"^\$2[aby]?\$(?P<rounds>\d\d)\$(?P<salt>[./0-9A-Za-z]{22})")
_sha_pat = re.compile(r"^\$[56]\$(?:rounds=(?P<rounds>\d+)\$)?(?P<salt>[^$]*)")
_md5_pat = re.compile(r"^\$1\$(?P<salt>[^$]*)")

def split_descriptor(hash):
    """parse the descriptor settings back out of a hash or descriptor

    :returns:
        ``(algorithm, rounds, salt)`` tuple.
        *rounds* is ``None`` for std_des & md5;
        sha256/sha512 hashes without an explicit rounds field
        report crypt's implicit default of 5000.
        salts are reported as crypt() stored them (ie truncated).

    :raises ValueError: if the hash can't be identified or parsed
    """
    algorithm = identify(hash)
    if algorithm is None:
        raise ValueError("not a recognized crypt(3) hash")
    if algorithm is Algorithm.std_des:
        return algorithm, None, hash[:2]
    if algorithm is Algorithm.ext_des:
        if len(hash) < 9:
            raise ValueError("malformed ext_des hash")
        return algorithm, decode_iterations_des_format(hash[1:5]), hash[5:9]
    if algorithm is Algorithm.blowfish:
        m = _bcrypt_pat.match(hash)
        if not m:
            raise ValueError("malformed blowfish hash")
        return algorithm, int(m.group("rounds")), m.group("salt")
    if algorithm is Algorithm.md5:
        return algorithm, None, _md5_pat.match(hash).group("salt")
    rounds, salt = _sha_pat.match(hash).group("rounds", "salt")
    if rounds is None:
        rounds = get_algorithm_info(algorithm).default_rounds
    return algorithm, int(rounds), salt

#=========================================================
#eof
#=========================================================
