"""passcrypt.algorithms - catalog of the crypt(3) algorithms passcrypt can drive

Each algorithm is identified in a crypt(3) descriptor by a signature prefix,
followed by an algorithm specific encoding of the rounds count:

    =========== =========== ===================================
    Algorithm   Signature   Rounds encoding
    ----------- ----------- -----------------------------------
    std_des     (none)      (not encodable)
    ext_des     ``_``       4 hash64 chars, little-endian
    md5         ``$1$``     (not encodable)
    blowfish    ``$2a$``    2 decimal digits + ``$`` (log2 cost)
    sha256      ``$5$``     ``rounds=<n>$``
    sha512      ``$6$``     ``rounds=<n>$``
    =========== =========== ===================================
"""
#=========================================================
#imports
#=========================================================
#core
from collections import namedtuple
from enum import Enum
import logging; log = logging.getLogger(__name__)
import re
#site
#pkg
from passcrypt.exc import UnsupportedAlgorithmError
from passcrypt.utils import h64, test_crypt
#local
__all__ = [
    "Algorithm",
    "AlgorithmInfo",
    "MODULAR_ALGORITHMS",
    "norm_algorithm",
    "get_algorithm_info",
    "get_algorithm_signature",
    "get_rounds_signature",
    "get_iterations_des_format",
    "decode_iterations_des_format",
    "is_available",
    "available_algorithms",
    "clear_availability_cache",
    "identify",
]

#=========================================================
#algorithm table
#=========================================================
class Algorithm(Enum):
    "the crypt(3) algorithms passcrypt knows how to build descriptors for"
    std_des = "std_des"
    ext_des = "ext_des"
    md5 = "md5"
    blowfish = "blowfish"
    sha256 = "sha256"
    sha512 = "sha512"

    def __str__(self):
        return self.value

#: static description of one algorithm;
#: ``probe`` is a ``(secret, hash)`` pair crypt(3) must reproduce
#: for the algorithm to be considered available.
AlgorithmInfo = namedtuple("AlgorithmInfo", [
    "algorithm",
    "signature",
    "modular",
    "min_rounds", "max_rounds", "default_rounds", "rounds_cost",
    "min_salt_size", "max_salt_size",
    "probe",
    ])

_catalog = dict((info.algorithm, info) for info in [
    AlgorithmInfo(Algorithm.std_des, "", False,
                  None, None, None, None,
                  2, 2,
                  ("test", "abgOeLfPimXQo")),
    AlgorithmInfo(Algorithm.ext_des, "_", False,
                  1, 16777215, 5001, "linear", # (1<<24)-1
                  4, 4,
                  ("test", "_/...lLDAxARksGCHin.")),
    AlgorithmInfo(Algorithm.md5, "$1$", True,
                  None, None, None, None,
                  0, 8,
                  ("test", "$1$test$pi/xDtU5WFVRqYS6BMU8X/")),
    AlgorithmInfo(Algorithm.blowfish, "$2a$", True,
                  4, 31, 12, "log2",
                  22, 22,
                  ("test", "$2a$04$......................"
                           "qiOQjkB8hxU8OzRhS.GhRMa4VUnkPty")),
    AlgorithmInfo(Algorithm.sha256, "$5$", True,
                  1000, 999999999, 5000, "linear",
                  0, 16,
                  ("test", "$5$rounds=1000$test$QmQADEXMG8POI5W"
                           "Dsaeho0P36yK3Tcrgboabng6bkb/")),
    AlgorithmInfo(Algorithm.sha512, "$6$", True,
                  1000, 999999999, 5000, "linear",
                  0, 16,
                  ("test", "$6$rounds=1000$test$2M/Lx6Mtobqj"
                           "Ljobw0Wmo4Q5OFx5nVLJvmgseatA6oMn"
                           "yWeBdRDx4DU.1H3eGmse6pgsOgDisWBG"
                           "I5c7TZauS0")),
    ])

#: algorithms whose descriptor is terminated by ``$``
MODULAR_ALGORITHMS = frozenset(a for a, info in _catalog.items() if info.modular)

#: preference order used by available_algorithms()
_strength_order = [
    Algorithm.sha512, Algorithm.sha256, Algorithm.blowfish,
    Algorithm.md5, Algorithm.ext_des, Algorithm.std_des,
    ]

#=========================================================
#lookups
#=========================================================
def norm_algorithm(value):
    """normalize algorithm name or :class:`Algorithm` -> :class:`Algorithm`

    :raises ~passcrypt.exc.UnsupportedAlgorithmError: for any other value
    """
    if isinstance(value, Algorithm):
        return value
    try:
        return Algorithm(value)
    except ValueError:
        raise UnsupportedAlgorithmError(value)

def get_algorithm_info(algorithm):
    "return :class:`AlgorithmInfo` record for algorithm"
    return _catalog[norm_algorithm(algorithm)]

def get_algorithm_signature(algorithm):
    """return the characters that select *algorithm* in a crypt(3) descriptor

    :raises ~passcrypt.exc.UnsupportedAlgorithmError: if the algorithm isn't known
    """
    return get_algorithm_info(algorithm).signature

def get_rounds_signature(algorithm, count):
    """return the part of the descriptor which specifies the number of rounds

    :arg algorithm: algorithm name or :class:`Algorithm`
    :arg count: number of rounds (ignored for std_des and md5)

    :raises ~passcrypt.exc.UnsupportedAlgorithmError: if the algorithm isn't known
    """
    algorithm = norm_algorithm(algorithm)
    if algorithm is Algorithm.ext_des:
        return get_iterations_des_format(count)
    elif algorithm is Algorithm.blowfish:
        return "%02d$" % count
    elif algorithm in (Algorithm.sha256, Algorithm.sha512):
        return "rounds=%d$" % count
    else:
        # std_des & md5 have no way to encode rounds
        return ""

def get_iterations_des_format(iterations):
    """encode rounds count in the 4 char format used by extended des

    even counts are decremented first: ext_des rounds are always odd,
    since even values would reveal weak des keys.
    only the low 24 bits are encoded.
    """
    if iterations % 2 == 0:
        iterations -= 1
    return h64.encode_int24(iterations)

def decode_iterations_des_format(value):
    """decode the 4 char extended des rounds field -> integer

    :raises ValueError: if *value* isn't 4 hash64 characters.
    """
    return h64.decode_int24(value)

#=========================================================
#host support
#=========================================================
_availability = {}

def is_available(algorithm):
    """check if the host's crypt(3) supports *algorithm*

    the check hashes a known test vector, and the answer is cached
    for the life of the process.
    """
    algorithm = norm_algorithm(algorithm)
    result = _availability.get(algorithm)
    if result is None:
        secret, hash = _catalog[algorithm].probe
        result = _availability[algorithm] = test_crypt(secret, hash)
        log.debug("crypt() support for %s: %s", algorithm, result)
    return result

def available_algorithms():
    "list of algorithms supported by host, strongest first"
    return [a for a in _strength_order if is_available(a)]

def clear_availability_cache():
    "forget cached results of :func:`is_available` - used by unittests"
    _availability.clear()

#=========================================================
#identification
#=========================================================
_std_des_pat = re.compile(r"^[./0-9A-Za-z]{13}$")

_prefixes = [
    ("$1$", Algorithm.md5),
    ("$2a$", Algorithm.blowfish),
    ("$2b$", Algorithm.blowfish),
    ("$2y$", Algorithm.blowfish),
    ("$5$", Algorithm.sha256),
    ("$6$", Algorithm.sha512),
    ("_", Algorithm.ext_des),
    ]

def identify(hash):
    """identify the algorithm which generated a crypt(3) hash or descriptor

    :returns: :class:`Algorithm`, or ``None`` if it can't be identified.
    """
    if not hash:
        return None
    for prefix, algorithm in _prefixes:
        if hash.startswith(prefix):
            return algorithm
    if _std_des_pat.match(hash):
        return Algorithm.std_des
    return None

#=========================================================
#eof
#=========================================================
