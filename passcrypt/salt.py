"""passcrypt.salt - salt encoding for crypt(3) descriptors

crypt(3) salts are drawn from the 64 character ``[./0-9A-Za-z]`` alphabet.
Some algorithms reject anything else, and the ones that don't
(eg linux des-crypt) map other characters unpredictably;
so salts are always forced into that alphabet by replacing every
other character with ``.``.
"""
#=========================================================
#imports
#=========================================================
#core
from base64 import b64encode
import logging; log = logging.getLogger(__name__)
import re
#site
#pkg
from passcrypt.exc import MissingEntropyError, ExpectedStringError
from passcrypt.utils.h64 import CHARS
#local
__all__ = [
    "SALT_CHARS",
    "sanitize_salt",
    "salt_from_entropy",
    "is_valid_salt",
]

#=========================================================
#constants
#=========================================================
SALT_CHARS = CHARS

_invalid_salt_char = re.compile(r"[^./0-9A-Za-z]")

#=========================================================
#codec
#=========================================================
def sanitize_salt(raw):
    """replace every character outside ``[./0-9A-Za-z]`` with ``.``

    this never fails, and running it on its own output is a no-op.

    :arg raw: salt as str, or bytes (decoded as latin-1, so each byte
        maps to a single output character).
    :returns: sanitized salt as str
    """
    if isinstance(raw, bytes):
        raw = raw.decode("latin-1")
    elif not isinstance(raw, str):
        raise ExpectedStringError(raw, "salt")
    return _invalid_salt_char.sub(".", raw)

def salt_from_entropy(data):
    """derive a salt from raw entropy bytes

    the bytes are base64 encoded, and the resulting ``+`` and ``=``
    characters are sanitized away; so *n* bytes yield
    ``4*ceil(n/3)`` salt characters.

    :raises ~passcrypt.exc.MissingEntropyError: if *data* is empty.
    """
    if not data:
        raise MissingEntropyError("no entropy bytes provided to derive salt from")
    if isinstance(data, str):
        data = data.encode("latin-1")
    return sanitize_salt(b64encode(data).decode("ascii"))

def is_valid_salt(salt):
    "check if salt contains only characters from the salt alphabet"
    return not _invalid_salt_char.search(salt)

#=========================================================
#eof
#=========================================================
