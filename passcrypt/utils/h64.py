"""passcrypt.utils.h64 - hash64 encoding helpers"""
#=================================================================================
#imports
#=================================================================================
#core
import logging; log = logging.getLogger(__name__)
#site
#pkg
#local
__all__ = [
    "CHARS",
    "decode_int6",  "encode_int6",
    "decode_int24", "encode_int24",
]

#=================================================================================
#6 bit value <-> char mapping
#=================================================================================

#NOTE: this is *not* the standard base64 ordering:
# "." is 0, digits follow, then uppercase ("Z" is 37), then lowercase ("z" is 63).
CHARS = "./0123456789ABCDEFGHIJKLMNOPQRSTUVWXYZabcdefghijklmnopqrstuvwxyz"

#base64 char sequence
encode_6bit = CHARS.__getitem__ # int -> char

#inverse map (char->value)
_CHARIDX = dict( (c,i) for i,c in enumerate(CHARS))
decode_6bit = _CHARIDX.__getitem__ # char -> int

#=================================================================================
# int <-> h64 string, used by ext_des rounds
#=================================================================================

def decode_int6(value):
    "decodes single hash64 character -> 6-bit integer"
    try:
        return decode_6bit(value)
    except KeyError:
        raise ValueError("invalid character")

def encode_int6(value):
    "encodes 6-bit integer -> single hash64 character"
    if value < 0 or value > 63:
        raise ValueError("value out of range")
    return encode_6bit(value)

#---------------------------------------------------------------------

def decode_int24(value):
    "decodes 4 char hash64 string -> 24-bit integer (little-endian order)"
    if len(value) != 4:
        raise ValueError("value must be 4 chars")
    try:
        return  decode_6bit(value[0]) +\
                (decode_6bit(value[1])<<6)+\
                (decode_6bit(value[2])<<12)+\
                (decode_6bit(value[3])<<18)
    except KeyError:
        raise ValueError("invalid character")

def encode_int24(value):
    """encodes 24-bit integer -> 4 char hash64 string (little-endian order)

    bits above the low 24 are discarded; negative values wrap the same way
    two's complement masking does (``-1`` encodes as ``"zzzz"``).
    """
    return  encode_6bit(value & 0x3f) + \
            encode_6bit((value>>6) & 0x3f) + \
            encode_6bit((value>>12) & 0x3f) + \
            encode_6bit((value>>18) & 0x3f)

#=================================================================================
#eof
#=================================================================================
