"""passcrypt - crypt(3) password hashing & timing-safe authentication"""

__version__ = "1.0"

#=========================================================
#eof
#=========================================================
