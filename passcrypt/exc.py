"""passcrypt.exc -- exceptions & warnings raised by passcrypt"""
#==========================================================================
# exceptions
#==========================================================================
class UnsupportedAlgorithmError(ValueError):
    """Error raised if an algorithm name isn't one of the crypt(3)
    schemes known to passcrypt.

    The known names are ``std_des``, ``ext_des``, ``md5``, ``blowfish``,
    ``sha256`` and ``sha512``.
    """
    def __init__(self, name):
        self.name = name
        ValueError.__init__(self, "unsupported algorithm: %r (must be one of "
                            "std_des, ext_des, md5, blowfish, sha256, sha512)"
                            % (name,))

class AlgorithmUnavailableError(RuntimeError):
    """Error raised if the host's crypt(3) implementation doesn't
    support the requested algorithm.

    :exc:`!AlgorithmUnavailableError` derives
    from :exc:`RuntimeError`, since this usually indicates
    lack of an OS feature (eg a libcrypt built without DES support),
    rather than a mistake by the caller.
    """
    def __init__(self, name):
        self.name = name
        RuntimeError.__init__(self, "algorithm %r is not supported by this "
                              "host's crypt() implementation" % (name,))

class MissingEntropyError(ValueError):
    """Error raised when a salt has to be derived from entropy bytes,
    but no bytes were provided."""

class WeakEntropyError(RuntimeError):
    """Error raised if the entropy source can't produce
    cryptographically strong random bytes.

    passcrypt never falls back to a weaker generator;
    hash generation is aborted instead.
    """

class PasswordSizeError(ValueError):
    """Error raised if the password provided exceeds the limit set by passcrypt.

    Many password hashes take proportionately larger amounts of
    time and/or memory depending on the size of the password provided.
    This could present a potential denial of service (DOS) situation
    if a maliciously large password was provided to the application.

    Because of this, passcrypt enforces a maximum of 4096 characters.
    Applications wishing to use a different limit should set the
    ``PASSCRYPT_MAX_PASSWORD_SIZE`` environmental variable before passcrypt
    is loaded.
    """
    def __init__(self):
        ValueError.__init__(self, "password exceeds maximum allowed size")

#==========================================================================
# warnings
#==========================================================================
class PasscryptWarning(UserWarning):
    """base class for passcrypt's user warnings"""

class PasscryptConfigWarning(PasscryptWarning):
    """Warning issued when non-fatal issue is found related to the
    configuration of a hasher or authenticator.

    This occurs primarily in one of two cases:

    * a rounds value was provided which lies outside the bounds
      documented for the algorithm's crypt(3) implementation
      (the value is passed through unchanged, the host decides).
    * the dummy hash used to equalize authentication timing doesn't
      use the same algorithm & rounds as the rest of the application.
    """

class PasscryptSecurityWarning(PasscryptWarning):
    """Special warning issued when passcrypt encounters something
    that might affect security, such as entropy too short to
    produce a full-size salt."""

#==========================================================================
# error constructors
#==========================================================================
def type_name(value):
    "return pretty-printed string containing name of value's type"
    cls = value.__class__
    if cls.__module__ and cls.__module__ != "builtins":
        return "%s.%s" % (cls.__module__, cls.__name__)
    elif value is None:
        return 'None'
    else:
        return cls.__name__

def ExpectedTypeError(value, expected, param):
    "error message when param was supposed to be one type, but found another"
    # NOTE: value is never displayed, since it may sometimes be a password.
    name = type_name(value)
    return TypeError("%s must be %s, not %s" % (param, expected, name))

def ExpectedStringError(value, param):
    "error message when param was supposed to be str or bytes"
    return ExpectedTypeError(value, "str or bytes", param)

#==========================================================================
# eof
#==========================================================================
