"""helpers for passcrypt unittests"""
#=========================================================
#imports
#=========================================================
#core
from hashlib import sha256
import logging; log = logging.getLogger(__name__)
import os
import re
import sys
import unittest
import warnings
#site
#pkg
from passcrypt.algorithms import is_available, norm_algorithm
#local
__all__ = [
    #util funcs
    'enable_option',

    #unit testing
    'TestCase',
    'RecordingCrypt',
]

#=========================================================
#option flags
#=========================================================
DEFAULT_TESTS = ""

tests = set(
    v.strip()
    for v
    in os.environ.get("PASSCRYPT_TESTS", DEFAULT_TESTS).lower().split(",")
    )

def enable_option(*names):
    """check if a given test should be included based on the env var.

    test flags:
        timing          run statistical timing tests (slow, noisy on shared hosts)
        all             run all tests
    """
    return 'all' in tests or any(name in tests for name in names)

#=========================================================
#fake primitive
#=========================================================
class RecordingCrypt(object):
    """fast stand-in for crypt(3), which records every call.

    like crypt(3), the output embeds the setting it was given,
    and passing the output back in as the setting reproduces it;
    the "digest" is separated by ``!``, which can't occur in a salt.
    """
    def __init__(self):
        self.calls = []

    def __call__(self, secret, setting):
        self.calls.append((secret, setting))
        if isinstance(secret, bytes):
            secret = secret.decode("utf-8")
        prefix = setting.split("!")[0]
        if not prefix:
            return None
        digest = sha256((prefix + "\x00" + secret).encode("utf-8")).hexdigest()
        return "%s!%s" % (prefix, digest[:22])

    @property
    def settings(self):
        "list of settings crypt() was called with"
        return [setting for _, setting in self.calls]

#=========================================================
#custom test base
#=========================================================
class TestCase(unittest.TestCase):
    """passcrypt-specific test case class

    this class adds a number of features to the standard TestCase...
    * common prefix for all test descriptions
    * resets warnings filter & registry for every test
    * tweaks to message formatting
    * helpers for matching against warnings
    * skipping tests for algorithms the host crypt(3) lacks
    """
    #----------------------------------------------------------------
    # make it easy for test cases to add common prefix to shortDescription
    #----------------------------------------------------------------

    # string prepended to all tests in TestCase
    descriptionPrefix = None

    def shortDescription(self):
        "wrap shortDescription() method to prepend descriptionPrefix"
        desc = super(TestCase, self).shortDescription()
        prefix = self.descriptionPrefix
        if prefix:
            desc = "%s: %s" % (prefix, desc or str(self))
        return desc

    #----------------------------------------------------------------
    # reset warning filters & registry before each test
    #----------------------------------------------------------------

    # flag to enable this feature
    resetWarningState = True

    def setUp(self):
        super(TestCase, self).setUp()
        self.setUpWarnings()

    def setUpWarnings(self):
        if self.resetWarningState:
            ctx = reset_warnings()
            ctx.__enter__()
            self.addCleanup(ctx.__exit__)

    #----------------------------------------------------------------
    # tweak message formatting so longMessage mode is only enabled
    # if msg ends with ":", and turn on longMessage by default.
    #----------------------------------------------------------------
    longMessage = True

    def _formatMessage(self, msg, std):
        if self.longMessage and msg and msg.rstrip().endswith(":"):
            return '%s %s' % (msg.rstrip(), std)
        else:
            return msg or std

    #============================================================
    # custom methods for matching warnings
    #============================================================
    def assertWarning(self, warning, message_re=None, message=None,
                      category=None, msg=None):
        "check if WarningMessage instance (as returned by catch_warnings) matches parameters"
        if hasattr(warning, "category"):
            # resolve WarningMessage -> Warning
            warning = warning.message
        if message:
            self.assertEqual(str(warning), message, msg)
        if message_re:
            self.assertRegex(str(warning), message_re, msg)
        if category:
            self.assertIsInstance(warning, category, msg)

    def assertWarningList(self, wlist, desc=None, msg=None):
        """check that warning list (e.g. from catch_warnings) matches pattern"""
        if not isinstance(desc, (list,tuple)):
            desc = [] if desc is None else [desc]
        for idx, entry in enumerate(desc):
            if isinstance(entry, str):
                entry = dict(message_re=entry)
            elif isinstance(entry, type) and issubclass(entry, Warning):
                entry = dict(category=entry)
            elif not isinstance(entry, dict):
                raise TypeError("entry must be str, warning, or dict")
            try:
                data = wlist[idx]
            except IndexError:
                break
            self.assertWarning(data, msg=msg, **entry)
        else:
            if len(wlist) == len(desc):
                return
        std = "expected %d warnings, found %d: wlist=%s desc=%r" % \
                (len(desc), len(wlist), self._formatWarningList(wlist), desc)
        raise self.failureException(self._formatMessage(msg, std))

    def _formatWarningList(self, wlist):
        return "[%s]" % ", ".join("<%s message=%r>" % (type(w.message).__name__,
                                                      str(w.message))
                                  for w in wlist)

    #============================================================
    # misc custom methods
    #============================================================
    def require_algorithm(self, algorithm):
        "helper to skip test if host crypt(3) lacks algorithm"
        if not is_available(algorithm):
            raise self.skipTest("host crypt() doesn't support %s" %
                                norm_algorithm(algorithm))

    #============================================================
    #eoc
    #============================================================

#=========================================================
#warnings helpers
#=========================================================
class reset_warnings(warnings.catch_warnings):
    "catch_warnings() wrapper which clears warning registry & filters"
    def __init__(self, reset_filter="always", reset_registry=".*", **kwds):
        super(reset_warnings, self).__init__(**kwds)
        self._reset_filter = reset_filter
        self._reset_registry = re.compile(reset_registry) if reset_registry else None

    def __enter__(self):
        # let parent class archive filter state
        ret = super(reset_warnings, self).__enter__()

        # reset the filter to list everything
        if self._reset_filter:
            warnings.resetwarnings()
            warnings.simplefilter(self._reset_filter)

        # archive and clear the __warningregistry__ key for all modules
        # that match the 'reset' pattern.
        pattern = self._reset_registry
        if pattern:
            orig = self._orig_registry = {}
            for name, mod in list(sys.modules.items()):
                if pattern.match(name):
                    reg = getattr(mod, "__warningregistry__", None)
                    if reg:
                        orig[name] = reg.copy()
                        reg.clear()
        return ret

    def __exit__(self, *exc_info):
        # restore warning registry for all modules
        pattern = self._reset_registry
        if pattern:
            # restore archived registry data
            orig = self._orig_registry
            for name, content in orig.items():
                mod = sys.modules.get(name)
                if mod is None:
                    continue
                reg = getattr(mod, "__warningregistry__", None)
                if reg is None:
                    setattr(mod, "__warningregistry__", content)
                else:
                    reg.clear()
                    reg.update(content)
            # clear all registry entries that we didn't archive
            for name, mod in list(sys.modules.items()):
                if pattern.match(name) and name not in orig:
                    reg = getattr(mod, "__warningregistry__", None)
                    if reg:
                        reg.clear()
        super(reset_warnings, self).__exit__(*exc_info)

#=========================================================
#EOF
#=========================================================
