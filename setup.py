"""passcrypt setup script"""
#=========================================================
#init script env - ensure cwd = root of source dir
#=========================================================
import os
root_dir = os.path.abspath(os.path.join(__file__,".."))
os.chdir(root_dir)

#=========================================================
#imports
#=========================================================
import re

from setuptools import setup

#=========================================================
#version string
#=========================================================
with open(os.path.join(root_dir, "passcrypt", "__init__.py")) as vh:
    VERSION = re.search(r'^__version__\s*=\s*"(.*?)"\s*$', vh.read(), re.M).group(1)

#=========================================================
#static text
#=========================================================
SUMMARY = "crypt(3) password hashing with explicit descriptors, and timing-safe authentication"

DESCRIPTION = """\
passcrypt drives the host's crypt(3) function, giving explicit control
over the algorithm (std/ext des, md5, blowfish, sha256, sha512),
the rounds count and the salt used for each hash.

It also provides an authenticator which checks credentials against
stored hashes, while taking the same time whether or not the identity exists.
"""

KEYWORDS = "password secret hash security crypt des-crypt md5-crypt sha256-crypt sha512-crypt bcrypt authentication"

#=========================================================
#config setup
#=========================================================
config = dict(
    #package info
    packages = [
        "passcrypt",
            "passcrypt.tests",
            "passcrypt.utils",
        ],
    zip_safe=True,
    python_requires = ">=3.8",
    install_requires = [
        "legacycrypt",
        ],
    extras_require = {
        "test": ["pytest"],
        },

    #metadata
    name = "passcrypt",
    version = VERSION,
    license = "BSD",

    description = SUMMARY,
    long_description = DESCRIPTION,
    keywords = KEYWORDS,
    classifiers = [
        "Development Status :: 4 - Beta",
        "Intended Audience :: Developers",
        "License :: OSI Approved :: BSD License",
        "Natural Language :: English",
        "Operating System :: POSIX",
        "Programming Language :: Python :: 3",
        "Topic :: Security :: Cryptography",
        "Topic :: Software Development :: Libraries",
    ],
)

#=========================================================
#build
#=========================================================
setup(**config)

#=========================================================
#EOF
#=========================================================
