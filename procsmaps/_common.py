# Copyright (c) 2009, Giampaolo Rodola'. All rights reserved.
# Use of this source code is governed by a BSD-style license that can be
# found in the LICENSE file.

"""Common objects shared by all procsmaps modules."""

import os
import sys

# --- constants

LINUX = sys.platform.startswith("linux")

PROCSMAPS_DEBUG = bool(os.getenv("PROCSMAPS_DEBUG"))

ENCODING = sys.getfilesystemencoding()
ENCODING_ERRS = sys.getfilesystemencodeerrors()


# --- functions


def decode(s):
    """Decode a bytes line read from /proc the same way the OS decodes
    filesystem paths, so that undecodable pathnames survive as
    surrogates instead of raising UnicodeDecodeError.
    """
    if isinstance(s, bytes):
        return s.decode(ENCODING, ENCODING_ERRS)
    return s


def open_binary(fname):
    return open(fname, "rb", buffering=8192)


def bytes2human(n, format="%(value).1f%(symbol)s"):
    """Used by various scripts. See: http://goo.gl/zeJZl.

    >>> bytes2human(10000)
    '9.8K'
    >>> bytes2human(100001221)
    '95.4M'
    """
    symbols = ('B', 'K', 'M', 'G', 'T', 'P', 'E', 'Z', 'Y')
    prefix = {}
    for i, s in enumerate(symbols[1:]):
        prefix[s] = 1 << (i + 1) * 10
    for symbol in reversed(symbols[1:]):
        if abs(n) >= prefix[symbol]:
            value = float(n) / prefix[symbol]
            return format % locals()
    return format % dict(symbol=symbols[0], value=n)


def debug(msg):
    """If PROCSMAPS_DEBUG env var is set, print a debug message to
    stderr.
    """
    if PROCSMAPS_DEBUG:
        import inspect

        fname, lineno, _, _lines, _index = inspect.getframeinfo(
            inspect.currentframe().f_back
        )
        if isinstance(msg, Exception):
            if isinstance(msg, OSError):
                # ...because str(exc) may contain info about the file name
                msg = "ignoring %s" % msg
            else:
                msg = "ignoring %r" % msg
        print(
            "procsmaps-debug [%s:%s]> %s" % (fname, lineno, msg),
            file=sys.stderr,
        )
