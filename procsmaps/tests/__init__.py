# Copyright (c) 2009, Giampaolo Rodola'. All rights reserved.
# Use of this source code is governed by a BSD-style license that can be
# found in the LICENSE file.

"""Test utilities."""

import contextlib
import functools
import io
import os
import shutil
import stat
import subprocess
import sys
import tempfile
import time
import unittest
import warnings

import pytest

import procsmaps

__all__ = [
    # constants
    'GLOBAL_TIMEOUT', 'PYTHON_EXE', 'ROOT_DIR', 'SCRIPTS_DIR', 'HERE',
    'FIXTURES_DIR', 'TESTFN_PREFIX',
    # smaps utils
    'smaps_record', 'smaps_stream', 'without', 'open_fixture',
    # test utils
    'ProcsmapsTestCase', 'pytest', 'fake_procfs',
    # fs utils
    'safe_rmpath', 'get_testfn',
    # misc
    'sh', 'warn',
]


# ===================================================================
# --- constants
# ===================================================================

# seconds to wait for a subprocess to complete
GLOBAL_TIMEOUT = 5

TESTFN_PREFIX = '@procsmaps-%s-' % os.getpid()

ROOT_DIR = os.path.realpath(
    os.path.join(os.path.dirname(__file__), '..', '..')
)
SCRIPTS_DIR = os.path.join(ROOT_DIR, 'scripts')
HERE = os.path.realpath(os.path.dirname(__file__))
FIXTURES_DIR = os.path.join(HERE, 'fixtures')
PYTHON_EXE = os.path.realpath(sys.executable)

# Fields of a mapping as the 5.x kernels print them, in kB.
DEFAULT_FIELDS = (
    ("Size", 132),
    ("KernelPageSize", 4),
    ("MMUPageSize", 4),
    ("Rss", 100),
    ("Pss", 10),
    ("Shared_Clean", 80),
    ("Shared_Dirty", 0),
    ("Private_Clean", 12),
    ("Private_Dirty", 8),
    ("Referenced", 100),
    ("Anonymous", 8),
    ("AnonHugePages", 0),
    ("Swap", 4),
    ("Locked", 0),
)


# ===================================================================
# --- smaps utils
# ===================================================================


def smaps_record(
    header="7f0000000000-7f0000021000 r--p 00000000 08:01 131 /lib/x.so",
    fields=DEFAULT_FIELDS,
    flags="rd mr",
    extra="",
):
    """Return the text of a single smaps mapping. 'fields' is a
    sequence of (token, kB) pairs; 'extra' is appended as is after
    the VmFlags line.
    """
    lines = [header]
    for token, value in fields:
        lines.append("%-16s%8s kB" % (token + ":", value))
    lines.append("VmFlags: %s " % flags)
    return "\n".join(lines) + "\n" + extra


def smaps_stream(*records):
    """Join smaps text records into a binary stream."""
    return io.BytesIO("".join(records).encode())


def without(fields, *tokens):
    return tuple(x for x in fields if x[0] not in tokens)


def open_fixture(name):
    return open(os.path.join(FIXTURES_DIR, name), "rb")


@contextlib.contextmanager
def fake_procfs(root):
    """Temporarily point procsmaps.PROCFS_PATH to 'root'."""
    orig = procsmaps.PROCFS_PATH
    procsmaps.PROCFS_PATH = root
    try:
        yield root
    finally:
        procsmaps.PROCFS_PATH = orig


# ===================================================================
# --- misc utils
# ===================================================================


def sh(cmd, **kwds):
    """Run cmd in a subprocess and return its output.
    raises RuntimeError on error.
    """
    shell = isinstance(cmd, str)
    kwds.setdefault("shell", shell)
    kwds.setdefault("stdout", subprocess.PIPE)
    kwds.setdefault("stderr", subprocess.PIPE)
    kwds.setdefault("universal_newlines", True)
    p = subprocess.Popen(cmd, **kwds)
    try:
        stdout, stderr = p.communicate(timeout=GLOBAL_TIMEOUT)
    except subprocess.TimeoutExpired:
        p.kill()
        p.wait()
        raise
    if p.returncode != 0:
        raise RuntimeError(stdout + stderr)
    if stderr:
        warn(stderr)
    if stdout.endswith('\n'):
        stdout = stdout[:-1]
    return stdout


def warn(msg):
    """Raise a warning msg."""
    warnings.warn(msg, UserWarning, stacklevel=2)


# ===================================================================
# --- fs utils
# ===================================================================


def safe_rmpath(path):
    """Convenience function for removing temporary test files or dirs."""
    try:
        st = os.stat(path)
        if stat.S_ISDIR(st.st_mode):
            fun = functools.partial(shutil.rmtree, path)
        else:
            fun = functools.partial(os.remove, path)
        fun()
    except FileNotFoundError:
        pass


def get_testfn(suffix="", dir=None):
    """Return an absolute pathname of a file or dir that did not
    exist at the time this call is made. It's technically racy but
    probably not really due to the time variant.
    """
    while True:
        prefix = "%s%.9f-" % (TESTFN_PREFIX, time.perf_counter())
        name = tempfile.mktemp(prefix=prefix, suffix=suffix, dir=dir)
        if not os.path.exists(name):  # also include dirs
            return os.path.realpath(name)


# ===================================================================
# --- testing
# ===================================================================


class ProcsmapsTestCase(unittest.TestCase):
    """Test class providing auto-cleanup wrappers on top of
    temporary files and fake /proc trees.
    """

    def get_testfn(self, suffix="", dir=None):
        fname = get_testfn(suffix=suffix, dir=dir)
        self.addCleanup(safe_rmpath, fname)
        return fname

    def make_procfs(self, smaps=None):
        """Create a fake /proc tree containing a single process and
        point procsmaps.PROCFS_PATH to it for the duration of the
        test. Return (root, pid). If 'smaps' is None the process
        has no smaps file.
        """
        root = self.get_testfn()
        pid = 1234
        os.makedirs(os.path.join(root, str(pid)))
        os.mkdir(os.path.join(root, "sys"))
        if smaps is not None:
            with open(os.path.join(root, str(pid), "smaps"), "w") as f:
                f.write(smaps)
        ctx = fake_procfs(root)
        ctx.__enter__()
        self.addCleanup(ctx.__exit__, None, None, None)
        return root, pid

    def assert_fields(self, m, **kwargs):
        for name, value in kwargs.items():
            assert getattr(m, name) == value, (name, getattr(m, name))
