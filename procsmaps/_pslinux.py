# Copyright (c) 2009, Giampaolo Rodola'. All rights reserved.
# Use of this source code is governed by a BSD-style license that can be
# found in the LICENSE file.

"""Linux /proc access: path construction, pids and per-process smaps."""

import functools
import os
import sys

from ._common import debug
from ._common import open_binary
from ._exceptions import AccessDenied
from ._exceptions import NoSuchProcess
from ._smaps import parse_smaps

# --- utils


def get_procfs_path():
    """Return updated procsmaps.PROCFS_PATH constant."""
    return sys.modules['procsmaps'].PROCFS_PATH


def pids():
    """Returns a sorted list of PIDs found in /proc."""
    ret = []
    for x in os.listdir(get_procfs_path()):
        if x.isdigit():
            ret.append(int(x))
    return sorted(ret)


def pid_exists(pid):
    """Check for the existence of a /proc/<pid> directory."""
    if pid < 0:
        return False
    return os.path.exists("%s/%s" % (get_procfs_path(), pid))


# --- decorators


def wrap_exceptions(fun):
    """Decorator which translates bare OSError exceptions into
    NoSuchProcess and AccessDenied.
    """

    @functools.wraps(fun)
    def wrapper(self, *args, **kwargs):
        try:
            return fun(self, *args, **kwargs)
        except PermissionError:
            raise AccessDenied(self.pid)
        except ProcessLookupError:
            raise NoSuchProcess(self.pid)
        except FileNotFoundError:
            # ENOENT (no such file or directory) gets raised on open().
            # If the process dir is still there smaps is what's
            # missing.
            if not os.path.exists("%s/%s" % (self._procfs_path, self.pid)):
                raise NoSuchProcess(self.pid)
            msg = (
                "couldn't find %s/%s/smaps; kernel < 2.6.14 or CONFIG_MMU "
                "kernel configuration option is not enabled"
                % (self._procfs_path, self.pid)
            )
            raise NotImplementedError(msg)

    return wrapper


class Process:
    """Linux process implementation."""

    __slots__ = ["pid", "_procfs_path"]

    def __init__(self, pid):
        self.pid = pid
        self._procfs_path = get_procfs_path()

    @wrap_exceptions
    def memory_maps(self):
        """Return process's mapped memory regions as a list of psmap
        named tuples, in file order.
        """
        with open_binary("%s/%s/smaps" % (self._procfs_path, self.pid)) as f:
            ret = parse_smaps(f)
        if not ret:
            debug("smaps of pid %s is empty (kernel thread?)" % self.pid)
        return ret
