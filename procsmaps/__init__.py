# Copyright (c) 2009, Giampaolo Rodola'. All rights reserved.
# Use of this source code is governed by a BSD-style license that can be
# found in the LICENSE file.

"""procsmaps is a module parsing the Linux /proc/[pid]/smaps file
into per-mapping memory accounting records.
"""

import os

from . import _pslinux
from ._common import LINUX
from ._exceptions import AccessDenied
from ._exceptions import Error
from ._exceptions import FormatError
from ._exceptions import NoSuchProcess
from ._exceptions import ParseError
from ._exceptions import StreamError
from ._ntuples import pmmap_grouped
from ._ntuples import psmap
from ._smaps import SMAPS_FIELDS
from ._smaps import parse_smaps
from ._summary import group_by_path
from ._summary import summarize

__all__ = [
    # exceptions
    "Error", "ParseError", "StreamError", "FormatError", "NoSuchProcess",
    "AccessDenied",
    # constants
    "LINUX", "PROCFS_PATH", "SMAPS_FIELDS", "version_info", "__version__",
    # named tuples
    "psmap", "pmmap_grouped",
    # classes
    "Process",
    # functions
    "parse_smaps", "summarize", "group_by_path", "pids", "pid_exists",
]

__author__ = "Giampaolo Rodola'"
__version__ = "1.0.0"
version_info = tuple([int(num) for num in __version__.split('.')])

# Root of the proc filesystem. It can be changed at runtime (e.g. to
# read the /proc of a container mounted elsewhere).
PROCFS_PATH = "/proc"


# =====================================================================
# --- Process class
# =====================================================================


class Process:
    """Represents an OS process whose memory mappings are read from
    /proc/[pid]/smaps. If PID is omitted current process PID
    (os.getpid()) is used.
    Raises NoSuchProcess if PID does not exist.

    Every call reads smaps again: results are point-in-time snapshots
    and are never cached.
    """

    def __init__(self, pid=None):
        if pid is None:
            pid = os.getpid()
        else:
            if not isinstance(pid, int):
                msg = "pid must be an integer (got %r)" % pid
                raise TypeError(msg)
            if pid < 0:
                msg = "pid must be a positive integer (got %s)" % pid
                raise ValueError(msg)
        self._pid = pid
        if not _pslinux.pid_exists(pid):
            msg = "process PID not found"
            raise NoSuchProcess(pid, msg="%s (pid=%s)" % (msg, pid))
        self._proc = _pslinux.Process(pid)

    def __str__(self):
        return "%s.%s(pid=%s)" % (
            self.__class__.__module__,
            self.__class__.__name__,
            self.pid,
        )

    __repr__ = __str__

    def __eq__(self, other):
        if not isinstance(other, Process):
            return NotImplemented
        return self.pid == other.pid

    def __hash__(self):
        return hash(self.pid)

    @property
    def pid(self):
        """The process PID."""
        return self._pid

    def memory_maps(self, grouped=False):
        """Return process's mapped memory regions as a list of psmap
        named tuples (see parse_smaps()).

        If 'grouped' is True the mapped regions with the same 'path'
        are grouped together and their accounting fields are summed,
        returning a list of pmmap_grouped named tuples instead.
        """
        maps = self._proc.memory_maps()
        if grouped:
            return group_by_path(maps)
        return maps

    def memory_maps_summary(self):
        """Return a single psmap summing the accounting fields of all
        the process's mappings (see summarize()).
        Raises ValueError if the process has no mappings (e.g. a
        kernel thread).
        """
        return summarize(self.memory_maps())


# =====================================================================
# --- system related functions
# =====================================================================


def pids():
    """Return a list of current running PIDs."""
    return _pslinux.pids()


def pid_exists(pid):
    """Return True if given PID exists in the current process list."""
    return _pslinux.pid_exists(pid)
