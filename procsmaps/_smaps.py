# Copyright (c) 2009, Giampaolo Rodola'. All rights reserved.
# Use of this source code is governed by a BSD-style license that can be
# found in the LICENSE file.

"""Parser for the /proc/[pid]/smaps file format.

Every mapping in smaps is a header line ("55acbeace000-55acbeb0c000
r--p 00000000 08:01 131  /usr/sbin/nginx") followed by a block of
"Key:  N kB" lines terminated by a "VmFlags:" line, with no separator
between mappings. Fields are explained in 'man 5 proc' and in the
kernel sources (fs/proc/task_mmu.c).

The block is not strictly ordered (Ubuntu 16.04.5 for instance moved
entries around) and new kernels keep adding entries, so entries are
matched by name and unknown ones are skipped. End of stream is only
legitimate right before a header line; anywhere else the file is
truncated.
"""

import re

from ._common import debug
from ._common import decode
from ._exceptions import FormatError
from ._exceptions import StreamError
from ._ntuples import ACCOUNTING_FIELDS
from ._ntuples import psmap

__all__ = ["parse_smaps", "SMAPS_FIELDS"]

UINT64_MAX = 2**64 - 1

# token -> (psmap field, required)
# Required fields are present on every kernel we support; optional
# ones are missing on some versions and default to 0.
SMAPS_FIELDS = {
    "Size": ("size", True),
    "Rss": ("rss", False),
    "Pss": ("pss", True),
    "Shared_Clean": ("shared_clean", False),
    "Shared_Dirty": ("shared_dirty", False),
    "Private_Clean": ("private_clean", False),
    "Private_Dirty": ("private_dirty", True),
    "Referenced": ("referenced", True),
    "Anonymous": ("anonymous", False),
    "AnonHugePages": ("anon_huge_pages", True),
    "Swap": ("swap", True),
    "KernelPageSize": ("kernel_page_size", True),
    "MMUPageSize": ("mmu_page_size", False),
    "Locked": ("locked", True),
    "Linear": ("nonlinear", False),
    "Nonlinear": ("nonlinear", False),
}

# "Rss:                 132 kB". Some counters (THPeligible,
# ProtectionKey) have no unit.
_FIELD_RE = re.compile(r"^(\w+):\s+([0-9]+)( kB)?$")
_HEX_RE = re.compile(r"^[0-9a-fA-F]+$")
_DEC_RE = re.compile(r"^[0-9]+$")

# (set char, unset char, name used in error messages) for each position
# of the permission string
_PERMS_CHARS = (
    ("r", "-", "read"),
    ("w", "-", "write"),
    ("x", "-", "exec"),
    ("s", "p", "may-share"),
)


class _LineReader:
    """Wraps the stream of a single parse_smaps() call, remembering
    the current and the previous raw line for error messages.
    """

    __slots__ = ["_stream", "line", "prev_line", "lineno"]

    def __init__(self, stream):
        self._stream = stream
        self.line = None
        self.prev_line = None
        self.lineno = 0

    def readline(self):
        """Return the next line stripped of its newline, or None on
        end of stream.
        """
        data = self._stream.readline()
        if not data:
            return None
        self.prev_line = self.line
        self.line = decode(data)
        if self.line.endswith("\n"):
            self.line = self.line[:-1]
        self.lineno += 1
        return self.line

    def readline_strict(self, what):
        line = self.readline()
        if line is None:
            raise StreamError(
                "end of stream while reading %s" % what,
                prev_line=self.line,
                lineno=self.lineno,
            )
        return line

    def format_error(self, reason):
        return FormatError(
            reason,
            line=self.line,
            prev_line=self.prev_line,
            lineno=self.lineno,
        )


# --- numbers


def _parse_hex(reader, s, what):
    if not _HEX_RE.match(s):
        raise reader.format_error("can't parse %s %r" % (what, s))
    ret = int(s, 16)
    if ret > UINT64_MAX:
        raise reader.format_error("%s %r overflows 64 bits" % (what, s))
    return ret


def _parse_dec(reader, s, what):
    if not _DEC_RE.match(s):
        raise reader.format_error("can't parse %s %r" % (what, s))
    ret = int(s)
    if ret > UINT64_MAX:
        raise reader.format_error("%s %r overflows 64 bits" % (what, s))
    return ret


# --- header line


def _parse_perms(reader, s):
    if len(s) != 4:
        raise reader.format_error("invalid permission string %r" % s)
    ret = []
    for char, (yes, no, name) in zip(s, _PERMS_CHARS):
        if char == yes:
            ret.append(True)
        elif char == no:
            ret.append(False)
        else:
            raise reader.format_error(
                "illegal %s permission flag %r" % (name, char)
            )
    return ret


def _parse_header(reader, line):
    """Parse a "start-end perms offset dev inode [path]" line into a
    dict of psmap fields.
    """
    fields = line.split(" ")
    if len(fields) < 5:
        raise reader.format_error("malformed mapping header")
    addr, perms, offset, dev, inode = fields[:5]

    try:
        start, end = addr.split("-")
    except ValueError:
        raise reader.format_error("malformed address range %r" % addr)
    start = _parse_hex(reader, start, "start address")
    end = _parse_hex(reader, end, "end address")
    if start >= end:
        raise reader.format_error(
            "start address is not below end address %r" % addr
        )

    readable, writable, executable, may_share = _parse_perms(reader, perms)

    try:
        major, minor = dev.split(":")
    except ValueError:
        raise reader.format_error("malformed device %r" % dev)

    # XXX - a pathname containing spaces only retains its last word;
    # same goes for the " (deleted)" suffix.
    path = fields[-1] if len(fields) > 5 else ""

    return dict(
        start=start,
        end=end,
        readable=readable,
        writable=writable,
        executable=executable,
        may_share=may_share,
        offset=_parse_hex(reader, offset, "page offset"),
        major=_parse_hex(reader, major, "major device"),
        minor=_parse_hex(reader, minor, "minor device"),
        inode=_parse_dec(reader, inode, "inode"),
        path=path,
    )


# --- field block


def _parse_vmflags(reader, line):
    flags = line.split(" ")
    if flags[0] != "VmFlags:":
        raise reader.format_error("malformed VmFlags line")
    return frozenset(x for x in flags[1:] if x)


def _parse_nonlinear(reader, line):
    m = _FIELD_RE.match(line) if line is not None else None
    if m is None or m.group(1) != "Nonlinear" or not m.group(3):
        raise reader.format_error(
            "'nl' flag is set but no Nonlinear line follows VmFlags"
        )
    return _parse_dec(reader, m.group(2), "Nonlinear")


def _parse_fields(reader):
    """Read the "Key: N kB" block up to and including the VmFlags
    line. Return a dict of psmap fields.
    """
    values = dict.fromkeys(ACCOUNTING_FIELDS, 0)
    seen = set()
    nonlinear_in_block = False
    while True:
        line = reader.readline_strict("mapping fields")
        if line.startswith("VmFlags:"):
            break
        m = _FIELD_RE.match(line)
        if m is None:
            raise reader.format_error("unrecognized smaps line")
        token, value, unit = m.groups()
        try:
            name, _ = SMAPS_FIELDS[token]
        except KeyError:
            debug("skipping unrecognized smaps field %r" % token)
            continue
        if not unit:
            raise reader.format_error("missing kB unit for %r" % token)
        if name in seen:
            raise reader.format_error("duplicate %r field" % token)
        values[name] = _parse_dec(reader, value, token)
        seen.add(name)
        if token == "Nonlinear":
            nonlinear_in_block = True

    for token, (name, required) in SMAPS_FIELDS.items():
        if required and name not in seen:
            raise reader.format_error("missing required field %r" % token)

    values["vm_flags"] = flags = _parse_vmflags(reader, line)
    if "nl" in flags and not nonlinear_in_block:
        # legacy kernels (< 4.0) with VM_NONLINEAR mappings; Linear
        # shares the slot but does not replace this line
        line = reader.readline()
        values["nonlinear"] = _parse_nonlinear(reader, line)
    return values


# --- public API


def _parse_record(reader):
    line = reader.readline()
    if line is None:
        return None
    fields = _parse_header(reader, line)
    fields.update(_parse_fields(reader))
    return psmap(**fields)


def parse_smaps(stream):
    """Parse the content of a /proc/[pid]/smaps file and return a
    list of psmap named tuples, one per mapping, in file order.

    'stream' is a binary file object (or anything with a readline()
    method). Sizes are kB, as the kernel reports them.

    Raises FormatError if a line is malformed and StreamError if the
    stream ends in the middle of a mapping; I/O errors propagate
    unchanged. In all cases nothing is returned for the mappings which
    were successfully parsed before the failure.
    """
    reader = _LineReader(stream)
    ret = []
    while True:
        m = _parse_record(reader)
        if m is None:
            return ret
        ret.append(m)
