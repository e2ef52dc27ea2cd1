# Copyright (c) 2009, Giampaolo Rodola'. All rights reserved.
# Use of this source code is governed by a BSD-style license that can be
# found in the LICENSE file.

from collections import namedtuple

# Accounting fields of a mapping, in the order the kernel usually
# prints them. Values are kB, exactly as read from the smaps file.
ACCOUNTING_FIELDS = (
    "size",
    "rss",
    "pss",
    "shared_clean",
    "shared_dirty",
    "private_clean",
    "private_dirty",
    "referenced",
    "anonymous",
    "anon_huge_pages",
    "swap",
    "kernel_page_size",
    "mmu_page_size",
    "locked",
    "nonlinear",
)

# Per-architecture constants: copied, not summed, when aggregating.
PAGE_SIZE_FIELDS = ("kernel_page_size", "mmu_page_size")

SUMMED_FIELDS = tuple(x for x in ACCOUNTING_FIELDS if x not in PAGE_SIZE_FIELDS)

# ===================================================================
# --- procsmaps.parse_smaps()
# ===================================================================


class psmap(
    namedtuple(
        "psmap",
        (
            "start",
            "end",
            "readable",
            "writable",
            "executable",
            "may_share",
            "offset",
            "major",
            "minor",
            "inode",
            "path",
        )
        + ACCOUNTING_FIELDS
        + ("vm_flags",),
    )
):
    __slots__ = ()

    @property
    def perms(self):
        return "%s%s%s%s" % (
            "r" if self.readable else "-",
            "w" if self.writable else "-",
            "x" if self.executable else "-",
            "s" if self.may_share else "p",
        )

    @property
    def addr(self):
        return "%x-%x" % (self.start, self.end)


# procsmaps.group_by_path(), procsmaps.Process.memory_maps(grouped=True)
pmmap_grouped = namedtuple("pmmap_grouped", ("path",) + SUMMED_FIELDS)
