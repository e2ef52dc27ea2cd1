# Copyright (c) 2009, Giampaolo Rodola'. All rights reserved.
# Use of this source code is governed by a BSD-style license that can be
# found in the LICENSE file.

"""Aggregation of the mappings returned by parse_smaps()."""

from ._ntuples import SUMMED_FIELDS
from ._ntuples import pmmap_grouped
from ._ntuples import psmap

__all__ = ["summarize", "group_by_path"]


def summarize(maps):
    """Return a psmap whose accounting fields are the sum of the ones
    of all 'maps'. Page sizes are not per-mapping quantities, so
    they're copied from the first mapping; address, permission and
    identity fields are left empty.
    """
    it = iter(maps)
    try:
        first = next(it)
    except StopIteration:
        raise ValueError("can't summarize an empty sequence of mappings")
    totals = dict((name, getattr(first, name)) for name in SUMMED_FIELDS)
    for m in it:
        for name in SUMMED_FIELDS:
            totals[name] += getattr(m, name)
    return psmap(
        start=0,
        end=0,
        readable=False,
        writable=False,
        executable=False,
        may_share=False,
        offset=0,
        major=0,
        minor=0,
        inode=0,
        path="",
        kernel_page_size=first.kernel_page_size,
        mmu_page_size=first.mmu_page_size,
        vm_flags=frozenset(),
        **totals
    )


def group_by_path(maps):
    """Group 'maps' by path summing their accounting fields. Return a
    list of pmmap_grouped named tuples sorted by first appearance.
    Anonymous mappings are grouped under an empty path.
    """
    d = {}
    for m in maps:
        nums = [getattr(m, name) for name in SUMMED_FIELDS]
        try:
            d[m.path] = [x + y for x, y in zip(d[m.path], nums)]
        except KeyError:
            d[m.path] = nums
    return [pmmap_grouped(path, *nums) for path, nums in d.items()]
