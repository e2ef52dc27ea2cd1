#!/usr/bin/env python3

# Copyright (c) 2009, Giampaolo Rodola'. All rights reserved.
# Use of this source code is governed by a BSD-style license that can be
# found in the LICENSE file.

"""
Show detailed memory usage about all (querable) processes.

Processes are sorted by their "USS" (Unique Set Size) memory, which is
probably the most representative metric for determining how much memory
is actually being used by a process. USS is the sum of the private
(clean and dirty) memory of all mappings.

This is similar to "smem" cmdline utility on Linux:
https://www.selenic.com/smem/

$ ./scripts/procsmem.py
PID       Maps     USS     PSS    Swap     RSS
==============================================
...
3986       412   15.3M   16.6M    0.0B   25.6M
3906       508   17.6M   18.1M    0.0B   26.7M
3991       389   19.0M   23.3M    0.0B   40.7M
20513      932   65.8M   73.0M    0.0B   87.9M
3976      1021  115.0M  117.0M    0.0B  130.9M
"""

import sys

import procsmaps
from procsmaps._common import bytes2human


if not procsmaps.LINUX:
    sys.exit("platform not supported")


def kb2human(n):
    return bytes2human(n * 1024)


def main():
    ad_pids = []
    procs = []
    for pid in procsmaps.pids():
        try:
            maps = procsmaps.Process(pid).memory_maps()
        except procsmaps.AccessDenied:
            ad_pids.append(pid)
        except procsmaps.NoSuchProcess:
            pass
        else:
            # kernel threads have no mappings
            if not maps:
                continue
            total = procsmaps.summarize(maps)
            uss = total.private_clean + total.private_dirty
            procs.append((uss, pid, len(maps), total))

    procs.sort()
    templ = "%-7s %6s %7s %7s %7s %7s"
    print(templ % ("PID", "Maps", "USS", "PSS", "Swap", "RSS"))
    print("=" * 46)
    for uss, pid, nmaps, total in procs[:86]:
        line = templ % (
            pid,
            nmaps,
            kb2human(uss),
            kb2human(total.pss),
            kb2human(total.swap),
            kb2human(total.rss),
        )
        print(line)
    if ad_pids:
        print("warning: access denied for %s pids" % (len(ad_pids)),
              file=sys.stderr)


if __name__ == '__main__':
    sys.exit(main())
