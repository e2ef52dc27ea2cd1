#!/usr/bin/env python3

# Copyright (c) 2009, Giampaolo Rodola'. All rights reserved.
# Use of this source code is governed by a BSD-style license that can be
# found in the LICENSE file.

"""
A clone of 'pmap -x' utility on Linux.
Report memory map of a process as read from /proc/[pid]/smaps.

$ python3 scripts/pmap.py 32402
Address              Size      RSS      PSS  Mode   Mapping
0000000000400000   956.0K   812.0K   203.0K  r-xp   /usr/sbin/php-fpm7.0
0000000001c39000     2.1M     2.0M     2.0M  rw-p   [heap]
00007f15d9e7a000     4.0K     4.0K     2.0K  rw-s   (deleted)
00007fff94be6000   132.0K    48.0K    48.0K  rw-p   [stack]
00007fff94dd1000     8.0K     4.0K     0.0B  r-xp   [vdso]
...
--------------------------------------------------------------
Total                5.2M     2.9M     2.2M
"""

import shutil
import sys

import procsmaps
from procsmaps._common import bytes2human


def safe_print(s):
    s = s[:shutil.get_terminal_size()[0]]
    try:
        print(s)
    except UnicodeEncodeError:
        print(s.encode('ascii', 'ignore').decode())


def kb2human(n):
    return bytes2human(n * 1024)


def main():
    if len(sys.argv) != 2:
        sys.exit('usage: pmap <pid>')
    p = procsmaps.Process(int(sys.argv[1]))
    maps = p.memory_maps()
    templ = "%-16s %8s %8s %8s  %-6s %s"
    print(templ % ("Address", "Size", "RSS", "PSS", "Mode", "Mapping"))
    for m in maps:
        safe_print(templ % (
            "%016x" % m.start,
            kb2human(m.size),
            kb2human(m.rss),
            kb2human(m.pss),
            m.perms,
            m.path or "[anon]"))
    print("-" * 62)
    if maps:
        total = procsmaps.summarize(maps)
        print(templ % ("Total", kb2human(total.size), kb2human(total.rss),
                       kb2human(total.pss), '', ''))
    safe_print("PID = %s, mappings = %s" % (p.pid, len(maps)))


if __name__ == '__main__':
    main()
