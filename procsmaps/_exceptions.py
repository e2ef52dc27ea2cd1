# Copyright (c) 2009, Giampaolo Rodola'. All rights reserved.
# Use of this source code is governed by a BSD-style license that can be
# found in the LICENSE file.


class Error(Exception):
    """Base exception class. All other procsmaps exceptions inherit
    from this one.
    """

    def __init__(self, msg=""):
        Exception.__init__(self, msg)
        self.msg = msg

    def __repr__(self):
        ret = "procsmaps.%s %s" % (self.__class__.__name__, self.msg)
        return ret.strip()

    __str__ = __repr__


class ParseError(Error):
    """Base exception class for smaps parsing failures.

    'line' is the raw line the parser choked on (None if the stream
    ended before one could be read), 'prev_line' is the raw line
    immediately preceding it (None at the beginning of the stream) and
    'lineno' is the 1-based number of the last line read.
    """

    def __init__(self, reason, line=None, prev_line=None, lineno=None):
        Error.__init__(self, reason)
        self.reason = reason
        self.line = line
        self.prev_line = prev_line
        self.lineno = lineno
        details = []
        if lineno is not None:
            details.append("lineno=%s" % lineno)
        if line is not None:
            details.append("line=%r" % line)
        details.append(
            "prev_line=%s" % ("<BOF>" if prev_line is None else repr(prev_line))
        )
        self.msg = "%s (%s)" % (reason, ", ".join(details))


class StreamError(ParseError):
    """Exception raised when the stream ends in the middle of a
    mapping record (truncated smaps file).
    """


class FormatError(ParseError):
    """Exception raised when a line does not have any of the shapes
    the smaps format allows at that position.
    """


class NoSuchProcess(Error):
    """Exception raised when a process with a certain PID doesn't
    or no longer exists.
    """

    def __init__(self, pid, msg=None):
        Error.__init__(self, msg)
        self.pid = pid
        self.msg = msg
        if msg is None:
            self.msg = "process no longer exists (pid=%s)" % self.pid


class AccessDenied(Error):
    """Exception raised when permission to read a process's smaps
    file is denied.
    """

    def __init__(self, pid=None, msg=None):
        Error.__init__(self, msg)
        self.pid = pid
        self.msg = msg
        if msg is None:
            self.msg = "(pid=%s)" % self.pid if pid is not None else ""
