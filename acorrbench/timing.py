# Copyright (C) 2016  The AutoCorrelationBench developers
#
# This program is free software; you can redistribute it and/or modify it
# under the terms of the GNU General Public License as published by the
# Free Software Foundation; either version 3 of the License, or (at your
# option) any later version.
#
# This program is distributed in the hope that it will be useful, but
# WITHOUT ANY WARRANTY; without even the implied warranty of
# MERCHANTABILITY or FITNESS FOR A PARTICULAR PURPOSE.  See the GNU General
# Public License for more details.
#
# You should have received a copy of the GNU General Public License along
# with this program; if not, write to the Free Software Foundation, Inc.,
# 51 Franklin Street, Fifth Floor, Boston, MA  02110-1301, USA.
"""
Wall clock timing for the benchmark loops.
"""
from timeit import default_timer


class Timer(object):
    """Measure elapsed wall clock time since creation or the last reset.

    Can also be used as a context manager, in which case ``elapsed``
    reports the time spent inside the ``with`` block once it has exited.
    """
    def __init__(self):
        self._stop = None
        self.reset()

    def reset(self):
        self._start = default_timer()
        self._stop = None

    def elapsed(self):
        """Elapsed time in seconds."""
        end = self._stop if self._stop is not None else default_timer()
        return end - self._start

    def elapsed_ms(self):
        return 1000.0 * self.elapsed()

    def __enter__(self):
        self.reset()
        return self

    def __exit__(self, type, value, traceback):
        self._stop = default_timer()
