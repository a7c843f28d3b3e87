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

#
# =============================================================================
#
#                                   Preamble
#
# =============================================================================
#
"""
These are the unittests for the logging setup
"""
import os
import re
import signal
import logging
import unittest
import acorrbench
from acorrbench import init_logging, LogFormatter
from utils import parse_args_cpu_only, simple_exit

parse_args_cpu_only("Logging")

_iso_time = r'\d{4}-\d\d-\d\dT\d\d:\d\d:\d\d\.\d{3}[+-]\d\d:\d\d'


class TestLogging(unittest.TestCase):
    def setUp(self):
        self.logger = logging.getLogger()
        self.level = self.logger.level
        self.handlers = list(self.logger.handlers)
        if hasattr(signal, 'SIGUSR1'):
            self.sig_handler = signal.getsignal(signal.SIGUSR1)

    def tearDown(self):
        for handler in list(self.logger.handlers):
            if handler not in self.handlers:
                self.logger.removeHandler(handler)
        self.logger.setLevel(self.level)
        if hasattr(signal, 'SIGUSR1'):
            signal.signal(signal.SIGUSR1, self.sig_handler)

    def test_formatter(self):
        record = logging.LogRecord('acorrbench', logging.INFO, __file__, 1,
                                   'Benchmarking %s', ('acorr',), None)
        line = LogFormatter(fmt='%(asctime)s %(message)s').format(record)
        self.assertTrue(re.match(_iso_time + ' Benchmarking acorr$', line),
                        msg=line)

    def test_levels(self):
        for verbose, level in ((0, logging.WARN), (False, logging.WARN),
                               (1, logging.INFO), (True, logging.INFO),
                               (2, logging.DEBUG), (3, logging.DEBUG)):
            init_logging(verbose)
            self.assertEqual(self.logger.level, level, msg=str(verbose))

    def test_handler_format(self):
        init_logging(1)
        handler = self.logger.handlers[-1]
        self.assertTrue(isinstance(handler.formatter, LogFormatter))

    @unittest.skipUnless(hasattr(signal, 'SIGUSR1'), "No SIGUSR1 signal")
    def test_sigusr1_toggle(self):
        init_logging(1)
        os.kill(os.getpid(), signal.SIGUSR1)
        self.assertEqual(self.logger.level, logging.DEBUG)
        os.kill(os.getpid(), signal.SIGUSR1)
        self.assertEqual(self.logger.level, logging.WARN)

    def test_version(self):
        self.assertTrue(re.match(r'\d+\.\d+\.\d+$', acorrbench.__version__))


suite = unittest.TestSuite()
suite.addTest(unittest.TestLoader().loadTestsFromTestCase(TestLogging))

if __name__ == '__main__':
    results = unittest.TextTestRunner(verbosity=2).run(suite)
    simple_exit(results)
