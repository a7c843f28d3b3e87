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
This module contains a few helper functions designed to make writing
acorrbench unit tests easier, while still allowing the tests to be run on
the host and on an OpenCL device.

Every test module can be run as a script, with '--scheme cpu' (the default)
or '--scheme opencl', and 'python setup.py test_cpu' / 'test_opencl' run all
of them that way. Unknown arguments are ignored, so the same modules can be
collected by pytest; the scheme is then taken from the ACORRBENCH_TEST_SCHEME
environment variable.

Tests of code that runs in several schemes put

   _scheme, _context = parse_args_all_schemes('MyFeature')

before the definition of the unit test class, and use 'with self.context:'
in the tests. Tests of host-only code call

   parse_args_cpu_only('MyFeature')

instead.
"""
import os
import sys
import argparse
from sys import exit as _exit
from acorrbench.scheme import CPUScheme, OpenCLScheme
from acorrbench.device import get_device_list

_scheme_dict = {'cpu': 'CPU', 'opencl': 'OpenCL'}


def _parse_scheme_args():
    _parser = argparse.ArgumentParser(add_help=False, allow_abbrev=False)
    _parser.add_argument('--scheme', choices=('cpu', 'opencl'),
                         default=os.getenv('ACORRBENCH_TEST_SCHEME', 'cpu'),
                         help='specifies processing scheme, can be cpu '
                              '[default], opencl')
    _parser.add_argument('--device-num', type=int, dest='devicenum',
                         default=int(os.getenv('ACORRBENCH_DEVICE_ID', '0')),
                         help='specifies the OpenCL device to use, 0 by '
                              'default')
    _opt, _args = _parser.parse_known_args(sys.argv[1:])
    return _opt


def parse_args_all_schemes(feature_str):
    _opt = _parse_scheme_args()
    _scheme = _opt.scheme

    if _scheme == 'cpu':
        _context = CPUScheme()
    if _scheme == 'opencl':
        _context = OpenCLScheme(device_num=_opt.devicenum)

    print(72*'=')
    print("Running {0} unit tests for {1}:".format(_scheme_dict[_scheme],
                                                  feature_str))

    return [_scheme, _context]


def parse_args_cpu_only(feature_str):
    # The arguments are parsed only so that a GPU scheme is accepted; the
    # tests themselves always run on the host.
    _parse_scheme_args()

    print(72*'=')
    print("Running {0} unit tests for {1}:".format('CPU', feature_str))

    return


_opencl_context = []
def opencl_context():
    """Return an OpenCLScheme on the first device, or None if there is no
    usable OpenCL device. The scheme is created once per process.
    """
    if not _opencl_context:
        ctx = None
        if get_device_list():
            ctx = OpenCLScheme(device_num=0)
        _opencl_context.append(ctx)
    return _opencl_context[0]


def simple_exit(results):
    """
    This function causes the script to exit normally with return value of
    zero if and only if all tests within the script passed and had no
    errors. Otherwise it returns the number of failures plus the number of
    errors

    Parameters
    ----------
    results: an instance of unittest.TestResult, returned (for instance) from a call such as
        results = unittest.TextTestRunner(verbosity=2).run(suite)
    """
    if results.wasSuccessful():
        _exit(0)
    else:
        nfail = len(results.errors)+len(results.failures)
        _exit(nfail)
