#!/usr/bin/env python
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
setup.py file for the AutoCorrelationBench package
"""

import os, fnmatch, sys, subprocess

from setuptools import setup, find_packages, Command

install_requires = ['numpy>=1.20',
                    'pyopencl>=2018.1',
                    'pytools',
                    'Mako>=1.0.1',
                    'decorator>=3.4.2',
                    'h5py>=2.5',
                    ]

extras_require = {'test': ['pytest']}

test_results = []
# Run all of the testing scripts
class TestBase(Command):
    user_options = []
    scheme = None

    def initialize_options(self):
        pass

    def finalize_options(self):
        pass

    def find_test_modules(self, pattern):
        # Find all the unittests that match a given string pattern
        modules = []
        for path, dirs, files in os.walk("test"):
            for filename in fnmatch.filter(files, pattern):
                modules.append(os.path.join(path, filename))
        return sorted(modules)

    def run(self):
        test_results.append("\n" + (self.scheme + " tests ").rjust(30))
        for test in self.find_test_modules("test*.py"):
            test_command = [sys.executable, test, '--scheme', self.scheme]
            a = subprocess.call(test_command, env=os.environ)
            name = os.path.basename(test)
            if a != 0:
                result_str = name.ljust(30) + ": Fail : " + str(a)
            else:
                result_str = name.ljust(30) + ": Pass"
            test_results.append(result_str)

        for test in test_results:
            print(test)

class test_cpu(TestBase):
    description = "run all tests on the host"
    scheme = 'cpu'

class test_opencl(TestBase):
    description = "run all tests on the first OpenCL device"
    scheme = 'opencl'

cmdclass = {'test_cpu': test_cpu,
            'test_opencl': test_opencl,
            }

VERSION = '0.2.0'

setup (
    name = 'AutoCorrelationBench',
    version = VERSION,
    description = 'Microbenchmarks of OpenCL autocorrelation kernels.',
    author = 'The AutoCorrelationBench developers',
    keywords = ['opencl', 'gpu', 'benchmark', 'autocorrelation',
                'signal processing'],
    cmdclass = cmdclass,
    python_requires = '>=3.7',
    install_requires = install_requires,
    extras_require = extras_require,
    scripts = ['bin/acorrbench'],
    packages = find_packages(exclude=['test', 'test.*']),
    classifiers=[
        'Programming Language :: Python :: 3',
        'Intended Audience :: Science/Research',
        'Natural Language :: English',
        'Topic :: Scientific/Engineering',
        'Topic :: Software Development :: Testing',
        'License :: OSI Approved :: GNU General Public License (GPL)',
    ],
)
