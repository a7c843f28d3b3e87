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
These are the unittests for the benchmark driver
"""
import os
import argparse
import tempfile
import unittest
from acorrbench import bench
from acorrbench.bench import (benchmark, run_benchmarks, format_result,
                              BenchmarkResult)
from acorrbench.signals import sine_signal
from acorrbench.variants import get_variant, select_variants
from utils import parse_args_all_schemes, simple_exit

_scheme, _context = parse_args_all_schemes("Benchmark driver")


class TestBenchmark(unittest.TestCase):
    def setUp(self):
        self.context = _context
        self.scheme = _scheme
        self.samples = sine_signal(256)

    def test_benchmark(self):
        variant = get_variant('acorr_vec4')
        with self.context:
            result = benchmark(variant, self.samples, iterations=3,
                               work_group_size=64, verify=True, warmup=1)
        self.assertTrue(isinstance(result, BenchmarkResult))
        self.assertEqual(result.kernel_name, 'acorr_vec4')
        self.assertEqual(result.strategy, 'vector')
        self.assertEqual(result.encoding, 'float')
        self.assertEqual(result.sample_size, 256)
        self.assertEqual(result.iterations, 3)
        self.assertTrue(result.run_time >= 0)
        self.assertAlmostEqual(result.per_run, result.run_time / 3)
        self.assertTrue(result.verified)
        self.assertTrue(result.error <= variant.encoding.tolerance)
        self.assertEqual(result.device, self.context.describe())

    def test_unverified(self):
        with self.context:
            result = benchmark(get_variant('acorr_half'), self.samples,
                               iterations=1)
        self.assertEqual(result.verified, None)
        self.assertEqual(result.error, None)
        self.assertFalse('error' in result.to_dict())
        self.assertFalse('OK' in format_result(result))

    def test_bad_arguments(self):
        variant = get_variant('acorr')
        self.assertRaises(ValueError, benchmark, variant, self.samples,
                          iterations=0)
        self.assertRaises(ValueError, benchmark, variant, self.samples,
                          iterations=1, warmup=-1)

    def test_run_benchmarks(self):
        variants = select_variants(encodings=['fixed'])
        with self.context:
            results = run_benchmarks(variants, self.samples, iterations=2,
                                     work_group_size=32, verify=True)
        self.assertEqual([r.kernel_name for r in results],
                         ['acorr_fixed', 'acorr_fixed_local',
                          'acorr_fixed_vec4'])
        for result in results:
            self.assertTrue(result.verified)
            line = format_result(result)
            self.assertTrue(line.startswith(result.kernel_name))
            self.assertTrue('usec/run' in line)
            self.assertTrue('OK' in line)

    def test_callback(self):
        seen = []
        variants = select_variants(strategies=['naive'])
        with self.context:
            results = run_benchmarks(variants, self.samples, iterations=1,
                                     callback=seen.append)
        self.assertEqual(len(seen), 3)
        for got, result in zip(seen, results):
            self.assertTrue(got is result)

    def test_to_dict(self):
        with self.context:
            result = benchmark(get_variant('acorr_local'), self.samples,
                               iterations=2, work_group_size=64,
                               verify=True)
        d = result.to_dict()
        for key in ('kernel_name', 'strategy', 'encoding', 'sample_size',
                    'iterations', 'run_time', 'per_run', 'error',
                    'verified', 'device'):
            self.assertTrue(key in d, msg=key)


class TestBenchmarkOptions(unittest.TestCase):
    def setUp(self):
        self.parser = argparse.ArgumentParser()
        bench.insert_benchmark_option_group(self.parser)

    def parse(self, args):
        opt = self.parser.parse_args(args)
        bench.verify_benchmark_options(opt, self.parser)
        return opt

    def test_defaults(self):
        opt = self.parse([])
        self.assertEqual(opt.sample_size, 1024)
        self.assertEqual(opt.iterations, 10000)
        self.assertEqual(opt.work_group_size, 128)
        self.assertEqual(opt.signal, 'sine')
        variants, kwds = bench.from_cli(opt)
        self.assertEqual(len(variants), 9)
        self.assertEqual(kwds['iterations'], 10000)
        self.assertEqual(kwds['kernel_source'], None)
        self.assertFalse(kwds['verify'])

    def test_selection(self):
        opt = self.parse(['--strategies', 'local', 'naive',
                          '--encodings', 'half', '--iterations', '5',
                          '--verify'])
        variants, kwds = bench.from_cli(opt)
        self.assertEqual([v.name for v in variants],
                         ['acorr_half', 'acorr_half_local'])
        self.assertEqual(kwds['iterations'], 5)
        self.assertTrue(kwds['verify'])

    def test_kernel_file(self):
        fd, path = tempfile.mkstemp(suffix='.cl')
        with os.fdopen(fd, 'w') as f:
            f.write("__kernel void acorr(const int n) {}\n")
        try:
            opt = self.parse(['--kernel-file', path, '--variants', 'acorr'])
            variants, kwds = bench.from_cli(opt)
            self.assertTrue('__kernel void acorr' in kwds['kernel_source'])
        finally:
            os.remove(path)

    def test_invalid(self):
        for args in (['--sample-size', '0'],
                     ['--iterations', '0'],
                     ['--work-group-size', '-1'],
                     ['--warmup', '-2'],
                     ['--kernel-file', '/nonexistent/acorr.cl'],
                     ['--variants', 'acorr', '--encodings', 'fixed'],
                     ['--encodings', 'fixed', '--sample-size', '100000']):
            self.assertRaises(SystemExit, self.parse, args)


suite = unittest.TestSuite()
suite.addTest(unittest.TestLoader().loadTestsFromTestCase(TestBenchmark))
suite.addTest(unittest.TestLoader().loadTestsFromTestCase(TestBenchmarkOptions))

if __name__ == '__main__':
    results = unittest.TextTestRunner(verbosity=2).run(suite)
    simple_exit(results)
