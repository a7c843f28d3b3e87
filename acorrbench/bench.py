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
This module runs the timed loops over the kernel variants and reports the
results.
"""
import os
import logging
import acorrbench
from acorrbench.acorr import AutoCorrelator
from acorrbench.scheme import mgr
from acorrbench.signals import available_signals
from acorrbench.timing import Timer
from acorrbench.variants import (VARIANTS, strategy_names, select_variants)
from acorrbench.encoding import encoding_names


class BenchmarkResult(object):
    """Timing of one kernel variant.

    Attributes
    ----------
    run_time : float
        Wall clock seconds spent in the timed loop.
    per_run : float
        run_time divided by the number of iterations.
    error : {None, float}
        Relative error of the output when it was verified.
    verified : {None, bool}
        Whether the error is within the tolerance of the encoding, None if
        the output was not checked.
    """
    def __init__(self, variant, sample_size, iterations, run_time,
                 error=None, verified=None, device=None):
        self.variant = variant
        self.kernel_name = variant.kernel_name
        self.strategy = variant.strategy
        self.encoding = variant.encoding.name
        self.sample_size = sample_size
        self.iterations = iterations
        self.run_time = run_time
        self.per_run = run_time / iterations
        self.error = error
        self.verified = verified
        self.device = device

    def to_dict(self):
        d = dict(kernel_name=self.kernel_name, strategy=self.strategy,
                 encoding=self.encoding, sample_size=self.sample_size,
                 iterations=self.iterations, run_time=self.run_time,
                 per_run=self.per_run)
        if self.error is not None:
            d['error'] = self.error
            d['verified'] = self.verified
        if self.device is not None:
            d['device'] = self.device
        return d

    def __repr__(self):
        return "<BenchmarkResult %s %.6f sec>" % (self.kernel_name,
                                                  self.run_time)


def benchmark(variant, samples, iterations=None, work_group_size=None,
              kernel_source=None, verify=False, warmup=0):
    """Time one kernel variant in the active processing scheme.

    The samples are encoded and uploaded once. Each of the iterations
    enqueues the kernel and waits for it to finish; the wall clock time of
    the whole loop is reported. The output is downloaded afterwards and,
    if requested, compared to the host reference.

    Parameters
    ----------
    variant : KernelVariant
        The kernel to time.
    samples : numpy.ndarray
        Real input samples.
    iterations : {acorrbench.ITERATIONS, int}
        Number of timed launches.
    work_group_size : {acorrbench.WORK_GROUP_SIZE, int}
        Local work size of the tiled kernels.
    kernel_source : {None, str}
        OpenCL source replacing the bundled kernels.
    verify : {False, bool}
        Compare the output to the host reference.
    warmup : {0, int}
        Untimed launches before the timed loop.

    Returns
    -------
    BenchmarkResult
    """
    if iterations is None:
        iterations = acorrbench.ITERATIONS
    if iterations < 1:
        raise ValueError("At least one iteration is required")
    if warmup < 0:
        raise ValueError("The number of warm-up runs cannot be negative")

    corr = AutoCorrelator(samples, variant, work_group_size=work_group_size,
                          kernel_source=kernel_source)

    for _ in range(warmup):
        corr.correlate()
    corr.synchronize()

    logging.debug("Timing %s over %d iterations", variant.kernel_name,
                  iterations)
    with Timer() as timer:
        for _ in range(iterations):
            corr.correlate()
            corr.synchronize()
    run_time = timer.elapsed()

    output = corr.get_output()

    error = verified = None
    if verify:
        error = variant.encoding.relative_error(output, corr.encoded)
        verified = error <= variant.encoding.tolerance
        if verified:
            logging.info("%s verified, relative error %.3g",
                         variant.kernel_name, error)
        else:
            logging.error("%s failed verification, relative error %.3g "
                          "exceeds %.3g", variant.kernel_name, error,
                          variant.encoding.tolerance)

    return BenchmarkResult(variant, len(samples), iterations, run_time,
                           error=error, verified=verified,
                           device=mgr.state.describe())


def run_benchmarks(variants, samples, callback=None, **kwds):
    """Time each variant in turn, see :func:`benchmark` for the options.

    Parameters
    ----------
    callback : {None, callable}
        Called with each BenchmarkResult as soon as its variant has run.

    Returns
    -------
    list of BenchmarkResult
    """
    results = []
    for variant in variants:
        logging.info("Benchmarking %s", variant.kernel_name)
        result = benchmark(variant, samples, **kwds)
        if callback is not None:
            callback(result)
        results.append(result)
    return results


def format_result(result):
    """One line report of a result."""
    line = "%-18s %-6s %-6s N:%d Iterations:%d Time:%.6f sec  %.3f usec/run" % (
           result.kernel_name, result.strategy, result.encoding,
           result.sample_size, result.iterations, result.run_time,
           1e6 * result.per_run)
    if result.verified is not None:
        line += "  %s (error %.3g)" % ("OK" if result.verified else "FAILED",
                                       result.error)
    return line


def insert_benchmark_option_group(parser):
    """Adds the options that control the benchmark loop.

    Parameters
    ----------
    parser : object
        ArgumentParser instance
    """
    group = parser.add_argument_group("Options for the benchmark.")
    group.add_argument("--sample-size", type=int,
                       default=acorrbench.SAMPLE_SIZE,
                       help="Number of samples in the test signal. "
                            "Default %d." % acorrbench.SAMPLE_SIZE)
    group.add_argument("--iterations", type=int,
                       default=acorrbench.ITERATIONS,
                       help="Number of timed kernel launches per variant. "
                            "Default %d." % acorrbench.ITERATIONS)
    group.add_argument("--work-group-size", type=int,
                       default=acorrbench.WORK_GROUP_SIZE,
                       help="Local work size of the local memory kernels. "
                            "Default %d." % acorrbench.WORK_GROUP_SIZE)
    group.add_argument("--warmup", type=int, default=0,
                       help="Untimed launches before each timed loop. "
                            "Default 0.")
    group.add_argument("--signal", choices=available_signals(),
                       default='sine',
                       help="Test signal to correlate. Default sine.")
    group.add_argument("--seed", type=int,
                       help="Seed of the noise signal.")
    group.add_argument("--variants", nargs='+', metavar='KERNEL',
                       choices=list(VARIANTS),
                       help="Kernel names to run. Default: all of them.")
    group.add_argument("--strategies", nargs='+', choices=strategy_names,
                       help="Only run these optimization strategies.")
    group.add_argument("--encodings", nargs='+', choices=encoding_names,
                       help="Only run these sample encodings.")
    group.add_argument("--kernel-file",
                       help="OpenCL source file to build instead of the "
                            "bundled kernels. It must define the entry "
                            "points of the selected variants.")
    group.add_argument("--verify", action="store_true", default=False,
                       help="Compare each output to the host reference.")


def verify_benchmark_options(opt, parser):
    """Checks the benchmark options, exiting through the parser on error.

    Parameters
    ----------
    opt : object
        Result of parsing the CLI with ArgumentParser.
    parser : object
        ArgumentParser instance.
    """
    if opt.sample_size < 1:
        parser.error("--sample-size must be positive")
    if opt.iterations < 1:
        parser.error("--iterations must be positive")
    if opt.work_group_size < 1:
        parser.error("--work-group-size must be positive")
    if opt.warmup < 0:
        parser.error("--warmup cannot be negative")
    if opt.kernel_file and not os.path.isfile(opt.kernel_file):
        parser.error("Kernel file %s does not exist" % opt.kernel_file)
    try:
        variants = select_variants(opt.variants, opt.strategies,
                                   opt.encodings)
        for variant in variants:
            variant.encoding.check_size(opt.sample_size)
    except ValueError as err:
        parser.error(str(err))


def from_cli(opt):
    """Returns the variants and the keyword arguments of run_benchmarks.

    Parameters
    ----------
    opt : object
        Result of parsing the CLI with ArgumentParser, or any object with
        the required attributes.
    """
    variants = select_variants(opt.variants, opt.strategies, opt.encodings)

    kernel_source = None
    if opt.kernel_file:
        logging.info("Loading kernels from %s", opt.kernel_file)
        with open(opt.kernel_file) as f:
            kernel_source = f.read()

    kwds = dict(iterations=opt.iterations,
                work_group_size=opt.work_group_size,
                kernel_source=kernel_source,
                verify=opt.verify,
                warmup=opt.warmup)
    return variants, kwds
