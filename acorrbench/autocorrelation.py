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
This module provides host implementations of the autocorrelation that the
benchmark kernels compute. They serve as the CPU processing scheme and as
the reference when kernel output is verified.
"""
import numpy
from numpy.lib.stride_tricks import sliding_window_view


def autocorrelation(data):
    r"""Calculates the unnormalized one-sided autocorrelation.

    .. math::

        r[k] = \sum_{i=0}^{n-k-1} x_{i} x_{i+k}, \qquad k = 0 \ldots n-1

    The sum is evaluated in double precision through a zero padded FFT, so
    the result is free of the circular wrap-around.

    Parameters
    -----------
    data : array_like
        The real data series.

    Returns
    -------
    acf : numpy.ndarray
        float64 array of the same length as data.
    """
    x = numpy.asarray(data, dtype=numpy.float64)
    nx = len(x)
    if nx == 0:
        return numpy.zeros(0, dtype=numpy.float64)

    npad = 1
    while npad < 2 * nx:
        npad = npad << 1

    fdata = numpy.fft.rfft(x, n=npad)
    acf = numpy.fft.irfft(fdata * numpy.conjugate(fdata), n=npad)
    return acf[:nx]


def direct_autocorrelation(data, dtype=None):
    """Autocorrelation by an explicit loop over lags.

    Each lag is one dot product, evaluated in the precision of dtype
    (default: the dtype of data). This mirrors the naive kernel, where
    every work item owns one lag.
    """
    x = numpy.asarray(data)
    if dtype is not None:
        x = x.astype(dtype)
    n = len(x)
    out = numpy.zeros(n, dtype=x.dtype)
    for k in range(n):
        out[k] = numpy.dot(x[:n - k], x[k:])
    return out


def fixed_autocorrelation(samples, shift=15, chunk=256):
    """Exact emulation of the fixed point kernels.

    Every product of two Q1.15 samples is formed in integer arithmetic and
    arithmetically shifted right by shift before it is accumulated,
    which is what the device code does with 32-bit integers.

    Parameters
    ----------
    samples : array_like of int
        Q1.15 encoded samples.
    shift : {15, int}
        Right shift applied to every product.
    chunk : {256, int}
        Number of rows of the product matrix formed at a time.

    Returns
    -------
    numpy.ndarray
        int64 array of the same length as samples.
    """
    q = numpy.asarray(samples, dtype=numpy.int64)
    n = len(q)
    out = numpy.zeros(n, dtype=numpy.int64)
    if n == 0:
        return out

    # windows[i, k] is q[i + k], or zero past the end of the buffer
    padded = numpy.concatenate([q, numpy.zeros(n, dtype=numpy.int64)])
    windows = sliding_window_view(padded, n)

    for start in range(0, n, chunk):
        stop = min(start + chunk, n)
        prod = (q[start:stop, None] * windows[start:stop]) >> shift
        out += prod.sum(axis=0)
    return out
