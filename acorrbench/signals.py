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
This module generates the sample buffers that are fed to the
autocorrelation kernels.
"""
import numpy

_SIGNALS = ('sine', 'noise')


def _check_length(n):
    if int(n) < 1:
        raise ValueError("The signal must hold at least one sample, "
                         "got %s" % n)
    return int(n)


def sine_signal(n, half_cycles=3.5, dtype=numpy.float64):
    r"""Return the benchmark test tone.

    The samples are

    .. math::

        x[i] = \sin\left( \frac{c \, i \, \pi}{n} \right)

    for :math:`i = 0 \ldots n - 1`, where :math:`c` is the number of half
    cycles spanned by the buffer.

    Parameters
    ----------
    n : int
        Number of samples.
    half_cycles : {3.5, float}
        Number of half periods of the sine across the buffer.
    dtype : numpy.dtype
        The dtype of the returned array.

    Returns
    -------
    numpy.ndarray
    """
    n = _check_length(n)
    i = numpy.arange(n, dtype=numpy.float64)
    return numpy.sin(half_cycles * i * numpy.pi / n).astype(dtype)


def white_noise(n, seed=None, dtype=numpy.float64):
    """Return uniform noise in [-1, 1)."""
    n = _check_length(n)
    rng = numpy.random.RandomState(seed)
    return rng.uniform(low=-1.0, high=1.0, size=n).astype(dtype)


def get_signal(name, n, seed=None):
    """Return the named test signal with n samples.

    Parameters
    ----------
    name : {'sine', 'noise'}
        Which signal to generate.
    n : int
        Number of samples.
    seed : {None, int}
        Seed for the noise generator; ignored for the sine.
    """
    if name == 'sine':
        return sine_signal(n)
    elif name == 'noise':
        return white_noise(n, seed=seed)
    raise ValueError("Unknown signal %r, choose one of %s"
                     % (name, ', '.join(_SIGNALS)))


def available_signals():
    return list(_SIGNALS)
