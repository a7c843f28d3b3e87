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
This module defines how the sample buffer is represented on the device.

Three encodings are supported:

float
    32-bit IEEE floats in and out.
fixed
    16-bit Q1.15 fixed point samples. Products are shifted back to Q15
    before accumulation and the device returns 32-bit integer sums.
half
    16-bit IEEE floats in and out, accumulated in single precision.
"""
import logging
import numpy
from .autocorrelation import autocorrelation, fixed_autocorrelation

logger = logging.getLogger(__name__)


class Encoding(object):
    """Base class of the sample encodings.

    Attributes
    ----------
    name : str
        Short name used on the command line.
    suffix : str
        Kernel name suffix of this encoding.
    dtype : numpy.dtype
        Element type of the device input buffer.
    out_dtype : numpy.dtype
        Element type of the device output buffer.
    tolerance : float
        Largest accepted error of a device result, relative to the largest
        magnitude of the reference.
    """
    name = None
    suffix = None
    dtype = None
    out_dtype = None
    tolerance = None

    def encode(self, samples):
        """Convert real samples to the device representation."""
        return numpy.asarray(samples, dtype=numpy.float64).astype(self.dtype)

    def decode(self, raw):
        """Convert a device result back to real float64 values."""
        return numpy.asarray(raw).astype(numpy.float64)

    def reference(self, encoded):
        """Host result in the output representation for encoded input."""
        raise NotImplementedError

    def check_size(self, n):
        """Raise ValueError if n samples cannot be processed."""
        if n < 1:
            raise ValueError("At least one sample is required")

    def relative_error(self, raw, encoded):
        """Largest deviation of raw from the reference.

        The deviation is divided by the largest magnitude of the reference
        so that all lags share one tolerance.
        """
        ref = self.reference(encoded).astype(numpy.float64)
        out = numpy.asarray(raw).astype(numpy.float64)
        if out.shape != ref.shape:
            raise ValueError("Output has shape %s, expected %s"
                             % (out.shape, ref.shape))
        scale = numpy.abs(ref).max()
        if scale == 0:
            scale = 1.0
        return float(numpy.abs(out - ref).max() / scale)

    def __repr__(self):
        return "<%s encoding>" % self.name


class FloatEncoding(Encoding):
    name = 'float'
    suffix = ''
    dtype = numpy.dtype(numpy.float32)
    out_dtype = numpy.dtype(numpy.float32)
    tolerance = 1e-4

    def reference(self, encoded):
        return autocorrelation(encoded).astype(self.out_dtype)


class FixedEncoding(Encoding):
    name = 'fixed'
    suffix = '_fixed'
    dtype = numpy.dtype(numpy.int16)
    out_dtype = numpy.dtype(numpy.int32)
    tolerance = 1e-9

    #: Number of fractional bits of the Q1.15 format
    frac_bits = 15

    #: Largest buffer whose sum of shifted products fits in an int32
    max_size = 65535

    @property
    def scale(self):
        return float(1 << self.frac_bits)

    def encode(self, samples):
        x = numpy.asarray(samples, dtype=numpy.float64)
        info = numpy.iinfo(self.dtype)
        q = numpy.round(x * self.scale)
        clipped = numpy.count_nonzero((q < info.min) | (q > info.max))
        if clipped:
            logger.info("%d samples saturated in Q1.15 encoding", clipped)
        return numpy.clip(q, info.min, info.max).astype(self.dtype)

    def decode(self, raw):
        return numpy.asarray(raw).astype(numpy.float64) / self.scale

    def reference(self, encoded):
        acf = fixed_autocorrelation(encoded, shift=self.frac_bits)
        return acf.astype(self.out_dtype)

    def check_size(self, n):
        Encoding.check_size(self, n)
        if n > self.max_size:
            raise ValueError("Fixed point sums of %d samples can overflow the "
                             "32-bit accumulator, the limit is %d"
                             % (n, self.max_size))


class HalfEncoding(Encoding):
    name = 'half'
    suffix = '_half'
    dtype = numpy.dtype(numpy.float16)
    out_dtype = numpy.dtype(numpy.float16)
    tolerance = 5e-3

    #: Samples are bounded by one, so the zero lag is at most n
    max_size = 65504

    def reference(self, encoded):
        return autocorrelation(encoded).astype(self.out_dtype)

    def check_size(self, n):
        Encoding.check_size(self, n)
        if n > self.max_size:
            raise ValueError("The zero lag of %d samples can exceed the "
                             "largest half precision value" % n)


ENCODINGS = {}
for _enc in (FloatEncoding(), FixedEncoding(), HalfEncoding()):
    ENCODINGS[_enc.name] = _enc
del _enc

#: Order in which encodings are benchmarked
encoding_names = ['float', 'fixed', 'half']


def get_encoding(name):
    """Return the encoding instance registered under name."""
    if isinstance(name, Encoding):
        return name
    try:
        return ENCODINGS[name]
    except KeyError:
        raise ValueError("Unknown encoding %r, choose one of %s"
                         % (name, ', '.join(encoding_names)))
