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
"""numpy backend of the autocorrelation engines
"""
import numpy
from .acorr import _BaseAutoCorrelator
from .autocorrelation import direct_autocorrelation, fixed_autocorrelation


class CPUAutoCorrelator(_BaseAutoCorrelator):
    def __init__(self, samples, variant, work_group_size=None,
                 kernel_source=None):
        _BaseAutoCorrelator.__init__(self, samples, variant,
                                     work_group_size=work_group_size,
                                     kernel_source=kernel_source)
        self.output = numpy.zeros(self.size, dtype=self.encoding.out_dtype)

        # Local memory has no host counterpart, so the tiled strategy uses
        # the same vectorized routine as the vector strategy
        if variant.strategy == 'naive':
            self._compute = self._compute_direct
        else:
            self._compute = self._compute_vectorized

    def _compute_direct(self):
        name = self.encoding.name
        if name == 'fixed':
            x = self.encoded.astype(numpy.int32)
            n = self.size
            for k in range(n):
                self.output[k] = ((x[:n - k] * x[k:]) >> 15).sum()
        else:
            # half samples are accumulated in single precision
            acf = direct_autocorrelation(self.encoded, dtype=numpy.float32)
            self.output[:] = acf.astype(self.output.dtype)

    def _compute_vectorized(self):
        if self.encoding.name == 'fixed':
            self.output[:] = fixed_autocorrelation(self.encoded)
        else:
            x = self.encoded.astype(numpy.float32)
            acf = numpy.correlate(x, x, mode='full')[self.size - 1:]
            self.output[:] = acf.astype(self.output.dtype)

    def correlate(self):
        self._compute()

    def synchronize(self):
        pass

    def get_output(self):
        return self.output.copy()


def _autocorrelator_factory(samples, variant, **kwargs):
    return CPUAutoCorrelator
