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
This modules provides the autocorrelation engines that are timed by the
benchmark. The engine class is chosen by the active processing scheme.
"""
import numpy
import acorrbench
import acorrbench.scheme

BACKEND_PREFIX = "acorrbench.acorr_"


@acorrbench.scheme.schemed(BACKEND_PREFIX)
def _autocorrelator_factory(samples, variant, **kwargs):
    return


class AutoCorrelator(object):
    """ Create an autocorrelation engine

    Parameters
    ----------
    samples : array_like
        Real input samples; they are encoded for the variant and uploaded
        once, when the engine is created.
    variant : KernelVariant
        The kernel to run.
    work_group_size : {acorrbench.WORK_GROUP_SIZE, int}
        Local work size of the tiled kernels.
    kernel_source : {None, str}
        OpenCL source to build instead of the bundled kernels. It must
        define the entry point of the variant.

    The engine must be created within the processing context it will be
    used in.
    """
    def __new__(cls, *args, **kwargs):
        real_cls = _autocorrelator_factory(*args, **kwargs)
        return real_cls(*args, **kwargs)


# The class below should serve as the parent for all schemed classes.
class _BaseAutoCorrelator(object):
    def __init__(self, samples, variant, work_group_size=None,
                 kernel_source=None):
        if work_group_size is None:
            work_group_size = acorrbench.WORK_GROUP_SIZE
        if int(work_group_size) < 1:
            raise ValueError("The work group size must be positive")

        self.variant = variant
        self.encoding = variant.encoding
        self.size = len(samples)
        self.encoding.check_size(self.size)
        self.work_group_size = int(work_group_size)
        self.kernel_source = kernel_source
        self.encoded = self.encoding.encode(numpy.asarray(samples))

    def correlate(self):
        """
        Compute the autocorrelation of the samples given at instantiation
        into the output buffer. The call may return before the work is
        done, see synchronize.
        """
        pass

    def synchronize(self):
        """Block until every computation issued so far has finished."""
        pass

    def get_output(self):
        """Return the raw output buffer as a host numpy array."""
        pass
