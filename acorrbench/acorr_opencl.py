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
"""PyOpenCL backend of the autocorrelation engines
"""
import logging
import numpy
import mako.template
import pyopencl
from pyopencl.tools import context_dependent_memoize
from pytools import memoize
from acorrbench.scheme import mgr
from .acorr import _BaseAutoCorrelator
from .encoding import encoding_names, get_encoding

preamble = """
inline int fixed_dot4(short4 a, short4 b)
{
    int4 p = (convert_int4(a) * convert_int4(b)) >> 15;
    return p.x + p.y + p.z + p.w;
}
"""

# One work item computes one lag k of
#
#     y[k] = sum_{i < n - k} x[i] * x[i + k]
#
acorr_template = mako.template.Template("""
__kernel void acorr${suffix}(const int n,
                             __global const ${in_t} *x,
                             __global ${out_t} *y)
{
    const int k = get_global_id(0);
    if (k >= n)
        return;

    ${acc_t} sum = 0;
    for (int i = 0; i < n - k; i++)
        sum += ${mul(load('x', 'i'), load('x', 'i + k'))};

    ${store('y', 'k', 'sum')};
}

__kernel void acorr${suffix}_local(const int n,
                                   __global const ${in_t} *x,
                                   __global ${out_t} *y,
                                   __local ${tile_t} *tile)
{
    const int k = get_global_id(0);
    const int lid = get_local_id(0);
    const int wg = get_local_size(0);

    ${acc_t} sum = 0;

    // All work items of the group stage every tile, so the loop bounds
    // must not depend on k
    for (int base = 0; base < n; base += wg) {
        const int j = base + lid;
        tile[lid] = (j < n) ? ${load('x', 'j')} : 0;
        barrier(CLK_LOCAL_MEM_FENCE);

        if (k < n) {
            const int stop = min(wg, n - k - base);
            for (int t = 0; t < stop; t++)
                sum += ${mul('tile[t]', load('x', 'base + t + k'))};
        }
        barrier(CLK_LOCAL_MEM_FENCE);
    }

    if (k < n)
        ${store('y', 'k', 'sum')};
}

__kernel void acorr${suffix}_vec4(const int n,
                                  __global const ${in_t} *x,
                                  __global ${out_t} *y)
{
    const int k = get_global_id(0);
    if (k >= n)
        return;

    const int m = n - k;
    ${acc_t} sum = 0;
    int i = 0;
    for (; i + 4 <= m; i += 4)
        sum += ${dot4('x + i', 'x + i + k')};

    // tail
    for (; i < m; i++)
        sum += ${mul(load('x', 'i'), load('x', 'i + k'))};

    ${store('y', 'k', 'sum')};
}
""")


def _plain_load(p, i):
    return "%s[%s]" % (p, i)

def _plain_store(p, i, v):
    return "%s[%s] = %s" % (p, i, v)

def _float_mul(a, b):
    return "(%s) * (%s)" % (a, b)

_encoding_code = {
    'float': dict(
        in_t='float', out_t='float', acc_t='float', tile_t='float',
        load=_plain_load, store=_plain_store, mul=_float_mul,
        dot4=lambda p, q: "dot(vload4(0, %s), vload4(0, %s))" % (p, q),
    ),
    'fixed': dict(
        in_t='short', out_t='int', acc_t='int', tile_t='short',
        load=_plain_load, store=_plain_store,
        mul=lambda a, b: "(((int)(%s) * (int)(%s)) >> 15)" % (a, b),
        dot4=lambda p, q: "fixed_dot4(vload4(0, %s), vload4(0, %s))" % (p, q),
    ),
    # half is only a storage format here; no cl_khr_fp16 is needed
    'half': dict(
        in_t='half', out_t='half', acc_t='float', tile_t='float',
        load=lambda p, i: "vload_half(%s, %s)" % (i, p),
        store=lambda p, i, v: "vstore_half(%s, %s, %s)" % (v, i, p),
        mul=_float_mul,
        dot4=lambda p, q: "dot(vload_half4(0, %s), vload_half4(0, %s))" % (p, q),
    ),
}


def kernel_source(encodings=None):
    """Return the OpenCL source of the autocorrelation kernels.

    Parameters
    ----------
    encodings : {None, list of str}
        Encodings to emit kernels for; all of them by default.

    Returns
    -------
    str
        Source defining ``acorr<suffix>``, ``acorr<suffix>_local`` and
        ``acorr<suffix>_vec4`` for each encoding.
    """
    if encodings is None:
        encodings = encoding_names
    src = [preamble]
    for name in encodings:
        enc = get_encoding(name)
        src.append(acorr_template.render(suffix=enc.suffix,
                                         **_encoding_code[enc.name]))
    return '\n'.join(src)


@memoize
def default_kernel_source():
    return kernel_source()


@context_dependent_memoize
def get_program(context, source):
    logging.debug("Building OpenCL program (%d bytes of source)", len(source))
    return pyopencl.Program(context, source).build()


class OpenCLAutoCorrelator(_BaseAutoCorrelator):
    def __init__(self, samples, variant, work_group_size=None,
                 kernel_source=None):
        _BaseAutoCorrelator.__init__(self, samples, variant,
                                     work_group_size=work_group_size,
                                     kernel_source=kernel_source)
        state = mgr.state
        self.context = state.context
        self.queue = state.queue
        self.device = state.device

        if kernel_source is None:
            kernel_source = default_kernel_source()
        program = get_program(self.context, kernel_source)
        self.kernel = pyopencl.Kernel(program, variant.kernel_name)

        self.global_size = variant.global_size(self.size,
                                               self.work_group_size)
        self.local_size = variant.local_size(self.work_group_size)
        if self.local_size is not None:
            self._check_work_group()

        mf = pyopencl.mem_flags
        self.d_sample = pyopencl.Buffer(self.context,
                                        mf.READ_ONLY | mf.COPY_HOST_PTR,
                                        hostbuf=self.encoded)
        nbytes = self.encoding.out_dtype.itemsize * self.size
        self.d_output = pyopencl.Buffer(self.context, mf.READ_WRITE,
                                        size=nbytes)

        args = [numpy.int32(self.size), self.d_sample, self.d_output]
        if variant.uses_local_memory:
            args.append(pyopencl.LocalMemory(
                variant.local_memory_bytes(self.work_group_size)))
        self.kernel.set_args(*args)

    def _check_work_group(self):
        wg = self.work_group_size
        limit = min(self.device.max_work_group_size,
                    self.kernel.get_work_group_info(
                        pyopencl.kernel_work_group_info.WORK_GROUP_SIZE,
                        self.device))
        if wg > limit:
            raise ValueError("Work group size %d exceeds the limit of %d for "
                             "%s on this device"
                             % (wg, limit, self.variant.kernel_name))
        nbytes = self.variant.local_memory_bytes(wg)
        if nbytes > self.device.local_mem_size:
            raise ValueError("%s needs %d bytes of local memory, the device "
                             "has %d" % (self.variant.kernel_name, nbytes,
                                         self.device.local_mem_size))

    def correlate(self):
        pyopencl.enqueue_nd_range_kernel(self.queue, self.kernel,
                                         self.global_size, self.local_size)

    def synchronize(self):
        self.queue.finish()

    def get_output(self):
        out = numpy.empty(self.size, dtype=self.encoding.out_dtype)
        pyopencl.enqueue_copy(self.queue, out, self.d_output)
        return out


def _autocorrelator_factory(samples, variant, **kwargs):
    return OpenCLAutoCorrelator
