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
This module holds the registry of kernel variants: every combination of an
optimization strategy with a sample encoding.
"""
from collections import OrderedDict
from .encoding import get_encoding, encoding_names

#: Optimization strategies, in benchmark order
strategy_names = ['naive', 'local', 'vector']

_strategy_suffix = {
    'naive': '',
    'local': '_local',
    'vector': '_vec4',
}


class KernelVariant(object):
    """One kernel entry point.

    Parameters
    ----------
    strategy : {'naive', 'local', 'vector'}
        How the kernel walks the sample buffer. naive reads global
        memory for every product, local stages work-group sized tiles
        of the buffer in local memory and vector forms four products
        per step from vector loads.
    encoding : str or Encoding
        The sample representation.
    """
    vector_width = 4

    def __init__(self, strategy, encoding):
        if strategy not in _strategy_suffix:
            raise ValueError("Unknown strategy %r, choose one of %s"
                             % (strategy, ', '.join(strategy_names)))
        self.strategy = strategy
        self.encoding = get_encoding(encoding)

    @property
    def kernel_name(self):
        return 'acorr' + self.encoding.suffix + _strategy_suffix[self.strategy]

    name = kernel_name

    @property
    def uses_local_memory(self):
        return self.strategy == 'local'

    def local_size(self, work_group_size):
        """The local range to enqueue with, or None to let the runtime pick."""
        if self.uses_local_memory:
            return (int(work_group_size),)
        return None

    def global_size(self, n, work_group_size):
        """The global range for n samples.

        The tiled kernels need a global range that is a multiple of the
        work group size; the extra work items compute nothing.
        """
        if self.uses_local_memory:
            wg = int(work_group_size)
            return (((n + wg - 1) // wg) * wg,)
        return (int(n),)

    def local_memory_bytes(self, work_group_size):
        """Size of the local memory tile, zero if none is used."""
        if not self.uses_local_memory:
            return 0
        return int(work_group_size) * self.tile_dtype.itemsize

    @property
    def tile_dtype(self):
        # half samples are widened to float when staged
        if self.encoding.name == 'half':
            return get_encoding('float').dtype
        return self.encoding.dtype

    def __repr__(self):
        return "KernelVariant(%r, %r)" % (self.strategy, self.encoding.name)

    def __eq__(self, other):
        return (isinstance(other, KernelVariant) and
                self.strategy == other.strategy and
                self.encoding is other.encoding)

    def __hash__(self):
        return hash((self.strategy, self.encoding.name))


VARIANTS = OrderedDict()
for _enc in encoding_names:
    for _strat in strategy_names:
        _v = KernelVariant(_strat, _enc)
        VARIANTS[_v.name] = _v
del _enc, _strat, _v


def get_variant(name):
    """Return the registered variant with the given kernel name."""
    try:
        return VARIANTS[name]
    except KeyError:
        raise ValueError("Unknown kernel variant %r, choose from %s"
                         % (name, ', '.join(VARIANTS)))


def select_variants(names=None, strategies=None, encodings=None):
    """Return the registered variants that pass all given filters.

    Parameters
    ----------
    names : {None, list of str}
        Kernel names to keep.
    strategies : {None, list of str}
        Strategies to keep.
    encodings : {None, list of str}
        Encoding names to keep.

    Returns
    -------
    list of KernelVariant
        In registry order.
    """
    if names:
        for name in names:
            get_variant(name)
    if strategies:
        for strategy in strategies:
            if strategy not in strategy_names:
                raise ValueError("Unknown strategy %r" % strategy)
    if encodings:
        for enc in encodings:
            get_encoding(enc)

    selected = []
    for variant in VARIANTS.values():
        if names and variant.name not in names:
            continue
        if strategies and variant.strategy not in strategies:
            continue
        if encodings and variant.encoding.name not in encodings:
            continue
        selected.append(variant)

    if not selected:
        raise ValueError("No kernel variant matches the selection")
    return selected
