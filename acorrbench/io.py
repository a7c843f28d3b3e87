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
Convenience functions for storing benchmark results in hdf5 files
"""
import logging
import h5py
import numpy
import acorrbench


def write_results(path, results, attrs=None):
    """Write benchmark results to an hdf5 file.

    Each result is stored as a group named after its kernel, with the
    timing and verification values as attributes. The run configuration
    given in attrs is stored on the root group.

    Parameters
    ----------
    path : str
        The file to create; an existing file is overwritten.
    results : list of BenchmarkResult
        The results to store.
    attrs : {None, dict}
        Extra attributes of the root group.
    """
    logging.info("Writing %d results to %s", len(results), path)
    with h5py.File(path, 'w') as f:
        f.attrs['version'] = acorrbench.__version__
        for key, value in (attrs or {}).items():
            if value is None:
                continue
            f.attrs[key] = value

        for result in results:
            group = f.create_group(result.kernel_name)
            for key, value in result.to_dict().items():
                group.attrs[key] = value


def read_results(path):
    """Read back the results written by write_results.

    Returns
    -------
    attrs : dict
        Attributes of the root group.
    results : list of dict
        One dict per stored result, sorted by kernel name.
    """
    def _native(value):
        if isinstance(value, bytes):
            return value.decode()
        if isinstance(value, numpy.generic):
            return value.item()
        return value

    with h5py.File(path, 'r') as f:
        attrs = {k: _native(v) for k, v in f.attrs.items()}
        results = []
        for name in f:
            results.append({k: _native(v)
                            for k, v in f[name].attrs.items()})
    return attrs, results
