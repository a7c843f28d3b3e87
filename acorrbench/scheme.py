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
This modules provides python contexts that select where the autocorrelation
engines run: on the host with numpy, or on an OpenCL device.
"""
import os
import logging
from decorator import decorator
import acorrbench


class _SchemeManager(object):
    _single = None

    def __init__(self):

        if _SchemeManager._single is not None:
            raise RuntimeError("SchemeManager is a private class")
        _SchemeManager._single= self

        self.state= None
        self._lock= False

    def lock(self):
        self._lock= True

    def unlock(self):
        self._lock= False

    def shift_to(self, state):
        if self._lock is False:
            self.state = state
        else:
            raise RuntimeError("The state is locked, cannot shift schemes")

# Create the global processing scheme manager
mgr = _SchemeManager()
DefaultScheme = None
default_context = None


class Scheme(object):
    """Base class of the processing contexts.

    Entering a scheme makes it the active one until the block exits; schemes
    cannot be nested.
    """
    def __enter__(self):
        mgr.shift_to(self)
        mgr.lock()
        return self

    def __exit__(self, type, value, traceback):
        mgr.unlock()
        mgr.shift_to(default_context)


class CPUScheme(Scheme):
    """Context that runs the engines on the host with numpy."""
    def describe(self):
        return "CPU (numpy)"


class OpenCLScheme(Scheme):
    """Context that runs the engines on one OpenCL device.

    Parameters
    ----------
    device_num : {0, int}
        Index of the device in the list of all devices of all platforms,
        see :func:`acorrbench.device.get_device_list`.
    """
    def __init__(self, device_num=0):
        Scheme.__init__(self)
        if not acorrbench.HAVE_OPENCL:
            raise RuntimeError("Install PyOpenCL to use OpenCL processing")
        import pyopencl
        from acorrbench.device import get_device_list, get_device_name

        devices = get_device_list()
        if device_num < 0 or device_num >= len(devices):
            raise ValueError("Invalid device index %d, %d device(s) found"
                             % (device_num, len(devices)))

        self.device_num = device_num
        self.device = devices[device_num]
        self.context = pyopencl.Context([self.device])
        self.queue = pyopencl.CommandQueue(self.context, self.device)
        logging.debug("Created OpenCL context on %s",
                      get_device_name(self.device))

    def describe(self):
        from acorrbench.device import get_device_name
        return get_device_name(self.device)


scheme_prefix = {
    CPUScheme: "cpu",
    OpenCLScheme: "opencl",
}
_scheme_map = {v: k for (k, v) in scheme_prefix.items()}


class DefaultScheme(CPUScheme):
    pass

default_context = DefaultScheme()
mgr.state = default_context
scheme_prefix[DefaultScheme] = "cpu"


def current_prefix():
    return scheme_prefix[type(mgr.state)]

_import_cache = {}
def schemed(prefix):
    @decorator
    def scheming_function(fn, *args, **kwds):
        try:
            return _import_cache[mgr.state][fn](*args, **kwds)
        except KeyError:
            for sch in mgr.state.__class__.__mro__[0:-2]:
                try:
                    backend = __import__(prefix + scheme_prefix[sch],
                                         fromlist=[fn.__name__])
                    schemed_fn = getattr(backend, fn.__name__)
                except (ImportError, AttributeError, KeyError):
                    continue

                if mgr.state not in _import_cache:
                    _import_cache[mgr.state] = {}

                _import_cache[mgr.state][fn] = schemed_fn

                return schemed_fn(*args, **kwds)

            err = ("Failed to find implementation of (%s) "
                  "for %s scheme." % (str(fn), current_prefix()))
            raise RuntimeError(err)

    return scheming_function


def insert_processing_option_group(parser):
    """
    Adds the options used to choose a processing scheme.

    Parameters
    ----------
    parser : object
        ArgumentParser instance
    """
    processing_group = parser.add_argument_group("Options for selecting the"
                                   " processing scheme in this program.")
    processing_group.add_argument("--processing-scheme",
                      help="The choice of processing scheme. "
                           "Choices are " + str(sorted(_scheme_map)) +
                           ". The default is taken from the ACORRBENCH_SCHEME "
                           "environment variable, or opencl if it is unset.",
                      default=os.getenv("ACORRBENCH_SCHEME", "opencl"))

    processing_group.add_argument("--processing-device-id",
                      help="(optional) Index of the OpenCL device to use, "
                           "see --list-devices. The default is taken from "
                           "the ACORRBENCH_DEVICE_ID environment variable, "
                           "or 0.",
                      default=int(os.getenv("ACORRBENCH_DEVICE_ID", "0")),
                      type=int)


def from_cli(opt):
    """Parses the command line options and returns a processing scheme.

    Parameters
    ----------
    opt: object
        Result of parsing the CLI with ArgumentParser, or any object with
        the required attributes.

    Returns
    -------
    ctx: Scheme
        Returns the requested processing scheme.
    """
    name = opt.processing_scheme

    if name == "opencl":
        logging.info("Running with OpenCL support on device %d",
                     opt.processing_device_id)
        ctx = OpenCLScheme(device_num=opt.processing_device_id)
    else:
        logging.info("Running with CPU support")
        ctx = CPUScheme()
    return ctx


def verify_processing_options(opt, parser):
    """Parses the  processing scheme options and verifies that they are
       reasonable.

    Parameters
    ----------
    opt : object
        Result of parsing the CLI with ArgumentParser, or any object with the
        required attributes.
    parser : object
        ArgumentParser instance.
    """
    if opt.processing_scheme not in _scheme_map:
        parser.error("(%s) is not a valid scheme type." % opt.processing_scheme)
    if opt.processing_device_id < 0:
        parser.error("--processing-device-id must be non-negative")
