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
This module enumerates the OpenCL devices visible to the host and describes
them for the user.
"""
import logging
import pyopencl


def get_device_list():
    """Return every device of every platform, platform by platform.

    The position of a device in this list is the device index accepted on
    the command line.
    """
    try:
        platforms = pyopencl.get_platforms()
    except pyopencl.Error as err:
        logging.warning("No OpenCL platform available: %s", err)
        return []

    devices = []
    for platform in platforms:
        try:
            devices += platform.get_devices()
        except pyopencl.Error as err:
            logging.warning("Could not list devices of platform %s: %s",
                            platform.name, err)
    return devices


def get_device_name(device):
    return device.name.strip()


def describe_device(device):
    """Return a dict with the properties relevant to the benchmark."""
    return {
        'name': get_device_name(device),
        'platform': device.platform.name.strip(),
        'type': pyopencl.device_type.to_string(device.type),
        'version': device.version.strip(),
        'compute_units': device.max_compute_units,
        'max_work_group_size': device.max_work_group_size,
        'local_mem_size': device.local_mem_size,
    }


def list_devices():
    """Return printable lines listing the devices with their index."""
    devices = get_device_list()
    if not devices:
        return ["No OpenCL devices found"]
    lines = ["Devices:"]
    for i, device in enumerate(devices):
        lines.append("  [%d] %s" % (i, get_device_name(device)))
    return lines
