# Copyright (C) 2025 Intel Corporation
# SPDX-License-Identifier: MIT
"""Module for sysfs access: ambient root and private sysfs mounts."""

import logging
import typing

from mfd_common_libs import add_logging_level, log_levels
from mfd_connect.exceptions import ConnectionCalledProcessError

from .data_structures import InterfaceKind, NumaNode

if typing.TYPE_CHECKING:
    from pathlib import Path

    from mfd_connect import Connection
    from mfd_typing import PCIAddress

logger = logging.getLogger(__name__)
add_logging_level(level_name="MODULE_DEBUG", level_value=log_levels.MODULE_DEBUG)

SYSFS_ROOT = "/sys"


class IntrospectionRoot:
    """Location of a sysfs view reachable through a connection."""

    def __init__(self, connection: "Connection", root: str = SYSFS_ROOT) -> None:
        """
        Class constructor.

        :param connection: Connection to the host owning the sysfs view
        :param root: Directory where sysfs is mounted
        """
        self._connection = connection
        self.root = root

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}(root={self.root!r})"

    def path(self, *parts: str) -> "Path":
        """Build path below the root."""
        return self._connection.path(self.root, *parts)

    def pci_devices_path(self) -> "Path":
        """Directory holding one entry per PCI device."""
        return self.path("bus", "pci", "devices")

    def pci_device_path(self, pci_address: "PCIAddress") -> "Path":
        """Directory of given PCI device."""
        return self.path("bus", "pci", "devices", pci_address.lspci)

    def class_path(self, kind: InterfaceKind, name: str) -> "Path":
        """Class based directory of an interface, e.g. /sys/class/net/eth0."""
        return self.path("class", kind.value, name)


def read_numa_node(numa_file: "Path") -> int | NumaNode:
    """
    Read numa_node attribute.

    :param numa_file: Path to numa_node file
    :return: NUMA node number, NumaNode.NO_NUMA if kernel reports -1, NumaNode.UNKNOWN if not available
    """
    try:
        numa_node = int(numa_file.read_text().strip())
    except (OSError, ValueError):
        return NumaNode.UNKNOWN
    return NumaNode.NO_NUMA if numa_node < 0 else numa_node


class PrivateSysfsMount:
    """Private sysfs mount, unmounted and removed on release."""

    def __init__(self, connection: "Connection", mount_point: str) -> None:
        """
        Class constructor.

        :param connection: Connection used to mount sysfs
        :param mount_point: Directory where sysfs is mounted
        """
        self._connection = connection
        self.mount_point = mount_point
        self.root = IntrospectionRoot(connection=connection, root=mount_point)
        self._released = False

    def __enter__(self) -> "PrivateSysfsMount":
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        self.release()

    @property
    def released(self) -> bool:
        """Whether mount point is already torn down."""
        return self._released

    def release(self) -> None:
        """Unmount sysfs and remove mount point, second call does nothing."""
        if self._released:
            return
        self._released = True
        logger.log(level=log_levels.MODULE_DEBUG, msg=f"Unmounting private sysfs view {self.mount_point}.")
        result = self._connection.execute_command(f"umount {self.mount_point}", expected_return_codes=None)
        if result.return_code:
            logger.log(
                level=log_levels.MODULE_DEBUG,
                msg=f"Unmount of {self.mount_point} failed ({result.stderr}), detaching it lazily.",
            )
            result = self._connection.execute_command(f"umount -l {self.mount_point}", expected_return_codes=None)
        if result.return_code:
            logger.warning(f"Could not unmount {self.mount_point}: {result.stderr}")
            return
        _remove_directory(self._connection, self.mount_point)


def _remove_directory(connection: "Connection", directory: str) -> None:
    """
    Remove empty directory, failure is only logged.

    :param connection: Connection to the host
    :param directory: Directory to remove
    """
    result = connection.execute_command(f"rmdir {directory}", expected_return_codes=None)
    if result.return_code:
        logger.warning(f"Could not remove {directory}: {result.stderr}")


def try_acquire_privileged_view(connection: "Connection") -> PrivateSysfsMount | None:
    """
    Mount sysfs in a new temporary directory.

    Fresh sysfs mount reflects network namespace of the caller, ambient /sys might belong to other namespace.
    Mounting requires privileges, lack of them is not an error.

    :param connection: Connection to the host
    :return: Mount guard, None if sysfs could not be mounted
    """
    try:
        mount_point = connection.execute_command("mktemp -d", expected_return_codes={0}).stdout.strip()
    except (ConnectionCalledProcessError, OSError) as e:
        logger.log(level=log_levels.MODULE_DEBUG, msg=f"Could not create mount point for sysfs: {e}")
        return None

    try:
        result = connection.execute_command(f"mount -t sysfs none {mount_point}", expected_return_codes=None)
        error = result.stderr if result.return_code else None
    except OSError as e:
        error = str(e)
    if error is not None:
        logger.log(
            level=log_levels.MODULE_DEBUG,
            msg=f"Could not mount sysfs in {mount_point}, using ambient view. {error}",
        )
        _remove_directory(connection, mount_point)
        return None

    logger.log(level=log_levels.MODULE_DEBUG, msg=f"Mounted private sysfs view in {mount_point}.")
    return PrivateSysfsMount(connection=connection, mount_point=mount_point)
