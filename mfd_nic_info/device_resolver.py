# Copyright (C) 2025 Intel Corporation
# SPDX-License-Identifier: MIT
"""Module for resolving PCI network devices to their interfaces."""

import logging
import typing
from contextlib import contextmanager
from typing import Iterable, Iterator

from mfd_common_libs import add_logging_level, log_levels

from .data_structures import NO_DRIVER, DeviceRecord, InterfaceKind, LinkState
from .exceptions import DeviceNotVisibleException
from .introspection_root import IntrospectionRoot, read_numa_node, try_acquire_privileged_view

if typing.TYPE_CHECKING:
    from pathlib import Path

    from mfd_connect import Connection
    from mfd_typing import PCIAddress

logger = logging.getLogger(__name__)
add_logging_level(level_name="MODULE_DEBUG", level_value=log_levels.MODULE_DEBUG)

VIRTIO_PREFIX = "virtio"


def classify(device_path: "Path") -> InterfaceKind:
    """
    Check which kernel abstraction is exposed directly under device directory.

    :param device_path: PCI device (or virtio device) directory
    :return: InterfaceKind.NET, InterfaceKind.UIO or InterfaceKind.UNKNOWN
    """
    for kind in (InterfaceKind.NET, InterfaceKind.UIO):
        if (device_path / kind.value).is_dir():
            return kind
    return InterfaceKind.UNKNOWN


def find_virtio_entry(entry_names: Iterable[str]) -> str | None:
    """
    Pick virtio device entry from PCI device directory listing.

    :param entry_names: Names of entries in PCI device directory
    :return: First matching name in sorted order, None if there is none
    """
    return min((name for name in entry_names if name.startswith(VIRTIO_PREFIX)), default=None)


def read_driver_name(device_path: "Path") -> str:
    """
    Read name of driver bound to the device.

    :param device_path: PCI device directory
    :return: Driver name, '-' when no driver is bound
    """
    try:
        return (device_path / "driver").readlink().name
    except OSError:
        return NO_DRIVER


def read_link_state(interface_path: "Path") -> LinkState:
    """
    Read carrier of the interface.

    Kernel refuses to read carrier of interfaces which are administratively down.

    :param interface_path: Interface directory, e.g. <pci device>/net/eth0
    :return: Link state
    """
    carrier_file = interface_path / "carrier"
    if not carrier_file.exists():
        return LinkState.NOT_APPLICABLE
    try:
        carrier = carrier_file.read_text().strip()
    except OSError:
        return LinkState.ADMIN_DOWN
    if carrier == "0":
        return LinkState.NO_CARRIER
    if carrier == "1":
        return LinkState.HAS_CARRIER
    return LinkState.UNHANDLED


class DeviceResolver:
    """Resolve PCI address to interface kind, name, driver, state and NUMA node."""

    def __init__(
        self, *, connection: "Connection", root: IntrospectionRoot | None = None, use_private_view: bool = True
    ) -> None:
        """
        Class constructor.

        :param connection: Connection to the host
        :param root: Ambient sysfs view, /sys of the connection by default
        :param use_private_view: Try to mount private sysfs for every resolution
        """
        self._connection = connection
        self.root = root if root is not None else IntrospectionRoot(connection=connection)
        self.use_private_view = use_private_view

    def resolve(self, pci_address: "PCIAddress") -> DeviceRecord:
        """
        Resolve PCI device.

        Private sysfs mount, if created, is removed before returning.

        :param pci_address: PCI address of network controller
        :return: Device record, with InterfaceKind.UNKNOWN when interface could not be classified
        :raises DeviceNotVisibleException: when interface is not present in current network namespace
        """
        with self.view(pci_address) as root:
            return self.resolve_in(root, pci_address)

    @contextmanager
    def view(self, pci_address: "PCIAddress") -> Iterator[IntrospectionRoot]:
        """
        Select sysfs view for the device, private mount is released when leaving the context.

        :param pci_address: PCI address of network controller
        :return: Private sysfs view if it contains the device, ambient view otherwise
        """
        if not self.use_private_view:
            yield self.root
            return
        private_view = try_acquire_privileged_view(self._connection)
        if private_view is None:
            yield self.root
            return
        with private_view:
            yield private_view.root if private_view.root.pci_device_path(pci_address).exists() else self.root

    def resolve_in(self, root: IntrospectionRoot, pci_address: "PCIAddress") -> DeviceRecord:
        """
        Resolve PCI device in given sysfs view.

        :param root: Sysfs view
        :param pci_address: PCI address of network controller
        :return: Device record
        :raises DeviceNotVisibleException: when interface is not present in current network namespace
        """
        device_path = root.pci_device_path(pci_address)
        logger.log(level=log_levels.MODULE_DEBUG, msg=f"Resolving {pci_address.lspci} in {device_path}.")
        driver_name = read_driver_name(device_path)
        numa_node = read_numa_node(device_path / "numa_node")

        base_path = device_path
        kind = classify(base_path)
        if kind is InterfaceKind.UNKNOWN:
            virtio_entry = find_virtio_entry(entry.name for entry in device_path.iterdir())
            if virtio_entry is not None:
                base_path = device_path / virtio_entry
                kind = classify(base_path)

        if kind is InterfaceKind.UNKNOWN:
            logger.log(
                level=log_levels.MODULE_DEBUG,
                msg=f"Could not classify interface of {pci_address.lspci}, driver: {driver_name}.",
            )
            return DeviceRecord(
                pci_address=pci_address, interface_kind=kind, driver_name=driver_name, numa_node=numa_node
            )

        interface_names = sorted(entry.name for entry in (base_path / kind.value).iterdir())
        if not interface_names:
            raise DeviceNotVisibleException(
                f"Interface of {pci_address.lspci} is not present in current network namespace."
            )
        interface_name = interface_names[0]

        return DeviceRecord(
            pci_address=pci_address,
            interface_kind=kind,
            driver_name=driver_name,
            interface_name=interface_name,
            state=read_link_state(base_path / kind.value / interface_name),
            numa_node=numa_node,
        )
