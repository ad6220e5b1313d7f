# Copyright (C) 2025 Intel Corporation
# SPDX-License-Identifier: MIT
"""Module for listing PCI network controllers."""

import logging
import re
import typing

from mfd_common_libs import add_logging_level, log_levels
from mfd_connect.exceptions import ConnectionCalledProcessError
from mfd_typing import PCIAddress

from .exceptions import PciEnumerationException
from .introspection_root import IntrospectionRoot

if typing.TYPE_CHECKING:
    from mfd_connect import Connection

logger = logging.getLogger(__name__)
add_logging_level(level_name="MODULE_DEBUG", level_value=log_levels.MODULE_DEBUG)

NETWORK_CONTROLLER_CLASS = "0200"
SYSFS_NETWORK_CONTROLLER_CLASS = f"0x{NETWORK_CONTROLLER_CLASS}"


class PciEnumerator:
    """Find PCI devices of 'Ethernet controller' class."""

    def __init__(self, *, connection: "Connection", root: IntrospectionRoot | None = None) -> None:
        """
        Class constructor.

        :param connection: Connection to the host
        :param root: Sysfs view used when lspci is not available
        """
        self._connection = connection
        self.root = root if root is not None else IntrospectionRoot(connection=connection)

    def get_network_controllers(self) -> list[PCIAddress]:
        """
        Get PCI addresses of network controllers.

        :return: PCI addresses in lspci order
        :raises PciEnumerationException: when neither lspci nor sysfs can be used
        """
        try:
            output = self._connection.execute_command("lspci -Dvmmn", expected_return_codes={0}).stdout
        except (ConnectionCalledProcessError, OSError) as e:
            logger.log(level=log_levels.MODULE_DEBUG, msg=f"lspci not usable ({e}), reading {self.root}.")
            return self._get_network_controllers_from_sysfs()
        return self._parse_lspci_output(output)

    @staticmethod
    def _parse_lspci_output(output: str) -> list[PCIAddress]:
        """
        Parse machine readable lspci output.

        :param output: Output of 'lspci -Dvmmn'
        :return: PCI addresses of network controllers
        """
        addresses = []
        for block in re.split(r"\n\s*\n", output.strip()):
            slot = re.search(r"^Slot:\s+(?P<slot>\S+)$", block, re.MULTILINE)
            device_class = re.search(r"^Class:\s+(?P<device_class>[0-9a-fA-F]{4})$", block, re.MULTILINE)
            if slot and device_class and device_class.group("device_class") == NETWORK_CONTROLLER_CLASS:
                addresses.append(PCIAddress(data=slot.group("slot")))
        return addresses

    def _get_network_controllers_from_sysfs(self) -> list[PCIAddress]:
        """
        Get PCI addresses of network controllers based on sysfs class attribute.

        :return: PCI addresses sorted by address
        :raises PciEnumerationException: when PCI devices directory cannot be listed
        """
        devices_path = self.root.pci_devices_path()
        try:
            devices = sorted(devices_path.iterdir(), key=lambda entry: entry.name)
        except OSError as e:
            raise PciEnumerationException(f"Could not list PCI devices in {devices_path}.") from e

        addresses = []
        for device in devices:
            try:
                device_class = (device / "class").read_text().strip()
            except OSError:
                continue
            if device_class.startswith(SYSFS_NETWORK_CONTROLLER_CLASS):
                addresses.append(PCIAddress(data=device.name))
        return addresses
