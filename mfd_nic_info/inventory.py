# Copyright (C) 2025 Intel Corporation
# SPDX-License-Identifier: MIT
"""Module for scanning all PCI network devices of a host."""

import logging
import typing
from typing import Iterable, Iterator

from mfd_common_libs import add_logging_level, log_levels
from mfd_connect.exceptions import ConnectionCalledProcessError

from .attribute_enricher import AttributeEnricher
from .data_structures import DeviceRecord
from .device_resolver import DeviceResolver
from .exceptions import DeviceNotVisibleException, NicInfoModuleException
from .introspection_root import IntrospectionRoot
from .pci_enumerator import PciEnumerator

if typing.TYPE_CHECKING:
    from mfd_connect import Connection
    from mfd_typing import PCIAddress

logger = logging.getLogger(__name__)
add_logging_level(level_name="MODULE_DEBUG", level_value=log_levels.MODULE_DEBUG)


class NicInventory:
    """Inventory of PCI network devices visible in current network namespace."""

    def __init__(
        self, *, connection: "Connection", root: IntrospectionRoot | None = None, use_private_view: bool = True
    ) -> None:
        """
        Class constructor.

        :param connection: Connection to the host
        :param root: Ambient sysfs view, /sys of the connection by default
        :param use_private_view: Try to mount private sysfs while resolving devices
        """
        self._connection = connection
        self.root = root if root is not None else IntrospectionRoot(connection=connection)
        self.enumerator = PciEnumerator(connection=connection, root=self.root)
        self.resolver = DeviceResolver(connection=connection, root=self.root, use_private_view=use_private_view)
        self.enricher = AttributeEnricher(root=self.root)

    def scan(self, pci_addresses: Iterable["PCIAddress"] | None = None) -> Iterator[DeviceRecord]:
        """
        Resolve network devices one by one.

        Devices not present in current network namespace are skipped, failure of one device does not stop the scan.

        :param pci_addresses: Devices to resolve, all network controllers by default
        :return: Generator of device records
        :raises PciEnumerationException: when network controllers could not be listed
        """
        if pci_addresses is None:
            pci_addresses = self.enumerator.get_network_controllers()

        seen = set()
        for pci_address in pci_addresses:
            if pci_address.lspci in seen:
                continue
            seen.add(pci_address.lspci)
            record = self._get_record(pci_address)
            if record is not None:
                yield record

    def _get_record(self, pci_address: "PCIAddress") -> DeviceRecord | None:
        """
        Resolve and enrich device in the same sysfs view.

        :param pci_address: PCI address of network controller
        :return: Device record, None if device is not visible or could not be read
        """
        try:
            with self.resolver.view(pci_address) as root:
                return self.enricher.enrich(self.resolver.resolve_in(root, pci_address), root=root)
        except DeviceNotVisibleException as e:
            logger.log(level=log_levels.MODULE_DEBUG, msg=str(e))
        except (NicInfoModuleException, ConnectionCalledProcessError, OSError) as e:
            logger.warning(f"Skipping {pci_address.lspci}: {e}")
        return None
