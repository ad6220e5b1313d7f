# Copyright (C) 2025 Intel Corporation
# SPDX-License-Identifier: MIT
"""Module for filling NUMA node and link speed from class based sysfs paths."""

import dataclasses
import logging

from mfd_common_libs import add_logging_level, log_levels

from .data_structures import DeviceRecord, InterfaceKind, NumaNode
from .introspection_root import IntrospectionRoot, read_numa_node

logger = logging.getLogger(__name__)
add_logging_level(level_name="MODULE_DEBUG", level_value=log_levels.MODULE_DEBUG)


class AttributeEnricher:
    """Complete device records with data available under <sysfs>/class/<kind>/<interface>."""

    def __init__(self, root: IntrospectionRoot) -> None:
        """
        Class constructor.

        :param root: Sysfs view
        """
        self.root = root

    def enrich(self, record: DeviceRecord, root: IntrospectionRoot | None = None) -> DeviceRecord:
        """
        Fill NUMA node (if unknown) and link speed.

        :param record: Resolved device
        :param root: Sysfs view the record was resolved in, constructor view by default
        :return: New record, input is left untouched
        """
        if record.interface_kind is InterfaceKind.UNKNOWN or not record.interface_name:
            return record

        root = root if root is not None else self.root
        interface_path = root.class_path(record.interface_kind, record.interface_name)
        numa_node = record.numa_node
        if numa_node is NumaNode.UNKNOWN:
            numa_node = read_numa_node(interface_path / "device" / "numa_node")
            logger.log(
                level=log_levels.MODULE_DEBUG,
                msg=f"NUMA node of {record.interface_name} read from class path: {numa_node}.",
            )

        return dataclasses.replace(
            record, numa_node=numa_node, link_speed_mbps=self._read_speed(interface_path / "speed")
        )

    @staticmethod
    def _read_speed(speed_file) -> int | None:
        """
        Read link speed.

        :param speed_file: Path to speed attribute
        :return: Speed in Mb/s, None if not available or reported as unknown (-1)
        """
        try:
            speed = int(speed_file.read_text().strip())
        except (OSError, ValueError):
            return None
        return None if speed < 0 else speed
