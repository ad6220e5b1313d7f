# Copyright (C) 2025 Intel Corporation
# SPDX-License-Identifier: MIT
"""Module for data structures."""

from dataclasses import dataclass
from enum import Enum

from mfd_typing import PCIAddress

NO_DRIVER = "-"


class InterfaceKind(Enum):
    """Kernel abstraction owning a PCI network device, values match sysfs directory names."""

    NET = "net"
    UIO = "uio"
    UNKNOWN = "unknown"


class LinkState(Enum):
    """Link state based on the carrier attribute."""

    ADMIN_DOWN = "admin_down"
    NO_CARRIER = "no_carrier"
    HAS_CARRIER = "has_carrier"
    UNHANDLED = "unhandled"
    NOT_APPLICABLE = "n/a"


class NumaNode(Enum):
    """Sentinels used when no NUMA node number is available."""

    NO_NUMA = "-1"
    UNKNOWN = "-"


def format_speed(speed_mbps: int | None) -> str | None:
    """
    Normalize link speed given in Mb/s.

    :param speed_mbps: Speed in Mb/s, None if unknown
    :return: Speed like '100M' or '25G', None if unknown
    """
    if speed_mbps is None:
        return None
    if speed_mbps < 1000:
        return f"{speed_mbps}M"
    return f"{speed_mbps // 1000}G"


@dataclass(frozen=True)
class DeviceRecord:
    """Snapshot of a single PCI network device."""

    pci_address: PCIAddress
    interface_kind: InterfaceKind
    driver_name: str = NO_DRIVER
    interface_name: str | None = None
    state: LinkState = LinkState.NOT_APPLICABLE
    numa_node: int | NumaNode = NumaNode.UNKNOWN
    link_speed_mbps: int | None = None

    @property
    def speed(self) -> str | None:
        """Normalized link speed."""
        return format_speed(self.link_speed_mbps)
