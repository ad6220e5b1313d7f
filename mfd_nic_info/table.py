# Copyright (C) 2025 Intel Corporation
# SPDX-License-Identifier: MIT
"""Module for rendering device records as text table."""

from typing import Iterable

from .data_structures import DeviceRecord, InterfaceKind, NumaNode

ROW_FORMAT = "{:<13} | {:<15} | {:<4} | {:<11} | {:<5} | {:<16}"
HEADER = ("pci_device_id", "if_name", "numa", "carrier", "speed", "driver")
RULE = "-" * 71
ABSENT = "-"


def _format_numa(numa_node: int | NumaNode) -> str:
    """
    Format NUMA node column.

    :param numa_node: NUMA node number or sentinel
    :return: Node number, '-1' if NUMA is not supported, '-' if unknown
    """
    return numa_node.value if isinstance(numa_node, NumaNode) else str(numa_node)


def format_row(record: DeviceRecord) -> str:
    """
    Format single device record.

    :param record: Device record
    :return: Table row
    """
    return ROW_FORMAT.format(
        record.pci_address.lspci,
        record.interface_name or ABSENT,
        _format_numa(record.numa_node),
        ABSENT if record.interface_kind is InterfaceKind.UNKNOWN else record.state.value,
        record.speed or ABSENT,
        record.driver_name or ABSENT,
    )


def render_table(records: Iterable[DeviceRecord]) -> str:
    """
    Render records as table with header.

    :param records: Device records
    :return: Table text, surrounded by empty lines
    """
    lines = ["", ROW_FORMAT.format(*HEADER), RULE]
    lines.extend(format_row(record) for record in records)
    lines.append("")
    return "\n".join(lines) + "\n"
