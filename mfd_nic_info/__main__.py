# Copyright (C) 2025 Intel Corporation
# SPDX-License-Identifier: MIT
"""Print physical network devices visible in current network namespace."""

import argparse
import logging
import sys

from mfd_connect import LocalConnection, RPyCConnection
from mfd_typing import PCIAddress

from .exceptions import PciEnumerationException
from .introspection_root import SYSFS_ROOT, IntrospectionRoot
from .inventory import NicInventory
from .table import render_table

logger = logging.getLogger(__name__)


def _parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    """
    Parse command line arguments.

    :param argv: Arguments, sys.argv by default
    :return: Parsed arguments
    """
    parser = argparse.ArgumentParser(
        prog="mfd-nic-info",
        description="Show PCI address, interface, NUMA node, carrier, speed and driver of physical network devices.",
    )
    parser.add_argument("--host", help="IP of remote host reachable over RPyC, local host by default")
    parser.add_argument(
        "--sysfs-root", default=SYSFS_ROOT, help="directory where sysfs is mounted (default: %(default)s)"
    )
    parser.add_argument(
        "--no-private-mount",
        dest="use_private_view",
        action="store_false",
        help="do not try to mount private sysfs view while resolving devices",
    )
    parser.add_argument(
        "--pci-address",
        dest="pci_addresses",
        action="append",
        type=lambda value: PCIAddress(data=value),
        help="resolve only given device, can be repeated",
    )
    parser.add_argument("-v", "--verbose", action="store_true", help="enable debug logs")
    return parser.parse_args(argv)


def main(argv: list[str] | None = None) -> int:
    """
    Run command line tool.

    :param argv: Arguments, sys.argv by default
    :return: Exit code
    """
    args = _parse_args(argv)
    logging.basicConfig(level=logging.DEBUG if args.verbose else logging.WARNING)

    connection = RPyCConnection(ip=args.host) if args.host else LocalConnection()
    inventory = NicInventory(
        connection=connection,
        root=IntrospectionRoot(connection=connection, root=args.sysfs_root),
        use_private_view=args.use_private_view,
    )
    try:
        records = list(inventory.scan(args.pci_addresses))
    except PciEnumerationException as e:
        logger.error(e)
        return 1
    sys.stdout.write(render_table(records))
    return 0


if __name__ == "__main__":
    sys.exit(main())
