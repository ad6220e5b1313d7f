# Copyright (C) 2025 Intel Corporation
# SPDX-License-Identifier: MIT
"""Module for physical network device inventory."""

from .attribute_enricher import AttributeEnricher
from .data_structures import DeviceRecord, InterfaceKind, LinkState, NumaNode
from .device_resolver import DeviceResolver
from .introspection_root import IntrospectionRoot, PrivateSysfsMount, try_acquire_privileged_view
from .inventory import NicInventory
from .pci_enumerator import PciEnumerator
