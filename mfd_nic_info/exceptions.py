# Copyright (C) 2025 Intel Corporation
# SPDX-License-Identifier: MIT
"""Module for exceptions."""


class NicInfoModuleException(Exception):
    """Handle module exceptions."""


class DeviceNotVisibleException(NicInfoModuleException):
    """Handle devices without an interface visible in the current network namespace."""


class PciEnumerationException(NicInfoModuleException):
    """Handle failures while listing PCI network controllers."""
