# Copyright (C) 2025 Intel Corporation
# SPDX-License-Identifier: MIT
"""Test AttributeEnricher."""

import pytest
from mfd_typing import PCIAddress

from mfd_nic_info.attribute_enricher import AttributeEnricher
from mfd_nic_info.data_structures import DeviceRecord, InterfaceKind, LinkState, NumaNode
from mfd_nic_info.introspection_root import IntrospectionRoot


class TestAttributeEnricher:
    @pytest.fixture()
    def enricher(self, root):
        return AttributeEnricher(root=root)

    @pytest.fixture()
    def record(self):
        return DeviceRecord(
            pci_address=PCIAddress(data="0000:18:00.0"),
            interface_kind=InterfaceKind.NET,
            driver_name="ice",
            interface_name="eth2",
            state=LinkState.HAS_CARRIER,
            numa_node=0,
        )

    @pytest.mark.parametrize(
        "speed, speed_mbps, label",
        [(100, 100, "100M"), (1000, 1000, "1G"), (10000, 10000, "10G"), (2500, 2500, "2G"), (-1, None, None)],
    )
    def test_enrich_speed(self, enricher, record, sysfs, speed, speed_mbps, label):
        sysfs.add_class_entry("net", "eth2", speed=speed)
        enriched = enricher.enrich(record)
        assert enriched.link_speed_mbps == speed_mbps
        assert enriched.speed == label

    def test_enrich_speed_missing(self, enricher, record, sysfs):
        sysfs.add_class_entry("net", "eth2")
        assert enricher.enrich(record).speed is None

    def test_enrich_speed_unreadable(self, enricher, record, sysfs, make_unreadable):
        sysfs.add_class_entry("net", "eth2", speed=25000)
        make_unreadable("speed")
        assert enricher.enrich(record).link_speed_mbps is None

    def test_enrich_numa_fallback(self, enricher, record, sysfs):
        sysfs.add_class_entry("net", "eth2", numa_node=1)
        record = DeviceRecord(
            pci_address=record.pci_address,
            interface_kind=record.interface_kind,
            interface_name=record.interface_name,
        )
        assert enricher.enrich(record).numa_node == 1

    def test_enrich_numa_fallback_missing(self, enricher, sysfs):
        sysfs.add_class_entry("uio", "uio0")
        record = DeviceRecord(
            pci_address=PCIAddress(data="0000:18:00.1"), interface_kind=InterfaceKind.UIO, interface_name="uio0"
        )
        assert enricher.enrich(record).numa_node is NumaNode.UNKNOWN

    def test_enrich_keeps_known_numa(self, enricher, record, sysfs):
        sysfs.add_class_entry("net", "eth2", numa_node=1)
        assert enricher.enrich(record).numa_node == 0

    def test_enrich_keeps_numa_disabled(self, enricher, record, sysfs):
        sysfs.add_class_entry("net", "eth2", numa_node=1)
        record = DeviceRecord(
            pci_address=record.pci_address,
            interface_kind=record.interface_kind,
            interface_name=record.interface_name,
            numa_node=NumaNode.NO_NUMA,
        )
        assert enricher.enrich(record).numa_node is NumaNode.NO_NUMA

    def test_enrich_does_not_change_resolved_fields(self, enricher, record, sysfs):
        sysfs.add_class_entry("net", "eth2", speed=1000)
        enriched = enricher.enrich(record)
        assert enriched.interface_name == "eth2"
        assert enriched.driver_name == "ice"
        assert enriched.state is LinkState.HAS_CARRIER
        assert record.link_speed_mbps is None

    def test_enrich_unknown_interface(self, enricher):
        record = DeviceRecord(pci_address=PCIAddress(data="0000:18:00.0"), interface_kind=InterfaceKind.UNKNOWN)
        assert enricher.enrich(record) is record

    def test_enrich_in_given_view(self, enricher, sysfs, connection, tmp_path, make_sysfs):
        sysfs.add_class_entry("net", "eth2", speed=100, numa_node=0)
        make_sysfs(tmp_path / "private").add_class_entry("net", "eth2", speed=25000, numa_node=1)
        record = DeviceRecord(
            pci_address=PCIAddress(data="0000:18:00.0"), interface_kind=InterfaceKind.NET, interface_name="eth2"
        )
        enriched = enricher.enrich(record, root=IntrospectionRoot(connection=connection, root=str(tmp_path / "private")))
        assert enriched.speed == "25G"
        assert enriched.numa_node == 1
