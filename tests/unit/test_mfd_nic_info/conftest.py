# Copyright (C) 2025 Intel Corporation
# SPDX-License-Identifier: MIT
import errno
from pathlib import Path

import pytest
from mfd_connect import LocalConnection
from mfd_connect.base import ConnectionCompletedProcess
from mfd_typing import OSName

from mfd_nic_info.introspection_root import IntrospectionRoot


class SysfsTree:
    """Synthetic sysfs directory tree."""

    def __init__(self, root: Path):
        self.root = root
        self.devices = root / "bus" / "pci" / "devices"
        self.devices.mkdir(parents=True)

    def add_device(
        self,
        pci_address,
        kind="net",
        names=("eth0",),
        driver="ixgbe",
        numa_node=None,
        carrier=None,
        virtio=None,
        device_class="0x020000",
    ) -> Path:
        device = self.devices / pci_address
        device.mkdir()
        (device / "class").write_text(f"{device_class}\n")
        if driver:
            (device / "driver").symlink_to(f"../../../bus/pci/drivers/{driver}")
        if numa_node is not None:
            (device / "numa_node").write_text(f"{numa_node}\n")
        base = device / virtio if virtio else device
        if kind:
            (base / kind).mkdir(parents=True)
            for name in names:
                (base / kind / name).mkdir()
                if carrier is not None:
                    (base / kind / name / "carrier").write_text(f"{carrier}\n")
        return device

    def add_class_entry(self, kind, name, speed=None, numa_node=None) -> Path:
        interface = self.root / "class" / kind / name
        (interface / "device").mkdir(parents=True)
        if speed is not None:
            (interface / "speed").write_text(f"{speed}\n")
        if numa_node is not None:
            (interface / "device" / "numa_node").write_text(f"{numa_node}\n")
        return interface


@pytest.fixture()
def connection(mocker):
    connection = mocker.create_autospec(LocalConnection)
    connection.get_os_name.return_value = OSName.LINUX
    connection.path.side_effect = lambda *args, **kwargs: Path(*args)
    connection.execute_command.return_value = ConnectionCompletedProcess(
        return_code=1, args="command", stdout="", stderr="mount: only root can do that"
    )
    return connection


@pytest.fixture()
def sysfs(tmp_path):
    return SysfsTree(tmp_path / "sys")


@pytest.fixture()
def root(connection, sysfs):
    return IntrospectionRoot(connection=connection, root=str(sysfs.root))


@pytest.fixture()
def make_unreadable(mocker, tmp_path):
    """Make reading files with given name or path fail like sysfs attributes of interfaces being down."""
    path_class = type(tmp_path)
    original_read_text = path_class.read_text
    unreadable_names = set()

    def read_text(self, *args, **kwargs):
        if self.name in unreadable_names or str(self) in unreadable_names:
            raise OSError(errno.EINVAL, "Invalid argument", str(self))
        return original_read_text(self, *args, **kwargs)

    mocker.patch.object(path_class, "read_text", read_text)
    return unreadable_names.add


@pytest.fixture()
def make_sysfs():
    return SysfsTree
