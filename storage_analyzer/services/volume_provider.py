"""Volume enumeration and capacity queries.

The engine only talks to the ``VolumeProvider`` interface; the platform
specific implementation is chosen once by ``get_volume_provider``.
"""

import logging
import sys
from abc import ABC, abstractmethod
from typing import Optional

import psutil

from storage_analyzer.errors import VolumeUnavailable
from storage_analyzer.models.volume import VolumeSpace

logger = logging.getLogger(__name__)

# Pseudo, virtual, optical and network filesystems are not fixed local storage
NON_FIXED_FSTYPES = frozenset({
    "autofs", "binfmt_misc", "cgroup", "cgroup2", "configfs", "debugfs",
    "devfs", "devpts", "devtmpfs", "efivarfs", "fusectl", "hugetlbfs",
    "iso9660", "mqueue", "nsfs", "overlay", "proc", "pstore", "ramfs",
    "securityfs", "squashfs", "sysfs", "tmpfs", "tracefs", "udf",
    "cifs", "smbfs", "smb3", "nfs", "nfs4", "afpfs", "webdav", "fuse.sshfs",
})

NON_FIXED_MOUNT_PREFIXES = ("/snap/", "/boot/", "/System/Volumes/")


class VolumeProvider(ABC):
    """Platform capability: list fixed volumes and read their capacity."""

    @abstractmethod
    def list_fixed_volumes(self) -> list[str]:
        """Return identifiers of fixed local volumes."""

    def space_of(self, volume_id: str) -> VolumeSpace:
        """
        Read total/used/free bytes of a volume right now.

        Args:
            volume_id: Volume identifier

        Returns:
            VolumeSpace readout

        Raises:
            VolumeUnavailable: If the capacity query fails
        """
        try:
            usage = psutil.disk_usage(volume_id)
        except OSError as e:
            raise VolumeUnavailable(volume_id, str(e)) from e

        return VolumeSpace(volume=volume_id, total=usage.total, used=usage.used, free=usage.free)


class PosixVolumeProvider(VolumeProvider):
    """Mount points backed by physical local filesystems."""

    def list_fixed_volumes(self) -> list[str]:
        volumes = []
        for part in psutil.disk_partitions(all=False):
            if part.fstype in NON_FIXED_FSTYPES:
                logger.debug(f"Skipping {part.mountpoint}: filesystem type {part.fstype}")
                continue
            if part.mountpoint.startswith(NON_FIXED_MOUNT_PREFIXES):
                logger.debug(f"Skipping {part.mountpoint}: system mount")
                continue
            if part.mountpoint not in volumes:
                volumes.append(part.mountpoint)
        return volumes


class WindowsVolumeProvider(VolumeProvider):
    """Drive roots whose drive type is fixed, reported as "C:/"."""

    def list_fixed_volumes(self) -> list[str]:
        volumes = []
        for part in psutil.disk_partitions(all=False):
            opts = {opt.strip() for opt in part.opts.split(",")}
            if "fixed" not in opts:
                logger.debug(f"Skipping {part.mountpoint}: not a fixed drive ({part.opts})")
                continue
            volume = part.mountpoint.replace("\\", "/")
            if volume not in volumes:
                volumes.append(volume)
        return volumes


def get_volume_provider(platform: Optional[str] = None) -> VolumeProvider:
    """
    Select the volume provider for a platform.

    Args:
        platform: ``sys.platform`` style name, defaults to the running platform

    Returns:
        VolumeProvider instance
    """
    platform = platform or sys.platform
    if platform.startswith("win"):
        return WindowsVolumeProvider()
    return PosixVolumeProvider()
