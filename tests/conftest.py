"""Pytest configuration and fixtures."""

import os
import threading
import time
from datetime import datetime, timedelta, timezone
from pathlib import Path
from typing import Optional

import pytest

from storage_analyzer.config import Settings
from storage_analyzer.errors import VolumeUnavailable
from storage_analyzer.models.file_record import FileRecord
from storage_analyzer.models.volume import ScanResult, VolumeSpace
from storage_analyzer.services.analyzer import StorageAnalyzer
from storage_analyzer.services.volume_provider import VolumeProvider

MB = 1 << 20
GB = 1 << 30

FIXED_NOW = datetime(2026, 1, 15, 12, 0, 0, tzinfo=timezone.utc)


def make_file(path: Path, size: int, age_days: float = 0.0) -> Path:
    """Create a sparse file of the given size and age."""
    path.parent.mkdir(parents=True, exist_ok=True)
    with open(path, "wb") as f:
        f.truncate(size)
    mtime = time.time() - age_days * 86400
    os.utime(path, (mtime, mtime))
    return path


def record(path: str, size: int, age_days: Optional[float] = 1.0) -> FileRecord:
    """FileRecord aged relative to FIXED_NOW; age None means no timestamp."""
    modified = None if age_days is None else FIXED_NOW - timedelta(days=age_days)
    return FileRecord(path=path, size=size, modified_time=modified, accessed_time=modified)


class FakeVolumeProvider(VolumeProvider):
    """Volume provider backed by fixed values."""

    def __init__(self, volumes=None, failing=()):
        self.volumes = list(volumes or [])
        self.failing = set(failing)
        self.space_calls = 0

    def list_fixed_volumes(self) -> list[str]:
        return list(self.volumes)

    def space_of(self, volume_id: str) -> VolumeSpace:
        self.space_calls += 1
        if volume_id in self.failing:
            raise VolumeUnavailable(volume_id, "capacity query failed")
        return VolumeSpace(volume=volume_id, total=500 * GB, used=400 * GB, free=100 * GB)


class StubScanner:
    """Scanner returning canned files per volume and counting calls."""

    def __init__(self, files=None, delay: float = 0.0, gates=None):
        self.files = files or {}
        self.delay = delay
        self.gates = gates or {}
        self.calls: list[str] = []
        self._lock = threading.Lock()

    def scan(self, volume_id: str) -> ScanResult:
        with self._lock:
            self.calls.append(volume_id)
        gate = self.gates.get(volume_id)
        if gate is not None:
            assert gate.wait(timeout=5), "gate was never opened"
        if self.delay:
            time.sleep(self.delay)
        return ScanResult(root=volume_id, files=tuple(self.files.get(volume_id, ())))


@pytest.fixture
def settings():
    """Settings with tiny chunks so parallel paths run on small inputs."""
    return Settings(max_workers=4, chunk_size=2)


@pytest.fixture
def fake_provider():
    return FakeVolumeProvider()


@pytest.fixture
def scenario_volume(tmp_path):
    """Volume with a.txt (50MB, 10 days), b.log (200MB, 200 days), c.txt (5MB, 5 days)."""
    root = tmp_path / "volume"
    make_file(root / "docs" / "a.txt", 50 * MB, age_days=10)
    make_file(root / "logs" / "b.log", 200 * MB, age_days=200)
    make_file(root / "c.txt", 5 * MB, age_days=5)
    return root


@pytest.fixture
def folder_volume(tmp_path):
    """Volume exercising depth limits, hidden folders and the size threshold."""
    root = tmp_path / "folders"
    make_file(root / "big" / "top.bin", 10 * MB)
    make_file(root / "big" / ".hidden" / "deep" / "x" / "y" / "blob.bin", 120 * MB)
    make_file(root / ".cache" / "inner" / "pack.bin", 200 * MB)
    make_file(root / "small" / "note.txt", 10 * MB)
    make_file(root / "a" / "b" / "c" / "d" / "e.iso", 300 * MB)
    return root


@pytest.fixture
def analyzer(settings, fake_provider):
    """Engine over the real filesystem with a fake volume provider."""
    engine = StorageAnalyzer(settings=settings, volume_provider=fake_provider)
    yield engine
    engine.close()
