"""Tests for the storage analysis engine and report composition."""

import os
import threading
from concurrent.futures import ThreadPoolExecutor

import pytest

from conftest import FIXED_NOW, MB, FakeVolumeProvider, StubScanner, make_file, record
from storage_analyzer.config import Settings
from storage_analyzer.errors import InvalidVolumeIdentifier, VolumeUnavailable
from storage_analyzer.services.analyzer import StorageAnalyzer


def names(items):
    return [os.path.basename(item.path) for item in items]


class UnlistableScanner(StubScanner):
    """Scanner whose every scan fails as if the root could not be listed."""

    def scan(self, volume_id):
        super().scan(volume_id)
        raise VolumeUnavailable(volume_id, "root cannot be listed")


def test_scenario_queries(analyzer, scenario_volume):
    """Test the core queries over a small volume."""
    volume = str(scenario_volume)

    assert names(analyzer.get_largest_files(volume)) == ["b.log", "a.txt", "c.txt"]
    assert names(analyzer.get_largest_files(volume, 1)) == ["b.log"]
    assert names(analyzer.get_recent_large_files(volume)) == ["a.txt", "c.txt"]
    assert names(analyzer.get_old_large_files(volume)) == ["b.log"]
    assert [s.extension for s in analyzer.get_extension_distribution(volume)] == ["log", "txt"]


def test_scenario_scans_once(analyzer, scenario_volume):
    """Test every file-based query shares one scan."""
    volume = str(scenario_volume)
    analyzer.get_largest_files(volume)
    analyzer.get_extension_distribution(volume)
    analyzer.get_largest_folders(volume)

    assert len(analyzer.cache) == 1
    assert volume in analyzer.cache


def test_largest_folders(analyzer, folder_volume):
    """Test folder ranking, the size threshold and the depth limit."""
    volume = str(folder_volume)

    folders = analyzer.get_largest_folders(volume)
    relative = [os.path.relpath(f.path, os.path.normpath(volume)) for f in folders]
    assert relative == [
        "a",
        os.path.join("a", "b"),
        os.path.join("a", "b", "c"),
        os.path.join(".cache", "inner"),
        "big",
        os.path.join("big", ".hidden", "deep"),
    ]

    top_level = analyzer.get_largest_folders(volume, depth=1)
    assert [os.path.basename(f.path) for f in top_level] == ["a", "big"]
    assert [f.file_count for f in top_level] == [1, 2]

    assert len(analyzer.get_largest_folders(volume, limit=2)) == 2


@pytest.mark.parametrize("query", [
    "get_largest_files",
    "get_largest_folders",
    "get_extension_distribution",
    "get_recent_large_files",
    "get_old_large_files",
    "get_drive_space",
    "full_report",
])
def test_invalid_volume_rejected(analyzer, tmp_path, query):
    """Test every per-volume query rejects a path that is not a directory."""
    with pytest.raises(InvalidVolumeIdentifier):
        getattr(analyzer, query)(str(tmp_path / "missing"))

    not_a_dir = make_file(tmp_path / "plain.bin", 1)
    with pytest.raises(InvalidVolumeIdentifier):
        getattr(analyzer, query)(str(not_a_dir))

    with pytest.raises(InvalidVolumeIdentifier):
        getattr(analyzer, query)("")


@pytest.mark.parametrize("query", [
    "get_largest_files",
    "get_largest_folders",
    "get_extension_distribution",
    "get_recent_large_files",
    "get_old_large_files",
])
@pytest.mark.parametrize("limit", [0, -1])
def test_limit_below_one_rejected(analyzer, folder_volume, query, limit):
    """Test every ranked query rejects a limit below 1 the same way."""
    with pytest.raises(ValueError):
        getattr(analyzer, query)(str(folder_volume), limit)


def test_limit_above_result_count(analyzer, folder_volume):
    """Test a large limit returns every ranked entry."""
    volume = str(folder_volume)
    assert len(analyzer.get_largest_folders(volume, 100)) == 6
    assert len(analyzer.get_largest_files(volume, 100)) == 5


@pytest.mark.parametrize("depth", [0, 4])
def test_folder_depth_out_of_range(analyzer, folder_volume, depth):
    """Test folder depth outside 1-3 is rejected rather than defaulted."""
    with pytest.raises(ValueError):
        analyzer.get_largest_folders(str(folder_volume), depth=depth)


def test_drive_space_is_never_cached(analyzer, fake_provider, tmp_path):
    """Test each capacity query reaches the provider."""
    space = analyzer.get_drive_space(str(tmp_path))
    analyzer.get_drive_space(str(tmp_path))

    assert fake_provider.space_calls == 2
    assert space.free_percent == pytest.approx(20.0)
    assert len(analyzer.cache) == 0


def test_drive_space_failure(settings, tmp_path):
    """Test a failed capacity query surfaces as VolumeUnavailable."""
    provider = FakeVolumeProvider(failing={str(tmp_path)})
    with StorageAnalyzer(settings=settings, volume_provider=provider) as engine:
        with pytest.raises(VolumeUnavailable):
            engine.get_drive_space(str(tmp_path))


def test_results_reflect_first_scan(analyzer, scenario_volume):
    """Test files added after the first query are not reported."""
    volume = str(scenario_volume)
    before = analyzer.get_largest_files(volume)

    make_file(scenario_volume / "huge.iso", 500 * MB)
    after = analyzer.get_largest_files(volume)

    assert after == before
    assert "huge.iso" not in names(after)


def test_missing_timestamps_only_in_largest(settings, fake_provider, tmp_path):
    """Test files without a modification time skip the windowed views."""
    volume = str(tmp_path)
    files = [
        record(f"{volume}/a.txt", 50 * MB, age_days=10),
        record(f"{volume}/b.log", 200 * MB, age_days=None),
        record(f"{volume}/c.txt", 5 * MB, age_days=5),
    ]
    engine = StorageAnalyzer(
        settings=settings,
        volume_provider=fake_provider,
        scanner=StubScanner(files={volume: files}),
        clock=lambda: FIXED_NOW,
    )
    with engine:
        assert names(engine.get_largest_files(volume)) == ["b.log", "a.txt", "c.txt"]
        assert names(engine.get_recent_large_files(volume)) == ["a.txt", "c.txt"]
        assert engine.get_old_large_files(volume) == []


def test_window_overrides(settings, fake_provider, tmp_path):
    """Test the day windows can be overridden per call."""
    volume = str(tmp_path)
    files = [record(f"{volume}/a.txt", 50 * MB, age_days=10), record(f"{volume}/c.txt", 5 * MB, age_days=5)]
    engine = StorageAnalyzer(
        settings=settings,
        volume_provider=fake_provider,
        scanner=StubScanner(files={volume: files}),
        clock=lambda: FIXED_NOW,
    )
    with engine:
        assert names(engine.get_recent_large_files(volume, days=7)) == ["c.txt"]
        assert names(engine.get_old_large_files(volume, days=7)) == ["a.txt"]


def test_large_file_floor(fake_provider, scenario_volume):
    """Test the optional size floor on the windowed views."""
    settings = Settings(max_workers=2, min_large_file_size_mb=10)
    with StorageAnalyzer(settings=settings, volume_provider=fake_provider) as engine:
        volume = str(scenario_volume)
        assert names(engine.get_recent_large_files(volume)) == ["a.txt"]
        assert names(engine.get_largest_files(volume)) == ["b.log", "a.txt", "c.txt"]


def test_full_report(analyzer, scenario_volume):
    """Test a healthy volume yields every section and no errors."""
    report = analyzer.full_report(str(scenario_volume))

    assert report.complete
    assert report.space is not None
    assert [os.path.basename(f.path) for f in report.largest_folders] == ["logs"]
    assert [s.extension for s in report.extension_distribution] == ["log", "txt"]
    assert names(report.largest_files) == ["b.log", "a.txt", "c.txt"]
    assert names(report.recent_large_files) == ["a.txt", "c.txt"]
    assert names(report.old_large_files) == ["b.log"]
    assert report.generated_at.tzinfo is not None


def test_full_report_without_space(settings, scenario_volume):
    """Test a failed capacity query leaves the file sections intact."""
    volume = str(scenario_volume)
    provider = FakeVolumeProvider(failing={volume})
    with StorageAnalyzer(settings=settings, volume_provider=provider) as engine:
        report = engine.full_report(volume)

    assert report.space is None
    assert not report.complete
    assert len(report.errors) == 1
    assert report.errors[0].startswith("drive space:")
    assert names(report.largest_files) == ["b.log", "a.txt", "c.txt"]


def test_full_report_without_scan(settings, fake_provider, tmp_path):
    """Test a failed scan leaves the capacity section intact."""
    engine = StorageAnalyzer(settings=settings, volume_provider=fake_provider, scanner=UnlistableScanner())
    with engine:
        report = engine.full_report(str(tmp_path))

    assert report.space is not None
    assert report.largest_files == []
    assert report.largest_folders == []
    assert len(report.errors) == 1
    assert report.errors[0].startswith("file analysis:")


def test_analyze_volumes(settings, scenario_volume, tmp_path):
    """Test one report per volume, with bad volumes reported rather than raised."""
    missing = str(tmp_path / "missing")
    provider = FakeVolumeProvider(volumes=[str(scenario_volume), missing])
    with StorageAnalyzer(settings=settings, volume_provider=provider) as engine:
        reports = engine.analyze_volumes()

    assert [r.volume for r in reports] == [str(scenario_volume), missing]
    assert reports[0].complete
    assert not reports[1].complete
    assert "missing" in reports[1].errors[0]


def test_analyze_volumes_stops_when_cleared(analyzer, scenario_volume, folder_volume):
    """Test a cleared running flag skips the remaining volumes."""
    running = threading.Event()
    assert analyzer.analyze_volumes([str(scenario_volume)], running=running) == []

    running.set()
    reports = analyzer.analyze_volumes([str(scenario_volume), str(folder_volume)], running=running)
    assert len(reports) == 2


def test_analyze_volumes_stops_between_volumes(settings, fake_provider, scenario_volume, folder_volume):
    """Test clearing the flag mid-run lets the current volume finish."""
    running = threading.Event()
    running.set()

    class ClearingScanner(StubScanner):
        def scan(self, volume_id):
            running.clear()
            return super().scan(volume_id)

    scanner = ClearingScanner()
    with StorageAnalyzer(settings=settings, volume_provider=fake_provider, scanner=scanner) as engine:
        reports = engine.analyze_volumes([str(scenario_volume), str(folder_volume)], running=running)

    assert [r.volume for r in reports] == [str(scenario_volume)]
    assert scanner.calls == [str(scenario_volume)]


def test_close_shuts_down_owned_executor(settings, fake_provider):
    """Test the engine only shuts down a pool it created."""
    engine = StorageAnalyzer(settings=settings, volume_provider=fake_provider)
    engine.close()
    with pytest.raises(RuntimeError):
        engine.executor.submit(len, [])

    with ThreadPoolExecutor(max_workers=1) as pool:
        shared = StorageAnalyzer(settings=settings, volume_provider=fake_provider, executor=pool)
        shared.close()
        assert pool.submit(len, [1, 2]).result() == 2
