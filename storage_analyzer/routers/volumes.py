"""Volume analysis router."""

import logging
from typing import Optional

from fastapi import APIRouter, Depends, Query, Request

from storage_analyzer.models.report import Report
from storage_analyzer.models.response import (
    ExtensionListResponse,
    FileListResponse,
    FolderListResponse,
    VolumeListResponse,
)
from storage_analyzer.models.volume import VolumeSpace
from storage_analyzer.services.analyzer import StorageAnalyzer
from storage_analyzer.utils.validators import normalize_drive_reference, validate_limit

logger = logging.getLogger(__name__)
router = APIRouter()

MAX_LIMIT = 1000


def get_analyzer(request: Request) -> StorageAnalyzer:
    """Dependency to get the engine instance."""
    return request.app.state.analyzer


def _files_response(volume: str, files: list, limit: int) -> FileListResponse:
    return FileListResponse(
        volume=volume,
        files=files,
        total=len(files),
        limit=limit,
        total_size=sum(f.size for f in files),
    )


@router.get("", response_model=VolumeListResponse)
def list_volumes(analyzer: StorageAnalyzer = Depends(get_analyzer)):
    """
    List fixed local volumes.

    Returns:
        Volume identifiers
    """
    volumes = analyzer.list_volumes()
    return VolumeListResponse(volumes=volumes, total=len(volumes))


@router.get("/space", response_model=VolumeSpace)
def get_drive_space(
    volume: str = Query(..., description="Drive letter or mount point"),
    analyzer: StorageAnalyzer = Depends(get_analyzer)
):
    """
    Get current total/used/free capacity of a volume.

    Args:
        volume: Drive letter or mount point

    Returns:
        Capacity readout
    """
    volume = normalize_drive_reference(volume)
    return analyzer.get_drive_space(volume)


@router.get("/folders", response_model=FolderListResponse)
def get_largest_folders(
    volume: str = Query(..., description="Drive letter or mount point"),
    limit: Optional[int] = Query(None, description="Maximum folders to return"),
    depth: int = Query(3, description="Deepest folder level to report", ge=1, le=3),
    analyzer: StorageAnalyzer = Depends(get_analyzer)
):
    """
    Get the largest folders within a few levels of the volume root.

    Args:
        volume: Drive letter or mount point
        limit: Maximum folders to return
        depth: Deepest folder level to report

    Returns:
        Folders, largest first
    """
    volume = normalize_drive_reference(volume)
    limit = validate_limit(limit, MAX_LIMIT, analyzer.settings.top_n)
    folders = analyzer.get_largest_folders(volume, limit, depth)
    return FolderListResponse(volume=volume, folders=folders, total=len(folders), limit=limit)


@router.get("/extensions", response_model=ExtensionListResponse)
def get_extension_distribution(
    volume: str = Query(..., description="Drive letter or mount point"),
    limit: Optional[int] = Query(None, description="Maximum groups to return"),
    analyzer: StorageAnalyzer = Depends(get_analyzer)
):
    """
    Get cumulative size per file extension.

    Args:
        volume: Drive letter or mount point
        limit: Maximum groups to return

    Returns:
        Extension groups, largest first
    """
    volume = normalize_drive_reference(volume)
    limit = validate_limit(limit, MAX_LIMIT, analyzer.settings.top_n)
    extensions = analyzer.get_extension_distribution(volume, limit)
    return ExtensionListResponse(volume=volume, extensions=extensions, total=len(extensions), limit=limit)


@router.get("/files/largest", response_model=FileListResponse)
def get_largest_files(
    volume: str = Query(..., description="Drive letter or mount point"),
    limit: Optional[int] = Query(None, description="Maximum files to return"),
    analyzer: StorageAnalyzer = Depends(get_analyzer)
):
    """
    Get the largest files on a volume.

    Args:
        volume: Drive letter or mount point
        limit: Maximum files to return

    Returns:
        Files, largest first
    """
    volume = normalize_drive_reference(volume)
    limit = validate_limit(limit, MAX_LIMIT, analyzer.settings.top_n)
    return _files_response(volume, analyzer.get_largest_files(volume, limit), limit)


@router.get("/files/recent", response_model=FileListResponse)
def get_recent_large_files(
    volume: str = Query(..., description="Drive letter or mount point"),
    limit: Optional[int] = Query(None, description="Maximum files to return"),
    analyzer: StorageAnalyzer = Depends(get_analyzer)
):
    """
    Get the largest recently modified files.

    Args:
        volume: Drive letter or mount point
        limit: Maximum files to return

    Returns:
        Files modified within the recent window, largest first
    """
    volume = normalize_drive_reference(volume)
    limit = validate_limit(limit, MAX_LIMIT, analyzer.settings.top_n)
    return _files_response(volume, analyzer.get_recent_large_files(volume, limit), limit)


@router.get("/files/old", response_model=FileListResponse)
def get_old_large_files(
    volume: str = Query(..., description="Drive letter or mount point"),
    limit: Optional[int] = Query(None, description="Maximum files to return"),
    analyzer: StorageAnalyzer = Depends(get_analyzer)
):
    """
    Get the largest files that have not been modified for a long time.

    Args:
        volume: Drive letter or mount point
        limit: Maximum files to return

    Returns:
        Files older than the stale window, largest first
    """
    volume = normalize_drive_reference(volume)
    limit = validate_limit(limit, MAX_LIMIT, analyzer.settings.top_n)
    return _files_response(volume, analyzer.get_old_large_files(volume, limit), limit)


@router.get("/report", response_model=Report)
def get_full_report(
    volume: str = Query(..., description="Drive letter or mount point"),
    analyzer: StorageAnalyzer = Depends(get_analyzer)
):
    """
    Get every analysis section for a volume.

    Args:
        volume: Drive letter or mount point

    Returns:
        Full report; failed sections are listed in ``errors``
    """
    volume = normalize_drive_reference(volume)
    report = analyzer.full_report(volume)
    logger.info(f"Served report for {volume} ({len(report.errors)} errors)")
    return report
