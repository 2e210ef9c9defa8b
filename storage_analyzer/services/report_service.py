"""Full volume report composition."""

import logging
from datetime import datetime, timezone
from typing import TYPE_CHECKING, Any

from storage_analyzer.errors import VolumeUnavailable
from storage_analyzer.models.report import Report
from storage_analyzer.utils.validators import validate_volume_id

if TYPE_CHECKING:
    from storage_analyzer.services.analyzer import StorageAnalyzer

logger = logging.getLogger(__name__)


class ReportComposer:
    """Runs every query against one volume and assembles a Report.

    The capacity readout is always fresh; the file-based sections share the
    cached scan. A failing stage is recorded in ``Report.errors`` and the
    remaining stages still run.
    """

    def __init__(self, analyzer: "StorageAnalyzer"):
        self.analyzer = analyzer

    def full_report(self, volume_id: str) -> Report:
        """
        Build the report for one volume.

        Args:
            volume_id: Volume identifier

        Returns:
            Report, possibly with degraded sections

        Raises:
            InvalidVolumeIdentifier: If the volume id does not name a directory
        """
        validate_volume_id(volume_id)
        limit = self.analyzer.settings.top_n
        sections: dict[str, Any] = {}
        errors: list[str] = []

        try:
            sections["space"] = self.analyzer.get_drive_space(volume_id)
        except VolumeUnavailable as e:
            logger.warning(f"Drive space unavailable for {volume_id}: {e.reason}")
            errors.append(f"drive space: {e}")

        try:
            sections["largest_folders"] = self.analyzer.get_largest_folders(volume_id, limit)
            sections["extension_distribution"] = self.analyzer.get_extension_distribution(volume_id, limit)
            sections["largest_files"] = self.analyzer.get_largest_files(volume_id, limit)
            sections["recent_large_files"] = self.analyzer.get_recent_large_files(volume_id, limit)
            sections["old_large_files"] = self.analyzer.get_old_large_files(volume_id, limit)
        except VolumeUnavailable as e:
            logger.warning(f"File analysis unavailable for {volume_id}: {e.reason}")
            errors.append(f"file analysis: {e}")

        report = Report(
            volume=volume_id,
            generated_at=datetime.now(timezone.utc),
            errors=errors,
            **sections,
        )
        logger.info(f"Report for {volume_id} complete ({len(errors)} errors)")
        return report
