"""Export services for dashboard snapshots.

Writes computed property metrics to timestamped JSON files, and reads them
back, so one month's figures can be compared with the next.
"""

import json
import os
from datetime import datetime
from typing import Any, Dict, List, Optional

from onepager.core.exceptions import DataLoadError, ExportError
from onepager.core.logging import get_logger
from onepager.core.settings import get_settings
from onepager.domain.models.metrics import PortfolioTotals, PropertyMetrics

log = get_logger(__name__)


class SnapshotExporter:
    """Handles exporting of computed metrics."""

    def __init__(self, output_dir: Optional[str] = None):
        """Initialize exporter.

        Args:
            output_dir: Directory where snapshots are written (settings default).
        """
        self.output_dir = output_dir or get_settings().export_dir
        self._ensure_dir()

    def _ensure_dir(self):
        """Ensure output directory exists."""
        if not os.path.exists(self.output_dir):
            try:
                os.makedirs(self.output_dir)
                log.info("created_output_directory", path=self.output_dir)
            except OSError as e:
                log.error("output_directory_creation_failed", error=str(e))
                raise ExportError(f"Cannot create {self.output_dir}: {e}") from e

    def save_snapshot(
        self,
        properties: List[PropertyMetrics],
        totals: Optional[PortfolioTotals] = None,
        prefix: str = "snapshot",
        metadata: Optional[Dict[str, Any]] = None,
    ) -> str:
        """Save metrics to a JSON file.

        Args:
            properties: Per-property metrics.
            totals: Optional portfolio totals.
            prefix: Filename prefix.
            metadata: Optional metadata to include in the file.

        Returns:
            Path to the saved file.
        """
        now = datetime.now()
        filename = f"{prefix}_{now.strftime('%Y%m%d_%H%M%S_%f')}.json"
        filepath = os.path.join(self.output_dir, filename)

        payload = {
            "metadata": {
                "timestamp": now.isoformat(),
                "count": len(properties),
                **(metadata or {}),
            },
            "properties": [p.model_dump(mode="json") for p in properties],
            "totals": totals.model_dump(mode="json") if totals is not None else None,
        }

        try:
            with open(filepath, "w", encoding="utf-8") as f:
                json.dump(payload, f, indent=2, ensure_ascii=False)
        except OSError as e:
            log.error("snapshot_save_failed", path=filepath, error=str(e))
            raise ExportError(f"Cannot write {filepath}: {e}") from e

        log.info("snapshot_saved", path=filepath, count=len(properties))
        return filepath

    def load_snapshot(self, filepath: str) -> Dict[str, Any]:
        """Read a snapshot written by ``save_snapshot``.

        Returns:
            Dict with ``metadata``, ``properties`` (PropertyMetrics list) and
            ``totals`` (PortfolioTotals or None).
        """
        try:
            with open(filepath, "r", encoding="utf-8") as f:
                payload = json.load(f)
        except (OSError, json.JSONDecodeError) as e:
            log.error("snapshot_load_failed", path=filepath, error=str(e))
            raise DataLoadError(f"Cannot read snapshot {filepath}: {e}") from e

        if not isinstance(payload, dict) or "properties" not in payload:
            raise DataLoadError(f"Not a snapshot file: {filepath}")

        totals = payload.get("totals")
        return {
            "metadata": payload.get("metadata", {}),
            "properties": [PropertyMetrics.model_validate(p) for p in payload["properties"]],
            "totals": PortfolioTotals.model_validate(totals) if totals else None,
        }
