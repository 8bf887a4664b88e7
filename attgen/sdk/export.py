"""CSV export of encoded attestation rows."""

from __future__ import annotations

import logging
from collections.abc import Sequence
from datetime import timezone
from pathlib import Path

from attgen.sdk.models import ExportRow
from attgen.sdk.rows import Clock, utc_now

logger = logging.getLogger(__name__)

DEFAULT_DELIMITER = ";"


def format_csv(rows: Sequence[ExportRow], delimiter: str = DEFAULT_DELIMITER) -> str:
    """Join fields with the delimiter and rows with newlines."""
    return "\n".join(delimiter.join(str(field) for field in row) for row in rows)


def output_filename(clock: Clock = utc_now) -> str:
    """output-<UTC ISO 8601 to the second, colons replaced>.csv"""
    stamp = clock().astimezone(timezone.utc).strftime("%Y-%m-%dT%H-%M-%S")
    return f"output-{stamp}.csv"


class CsvSink:
    """Writes a batch of rows as one text file under an output directory."""

    def __init__(self, output_dir: Path, clock: Clock = utc_now, delimiter: str = DEFAULT_DELIMITER):
        self.output_dir = Path(output_dir)
        self.clock = clock
        self.delimiter = delimiter

    def write(self, rows: Sequence[ExportRow]) -> Path:
        """Write rows to a timestamped file and return its path."""
        self.output_dir.mkdir(parents=True, exist_ok=True)
        path = self.output_dir / output_filename(self.clock)
        path.write_text(format_csv(rows, self.delimiter), encoding="utf-8")
        logger.debug("Wrote %d rows to %s", len(rows), path)
        return path
