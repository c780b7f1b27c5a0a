"""Shaping a relationship report into the exported analysis record."""

import json
from datetime import datetime, timezone
from decimal import Decimal, ROUND_HALF_UP
from pathlib import Path
from typing import Optional, Union

from .logging_config import get_logger
from .models import ExportRecord, ExportSummary, RelationshipReport

logger = get_logger(__name__)

DEFAULT_FILENAME_PREFIX = "instagram-analysis"


def format_follow_ratio(followers_count: int, following_count: int) -> str:
    """Followers as a percentage of following, two decimals and a ``%``.

    Returns exactly ``"0%"`` when nobody is followed.
    """
    if following_count <= 0:
        return "0%"

    ratio = Decimal(followers_count / following_count * 100)
    return f"{ratio.quantize(Decimal('0.01'), rounding=ROUND_HALF_UP)}%"


def build_report(
    report: RelationshipReport,
    generated_at: Optional[datetime] = None,
) -> ExportRecord:
    """Build the export record for a relationship report.

    Args:
        report: Reconciled relationship report
        generated_at: Generation time, defaults to now (UTC)

    Returns:
        ExportRecord ready for serialization
    """
    summary = ExportSummary(
        total_followers=report.followers_count,
        total_following=report.following_count,
        not_following_back_count=report.not_following_back_count,
        mutual_followers_count=report.mutual_followers_count,
        follow_ratio=format_follow_ratio(report.followers_count, report.following_count),
    )

    return ExportRecord(
        generated_at=generated_at or datetime.now(timezone.utc),
        summary=summary,
        not_following_back=list(report.not_following_back),
        mutual_followers=list(report.mutual_followers),
    )


def export_filename(record: ExportRecord, prefix: str = DEFAULT_FILENAME_PREFIX) -> str:
    """``<prefix>-YYYY-MM-DD.json`` using the UTC date of generation."""
    generated = record.generated_at
    if generated.tzinfo is not None:
        generated = generated.astimezone(timezone.utc)
    return f"{prefix}-{generated.date().isoformat()}.json"


def save_export(
    record: ExportRecord,
    output_dir: Union[str, Path] = ".",
    prefix: str = DEFAULT_FILENAME_PREFIX,
    indent: int = 2,
) -> Path:
    """Write the export record as JSON.

    Args:
        record: Record to write
        output_dir: Directory for the file, created if missing
        prefix: File name prefix
        indent: JSON indentation

    Returns:
        Path of the written file
    """
    path = Path(output_dir) / export_filename(record, prefix)
    path.parent.mkdir(parents=True, exist_ok=True)

    with open(path, "w", encoding="utf-8") as f:
        json.dump(record.to_export_dict(), f, indent=indent)

    logger.info(f"Saved analysis export to {path}", extra={"path": str(path)})
    return path
