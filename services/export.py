"""CSV export of grouping results."""

from __future__ import annotations

import csv
import io
from datetime import date
from typing import Iterator, Optional, Sequence, Tuple

from core import get_logger, ExportDefaults
from core.exceptions import EmptyExportError
from core.models import Group

logger = get_logger(__name__)


def iter_group_rows(groups: Sequence[Group]) -> Iterator[Tuple[str, str, str]]:
    """One (group name, member name, slogan) row per member."""
    for group in groups:
        for member in group.members:
            yield group.name, member.name, group.theme or ""


def build_groups_csv(groups: Sequence[Group]) -> str:
    """Serialize groups as CSV text with a leading BOM.

    Raises:
        EmptyExportError: If there are no groups
    """
    if not groups:
        raise EmptyExportError("目前沒有分組結果可以下載")

    buffer = io.StringIO()
    buffer.write(ExportDefaults.BOM)
    buffer.write(",".join(ExportDefaults.HEADER) + "\n")
    writer = csv.writer(buffer, quoting=csv.QUOTE_ALL, lineterminator="\n")
    rows = 0
    for row in iter_group_rows(groups):
        writer.writerow(row)
        rows += 1

    logger.info(f"Exported {len(groups)} groups ({rows} member rows)")
    return buffer.getvalue()


def export_filename(day: Optional[date] = None) -> str:
    day = day or date.today()
    return ExportDefaults.FILENAME_TEMPLATE.format(day=day.isoformat())
