"""Participant list import: free text, delimited files and duplicate handling."""

from __future__ import annotations

import re
from collections import Counter
from typing import Dict, Iterable, List, Sequence

from core import get_logger, ImportDefaults
from core.exceptions import FileValidationError
from core.models import Participant, new_participant_id

logger = get_logger(__name__)

_LINE_SPLIT = re.compile(r"\r?\n")

SAMPLE_NAMES = (
    "陳小明", "林美玲", "張大為", "李宜芳", "王志強",
    "吳淑芬", "劉建國", "蔡佩君", "楊信宏", "許家豪",
    "鄭雅雯", "謝承恩", "郭思妤", "洪振宇", "曾郁婷",
)


def parse_text_names(text: str) -> List[str]:
    """Split free text into names, one per line.

    Lines are trimmed and empty lines dropped; order is preserved.
    """
    if not text:
        return []
    return [line.strip() for line in _LINE_SPLIT.split(text) if line.strip()]


def parse_delimited_names(content: str) -> List[str]:
    """Extract names from delimited file content.

    Only the first field of each line is used. Header tokens (``name`` and
    ``姓名``, exact and case-sensitive) are dropped wherever they appear.
    """
    if not content:
        return []
    names = []
    for line in _LINE_SPLIT.split(content):
        value = line.split(ImportDefaults.DELIMITER, 1)[0].strip()
        if not value or value in ImportDefaults.HEADER_TOKENS:
            continue
        names.append(value)
    return names


def decode_upload(data: bytes) -> str:
    """Decode uploaded file bytes as UTF-8 text.

    Raises:
        FileValidationError: If the content is binary or not valid UTF-8
    """
    if b"\x00" in data:
        raise FileValidationError("檔案內容不是文字格式，請上傳 CSV 或 TXT 檔案")
    try:
        return data.decode("utf-8-sig")
    except UnicodeDecodeError as e:
        logger.warning(f"Rejected upload that is not valid UTF-8: {e}")
        raise FileValidationError("無法讀取檔案，請確認檔案為 UTF-8 編碼") from e


def build_participants(names: Iterable[str]) -> List[Participant]:
    """Create participants with fresh ids, keeping the input order."""
    return [Participant(id=new_participant_id(), name=name) for name in names]


def import_text(text: str) -> List[Participant]:
    participants = build_participants(parse_text_names(text))
    logger.info(f"Imported {len(participants)} participants from text input")
    return participants


def name_counts(participants: Sequence[Participant]) -> Dict[str, int]:
    """Frequency map over participant names."""
    return dict(Counter(p.name for p in participants))


def duplicate_names(participants: Sequence[Participant]) -> Dict[str, int]:
    """Names that occur more than once, with their counts."""
    return {name: count for name, count in name_counts(participants).items() if count > 1}


def has_duplicates(participants: Sequence[Participant]) -> bool:
    return bool(duplicate_names(participants))


def remove_duplicates(participants: Sequence[Participant]) -> List[Participant]:
    """Keep the first participant of each name, in original order."""
    seen = set()
    unique = []
    for participant in participants:
        if participant.name in seen:
            continue
        seen.add(participant.name)
        unique.append(participant)
    removed = len(participants) - len(unique)
    if removed:
        logger.info(f"Removed {removed} duplicate participants, {len(unique)} remain")
    return unique
