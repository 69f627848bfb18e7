"""Form input helpers."""

from typing import Any, Optional

from core.constants import GroupingDefaults
from core.exceptions import InvalidGroupCountError

TRUE_VALUES = {"1", "true", "yes", "on"}


def parse_bool(value: Any) -> bool:
    if isinstance(value, bool):
        return value
    if value is None:
        return False
    return str(value).strip().lower() in TRUE_VALUES


def parse_group_count(value: Any, pool_size: int) -> int:
    """Parse the requested group count and check it against the pool.

    Raises:
        InvalidGroupCountError: If the value is missing, not a number or out of range
    """
    try:
        count = int(str(value).strip())
    except (TypeError, ValueError):
        raise InvalidGroupCountError("請輸入正確的組數") from None

    if count < GroupingDefaults.MIN_GROUPS or count > pool_size:
        raise InvalidGroupCountError(
            f"組數需介於 {GroupingDefaults.MIN_GROUPS} 到 {max(pool_size, GroupingDefaults.MIN_GROUPS)} 之間"
        )
    return count


def clamp_group_count(value: Optional[int], pool_size: int) -> int:
    """Keep the displayed group count within the allowed range."""
    count = value or GroupingDefaults.GROUP_COUNT
    upper = max(pool_size, GroupingDefaults.MIN_GROUPS)
    return min(max(count, GroupingDefaults.MIN_GROUPS), upper)
