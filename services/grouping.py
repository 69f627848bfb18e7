"""Random group partitioning with optional generated names."""

from __future__ import annotations

import random
import threading
from dataclasses import dataclass
from typing import List, Optional, Protocol, Sequence

from core import get_logger, GroupingDefaults
from core.exceptions import GenerationInProgressError, InvalidGroupCountError
from core.models import Group, Participant, new_group_id
from services.theme_generator import GroupTheme, ThemeFailure, ThemeResult, ThemeSuccess

logger = get_logger(__name__)


class ThemeGenerator(Protocol):
    def generate(self, count: int) -> ThemeResult: ...


@dataclass
class GroupingOutcome:
    groups: List[Group]
    theme_result: Optional[ThemeResult] = None
    themes_applied: int = 0


def validate_group_count(pool_size: int, group_count: int) -> None:
    """Reject counts outside ``MIN_GROUPS <= group_count <= pool_size``.

    Raises:
        InvalidGroupCountError: If the pool cannot be split that way
    """
    if pool_size < 1:
        raise InvalidGroupCountError("名單為空，無法分組")
    if group_count < GroupingDefaults.MIN_GROUPS:
        raise InvalidGroupCountError(f"組數至少需要 {GroupingDefaults.MIN_GROUPS} 組")
    if group_count > pool_size:
        raise InvalidGroupCountError(f"組數不能超過總人數（{pool_size} 人）")


def default_group_name(index: int) -> str:
    return GroupingDefaults.NAME_TEMPLATE.format(index=index + 1)


def partition(
    participants: Sequence[Participant],
    group_count: int,
    rng: Optional[random.Random] = None,
) -> List[Group]:
    """Shuffle the pool and deal it round-robin into ``group_count`` groups.

    Group sizes differ by at most one and every participant lands in
    exactly one group.
    """
    validate_group_count(len(participants), group_count)
    rng = rng or random.Random()

    shuffled = list(participants)
    rng.shuffle(shuffled)

    groups = [Group(id=new_group_id(i), name=default_group_name(i)) for i in range(group_count)]
    for idx, participant in enumerate(shuffled):
        groups[idx % group_count].members.append(participant)

    logger.info(
        f"Partitioned {len(shuffled)} participants into {group_count} groups "
        f"(sizes {[g.size for g in groups]})"
    )
    return groups


def apply_themes(groups: Sequence[Group], themes: Sequence[Optional[GroupTheme]]) -> int:
    """Overwrite group names and slogans in order.

    Missing or unusable entries leave the group with its default name.

    Returns:
        Number of groups that received a theme
    """
    applied = 0
    for group, theme in zip(groups, themes):
        if theme is None:
            continue
        group.name = theme.name
        group.theme = theme.slogan
        applied += 1
    return applied


class GroupingEngine:
    """Generates fresh partitions; one generation may be in flight at a time."""

    def __init__(
        self,
        theme_generator: Optional[ThemeGenerator] = None,
        rng: Optional[random.Random] = None,
    ) -> None:
        self.theme_generator = theme_generator
        self._rng = rng or random.Random()
        self._lock = threading.Lock()
        self._in_flight = False

    @property
    def generating(self) -> bool:
        return self._in_flight

    def generate(
        self,
        participants: Sequence[Participant],
        group_count: int,
        use_ai_themes: bool = False,
    ) -> GroupingOutcome:
        """Partition the pool and optionally decorate the groups.

        Raises:
            GenerationInProgressError: If another generation is running
            InvalidGroupCountError: If the count does not fit the pool
        """
        with self._lock:
            if self._in_flight:
                raise GenerationInProgressError("正在分組中，請稍候")
            self._in_flight = True

        try:
            groups = partition(participants, group_count, self._rng)
            outcome = GroupingOutcome(groups=groups)
            if use_ai_themes:
                outcome.theme_result = self._decorate(groups)
                if isinstance(outcome.theme_result, ThemeSuccess):
                    outcome.themes_applied = apply_themes(groups, outcome.theme_result.themes)
            return outcome
        finally:
            with self._lock:
                self._in_flight = False

    def _decorate(self, groups: Sequence[Group]) -> ThemeResult:
        if self.theme_generator is None:
            result: ThemeResult = ThemeFailure("theme generator is not configured")
        else:
            result = self.theme_generator.generate(len(groups))

        if isinstance(result, ThemeFailure):
            logger.warning(f"Group theme generation failed, keeping default names: {result.reason}")
        elif result.usable < len(groups):
            logger.warning(f"Only {result.usable}/{len(groups)} usable group themes returned")
        return result
