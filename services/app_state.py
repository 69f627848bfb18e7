"""Process-wide application state owned by the web application."""

from __future__ import annotations

import random
from dataclasses import dataclass
from typing import TYPE_CHECKING, Dict, List, Optional, Sequence, Tuple

from core import get_logger, GroupingDefaults
from core.models import Group, Participant, RaffleWinner
from services import importer
from services.grouping import GroupingEngine, GroupingOutcome, ThemeGenerator
from services.raffle import RaffleEngine, eligible_pool
from services.theme_generator import GeminiThemeGenerator
from services.ticker import SpinTicker

if TYPE_CHECKING:
    from config import Config

logger = get_logger(__name__)


@dataclass
class RaffleSettings:
    prize_name: str
    allow_duplicates: bool = False


@dataclass
class GroupingSettings:
    group_count: int = GroupingDefaults.GROUP_COUNT
    use_ai_themes: bool = False


class AppState:
    """Participant pool plus the results derived from it.

    The pool is replaced wholesale on every edit, which clears winners and
    groups and cancels a running spin. All mutations happen under the
    raffle engine's lock, so the spin thread and request threads see a
    consistent view.
    """

    def __init__(self, raffle: RaffleEngine, grouping: GroupingEngine) -> None:
        self.raffle = raffle
        self.grouping = grouping
        self.lock = raffle.lock

        self.participants: Tuple[Participant, ...] = ()
        self.winners: List[RaffleWinner] = []
        self.groups: List[Group] = []
        self.draft_text = ""
        self.raffle_settings = RaffleSettings(prize_name=raffle.default_prize_name)
        self.grouping_settings = GroupingSettings()

    # Participant store

    def replace_participants(self, participants: Sequence[Participant]) -> None:
        with self.lock:
            self.raffle.reset()
            self.participants = tuple(participants)
            self.winners = []
            self.groups = []
            self.draft_text = "\n".join(p.name for p in self.participants)
        logger.info(f"Participant pool replaced ({len(participants)} participants), results cleared")

    def save_text(self, text: str) -> Tuple[Participant, ...]:
        self.replace_participants(importer.import_text(text))
        return self.participants

    def load_upload(self, data: bytes) -> List[str]:
        """Read an uploaded list into the draft without saving it.

        Raises:
            FileValidationError: If the file cannot be decoded
        """
        names = importer.parse_delimited_names(importer.decode_upload(data))
        with self.lock:
            self.draft_text = "\n".join(names)
        logger.info(f"Loaded {len(names)} names from upload into the draft")
        return names

    def load_sample(self) -> None:
        with self.lock:
            self.draft_text = "\n".join(importer.SAMPLE_NAMES)

    def remove_duplicates(self) -> int:
        with self.lock:
            unique = importer.remove_duplicates(self.participants)
            removed = len(self.participants) - len(unique)
            if removed:
                self.replace_participants(unique)
        return removed

    @property
    def duplicates(self) -> Dict[str, int]:
        return importer.duplicate_names(self.participants)

    # Raffle

    def eligible_participants(self, allow_duplicates: Optional[bool] = None) -> List[Participant]:
        if allow_duplicates is None:
            allow_duplicates = self.raffle_settings.allow_duplicates
        with self.lock:
            return eligible_pool(self.participants, self.winners, allow_duplicates)

    def _record_winner(self, winner: RaffleWinner) -> None:
        with self.lock:
            self.winners.insert(0, winner)

    def _resolve_settings(self, prize_name: Optional[str], allow_duplicates: Optional[bool]) -> RaffleSettings:
        settings = RaffleSettings(
            prize_name=self.raffle_settings.prize_name,
            allow_duplicates=self.raffle_settings.allow_duplicates,
        )
        if prize_name is not None:
            settings.prize_name = self.raffle.resolve_prize_name(prize_name)
        if allow_duplicates is not None:
            settings.allow_duplicates = allow_duplicates
        return settings

    def start_spin(
        self,
        prize_name: Optional[str] = None,
        allow_duplicates: Optional[bool] = None,
    ) -> SpinTicker:
        """Start an animated draw with the current settings.

        Raises:
            NoEligibleParticipantsError: If nobody is eligible
            SpinInProgressError: If a spin is already running
        """
        with self.lock:
            settings = self._resolve_settings(prize_name, allow_duplicates)
            ticker = self.raffle.start_spin(
                self.participants,
                self.winners,
                record=self._record_winner,
                prize_name=settings.prize_name,
                allow_duplicates=settings.allow_duplicates,
            )
            self.raffle_settings = settings
            return ticker

    def raffle_snapshot(self) -> dict:
        with self.lock:
            snapshot = self.raffle.snapshot()
            snapshot.update({
                "total": len(self.participants),
                "remaining": len(self.eligible_participants()),
                "allow_duplicates": self.raffle_settings.allow_duplicates,
                "history": [w.to_dict() for w in self.winners],
            })
            return snapshot

    # Grouping

    def generate_groups(self, group_count: int, use_ai_themes: bool = False) -> GroupingOutcome:
        """Replace the groups with a new partition of the current pool.

        The theme call runs outside the state lock. If the pool is replaced
        while it runs, the result is discarded.

        Raises:
            GenerationInProgressError: If another generation is running
            InvalidGroupCountError: If the count does not fit the pool
        """
        with self.lock:
            pool = self.participants
            self.grouping_settings = GroupingSettings(group_count=group_count, use_ai_themes=use_ai_themes)

        outcome = self.grouping.generate(pool, group_count, use_ai_themes=use_ai_themes)

        with self.lock:
            if self.participants is pool:
                self.groups = outcome.groups
            else:
                logger.warning("Participant pool changed during group generation, result discarded")
                outcome.groups = []
        return outcome

    def shutdown(self) -> None:
        self.raffle.cancel()


def build_app_state(
    config: Config,
    theme_generator: Optional[ThemeGenerator] = None,
    rng: Optional[random.Random] = None,
) -> AppState:
    """Create the application state from configuration."""
    if theme_generator is None:
        theme_generator = GeminiThemeGenerator(
            api_key=config.gemini_api_key,
            model=config.gemini_model,
            base_url=config.gemini_base_url,
            timeout=config.ai_timeout,
        )
    raffle = RaffleEngine(
        tick_interval=config.spin_tick_interval,
        tick_count=config.spin_ticks,
        display_batch=config.spin_display_batch,
        default_prize_name=config.default_prize_name,
        rng=rng,
    )
    grouping = GroupingEngine(theme_generator=theme_generator, rng=rng)
    return AppState(raffle=raffle, grouping=grouping)
