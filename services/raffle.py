"""Single-winner raffle with an animated, time-boxed reveal."""

from __future__ import annotations

import random
import threading
from datetime import datetime
from typing import Callable, Iterable, List, Optional, Sequence

from core import get_logger, RaffleDefaults, SpinState
from core.exceptions import NoEligibleParticipantsError, SpinInProgressError
from core.models import Participant, RaffleWinner
from services.ticker import SpinTicker

logger = get_logger(__name__)

NO_ELIGIBLE_MESSAGE = "沒有可抽籤的人選了！"
SPIN_IN_PROGRESS_MESSAGE = "抽籤進行中，請稍候"

RecordWinner = Callable[[RaffleWinner], None]


def eligible_pool(
    participants: Sequence[Participant],
    winners: Iterable[RaffleWinner],
    allow_duplicates: bool = False,
) -> List[Participant]:
    """Participants that may win the next draw.

    Args:
        participants: Current participant pool
        winners: Past winner records
        allow_duplicates: If True, past winners stay eligible

    Returns:
        Eligible participants in pool order
    """
    if allow_duplicates:
        return list(participants)
    winner_ids = {w.participant.id for w in winners}
    return [p for p in participants if p.id not in winner_ids]


class RaffleEngine:
    """Raffle state machine: IDLE -> SPINNING -> REVEALED.

    A spin freezes the eligible pool, refreshes ``display_names`` with a
    small batch of resampled names on every tick, and after the last tick
    makes a separate final draw from the frozen pool. The displayed names
    have no bearing on the winner. REVEALED acts as idle for the next draw.
    """

    def __init__(
        self,
        tick_interval: float = RaffleDefaults.TICK_INTERVAL_MS / 1000.0,
        tick_count: int = RaffleDefaults.TICK_COUNT,
        display_batch: int = RaffleDefaults.DISPLAY_BATCH,
        default_prize_name: str = RaffleDefaults.PRIZE_NAME,
        rng: Optional[random.Random] = None,
        lock: Optional[threading.RLock] = None,
    ) -> None:
        self.tick_interval = tick_interval
        self.tick_count = tick_count
        self.display_batch = display_batch
        self.default_prize_name = default_prize_name
        self.lock = lock or threading.RLock()
        self._rng = rng or random.Random()

        self.state = SpinState.IDLE
        self.display_names: List[str] = []
        self.last_winner: Optional[RaffleWinner] = None
        self.prize_name = default_prize_name

        self._pool: List[Participant] = []
        self._record: Optional[RecordWinner] = None
        self._ticker: Optional[SpinTicker] = None
        self._spin_id = 0

    @property
    def spinning(self) -> bool:
        return self.state == SpinState.SPINNING

    def resolve_prize_name(self, prize_name: Optional[str]) -> str:
        prize_name = (prize_name or "").strip()
        return prize_name or self.default_prize_name

    def _pick(self, pool: Sequence[Participant]) -> Participant:
        return pool[self._rng.randrange(len(pool))]

    def _make_winner(self, pool: Sequence[Participant], prize_name: str) -> RaffleWinner:
        return RaffleWinner(
            participant=self._pick(pool),
            prize_name=prize_name,
            timestamp=datetime.now(),
        )

    def start_spin(
        self,
        participants: Sequence[Participant],
        winners: Iterable[RaffleWinner],
        record: RecordWinner,
        prize_name: Optional[str] = None,
        allow_duplicates: bool = False,
    ) -> SpinTicker:
        """Start the animated draw.

        Returns:
            The ticker driving the spin

        Raises:
            NoEligibleParticipantsError: If nobody is eligible (nothing changes)
            SpinInProgressError: If a spin is already running (nothing changes)
        """
        with self.lock:
            if self.spinning:
                raise SpinInProgressError(SPIN_IN_PROGRESS_MESSAGE)
            pool = eligible_pool(participants, winners, allow_duplicates)
            if not pool:
                raise NoEligibleParticipantsError(NO_ELIGIBLE_MESSAGE)

            self._spin_id += 1
            spin_id = self._spin_id
            self._pool = pool
            self._record = record
            self.prize_name = self.resolve_prize_name(prize_name)
            self.last_winner = None
            self.display_names = []
            self.state = SpinState.SPINNING

            self._ticker = SpinTicker(
                interval=self.tick_interval,
                ticks=self.tick_count,
                on_tick=lambda tick: self._tick(spin_id),
                on_complete=lambda: self._reveal(spin_id),
                name=f"raffle-spin-{spin_id}",
            )
            self._ticker.start()
            ticker = self._ticker

        logger.info(
            f"Spin #{spin_id} started for '{self.prize_name}' with {len(pool)} eligible participants"
        )
        return ticker

    def _tick(self, spin_id: int) -> None:
        with self.lock:
            if spin_id != self._spin_id or not self.spinning:
                return
            self.display_names = [self._pick(self._pool).name for _ in range(self.display_batch)]

    def _reveal(self, spin_id: int) -> None:
        with self.lock:
            if spin_id != self._spin_id or not self.spinning:
                return
            winner = self._make_winner(self._pool, self.prize_name)
            if self._record is not None:
                self._record(winner)
            self.last_winner = winner
            self.state = SpinState.REVEALED
            self._ticker = None
            self._pool = []
            self._record = None

        logger.info(
            f"Spin #{spin_id} revealed {winner.participant.name} ({winner.participant.id}) "
            f"for '{winner.prize_name}'"
        )

    def cancel(self) -> bool:
        """Stop a running spin without recording a winner.

        Returns:
            True if a spin was cancelled
        """
        with self.lock:
            if not self.spinning:
                return False
            if self._ticker is not None:
                self._ticker.cancel()
            self._spin_id += 1
            self._ticker = None
            self._pool = []
            self._record = None
            self.display_names = []
            self.state = SpinState.IDLE
        logger.info("Spin cancelled before reveal")
        return True

    def reset(self) -> None:
        """Return to IDLE, dropping any spin and the last revealed winner."""
        with self.lock:
            self.cancel()
            self.last_winner = None
            self.display_names = []
            self.state = SpinState.IDLE

    def wait(self, timeout: Optional[float] = None) -> bool:
        """Wait for the running spin to finish; True when none is running."""
        ticker = self._ticker
        if ticker is None:
            return True
        return ticker.join(timeout)

    def snapshot(self) -> dict:
        with self.lock:
            return {
                "state": self.state.value,
                "spinning": self.spinning,
                "prize_name": self.prize_name,
                "display_names": list(self.display_names),
                "winner": self.last_winner.to_dict() if self.last_winner else None,
            }
