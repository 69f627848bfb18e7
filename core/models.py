"""In-memory data model shared by the services and the web layer."""

from __future__ import annotations

import uuid
from dataclasses import dataclass, field
from datetime import datetime
from typing import List, Optional


def new_participant_id() -> str:
    return f"p-{uuid.uuid4().hex}"


def new_group_id(index: int) -> str:
    return f"group-{uuid.uuid4().hex[:12]}-{index}"


@dataclass(frozen=True, slots=True)
class Participant:
    id: str
    name: str
    department: Optional[str] = None


@dataclass(slots=True)
class Group:
    id: str
    name: str
    theme: Optional[str] = None
    members: List[Participant] = field(default_factory=list)

    @property
    def size(self) -> int:
        return len(self.members)


@dataclass(frozen=True, slots=True)
class RaffleWinner:
    participant: Participant
    prize_name: str
    timestamp: datetime

    def to_dict(self) -> dict:
        return {
            "participant_id": self.participant.id,
            "name": self.participant.name,
            "prize_name": self.prize_name,
            "timestamp": self.timestamp.isoformat(timespec="seconds"),
            "time": self.timestamp.strftime("%H:%M"),
        }
