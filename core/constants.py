"""Application-wide constants and configuration values."""

from __future__ import annotations

from enum import Enum
from typing import Optional


# Import constants
class ImportDefaults:
    """List import configuration."""
    HEADER_TOKENS = frozenset({"name", "姓名"})
    DELIMITER = ","
    ALLOWED_EXTENSIONS = {".csv", ".txt"}
    MAX_FILE_SIZE = 10 * 1024 * 1024  # 10MB


# Raffle constants
class RaffleDefaults:
    """Raffle spin configuration."""
    PRIZE_NAME = "特獎 💰"
    TICK_INTERVAL_MS = 100
    TICK_COUNT = 30  # ~3 seconds
    DISPLAY_BATCH = 5


# Grouping constants
class GroupingDefaults:
    """Group partition configuration."""
    MIN_GROUPS = 2
    GROUP_COUNT = 2
    NAME_TEMPLATE = "第 {index} 組"


# Export constants
class ExportDefaults:
    """Grouping export configuration."""
    BOM = "\ufeff"
    HEADER = ("組名", "組員姓名", "組隊口號")
    FILENAME_TEMPLATE = "分組結果_{day}.csv"
    MIMETYPE = "text/csv; charset=utf-8"


# Theme generation constants
class ThemeDefaults:
    """External text-generation service defaults."""
    MODEL = "gemini-3-flash-preview"
    BASE_URL = "https://generativelanguage.googleapis.com/v1beta"
    TIMEOUT = 30  # seconds


class SpinState(str, Enum):
    """Raffle spin lifecycle."""
    IDLE = "idle"
    SPINNING = "spinning"
    REVEALED = "revealed"


class AppTab(str, Enum):
    """Navigation tabs of the view shell."""
    INPUT = "input"
    RAFFLE = "raffle"
    GROUPING = "grouping"

    @property
    def label(self) -> str:
        return _TAB_LABELS[self][0]

    @property
    def icon(self) -> str:
        return _TAB_LABELS[self][1]

    @property
    def endpoint(self) -> str:
        return _TAB_LABELS[self][2]

    @property
    def blueprint(self) -> str:
        return self.endpoint.split(".", 1)[0]

    @classmethod
    def from_blueprint(cls, name: Optional[str]) -> Optional["AppTab"]:
        for tab in cls:
            if tab.blueprint == name:
                return tab
        return None


_TAB_LABELS = {
    AppTab.INPUT: ("名單管理", "fa-list-check", "participants.index"),
    AppTab.RAFFLE: ("獎品抽籤", "fa-gift", "raffle.index"),
    AppTab.GROUPING: ("自動分組", "fa-layer-group", "grouping.index"),
}
