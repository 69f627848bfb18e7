"""Services package."""

from .ticker import SpinTicker
from .raffle import RaffleEngine, eligible_pool
from .theme_generator import GeminiThemeGenerator, GroupTheme, ThemeSuccess, ThemeFailure, ThemeResult
from .grouping import GroupingEngine, GroupingOutcome, partition, apply_themes
from .export import build_groups_csv, export_filename
from .app_state import AppState, build_app_state

__all__ = [
    "SpinTicker",
    "RaffleEngine",
    "eligible_pool",
    "GeminiThemeGenerator",
    "GroupTheme",
    "ThemeSuccess",
    "ThemeFailure",
    "ThemeResult",
    "GroupingEngine",
    "GroupingOutcome",
    "partition",
    "apply_themes",
    "build_groups_csv",
    "export_filename",
    "AppState",
    "build_app_state",
]
