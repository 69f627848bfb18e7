"""Pytest configuration and fixtures."""

import random
from typing import List, Optional

import pytest

from config import Config
from core.models import Participant
from services.app_state import AppState, build_app_state
from services.importer import build_participants
from services.theme_generator import ThemeFailure, ThemeResult
from web.app import create_app


def make_config(**overrides) -> Config:
    """Deterministic configuration independent of the environment."""
    values = dict(
        environment="testing",
        debug=False,
        web_host="127.0.0.1",
        web_port=5000,
        secret_key="test_secret_key",
        max_file_size=1024 * 1024,
        log_folder="logs",
        log_level="INFO",
        gemini_api_key=None,
        gemini_model="gemini-test",
        gemini_base_url="https://generativelanguage.example/v1beta",
        ai_timeout=5,
        default_prize_name="特獎 💰",
        spin_tick_ms=0,
        spin_ticks=3,
        spin_display_batch=5,
    )
    values.update(overrides)
    return Config(**values)


class FakeThemeGenerator:
    """Theme generator returning a canned result and recording calls."""

    def __init__(self, result: Optional[ThemeResult] = None) -> None:
        self.result = result or ThemeFailure("not configured in test")
        self.calls: List[int] = []

    def generate(self, count: int) -> ThemeResult:
        self.calls.append(count)
        return self.result


@pytest.fixture
def config() -> Config:
    return make_config()


@pytest.fixture
def rng() -> random.Random:
    return random.Random(1234)


@pytest.fixture
def theme_generator() -> FakeThemeGenerator:
    return FakeThemeGenerator()


@pytest.fixture
def participants() -> List[Participant]:
    return build_participants(["A", "B", "C", "D", "E"])


@pytest.fixture
def state(config, theme_generator, rng) -> AppState:
    app_state = build_app_state(config, theme_generator=theme_generator, rng=rng)
    yield app_state
    app_state.shutdown()


@pytest.fixture
def app(config, state):
    app = create_app(config, testing=True, state=state)
    with app.app_context():
        yield app


@pytest.fixture
def client(app):
    return app.test_client()


@pytest.fixture
def make_theme_generator():
    return FakeThemeGenerator
