"""Tests for the shared application state."""

import pytest

from core import SpinState
from core.exceptions import FileValidationError, InvalidGroupCountError, NoEligibleParticipantsError
from services.theme_generator import GroupTheme, ThemeSuccess


def spin_and_wait(state, **kwargs):
    state.start_spin(**kwargs)
    assert state.raffle.wait(timeout=2)


def test_save_text_replaces_pool(state):
    participants = state.save_text("Alice\n\n Bob \n")

    assert [p.name for p in participants] == ["Alice", "Bob"]
    assert state.draft_text == "Alice\nBob"


def test_replacing_pool_clears_results(state):
    state.save_text("A\nB\nC\nD")
    spin_and_wait(state)
    state.generate_groups(2)
    assert state.winners and state.groups

    state.save_text("E\nF")

    assert state.winners == []
    assert state.groups == []
    assert state.raffle.state == SpinState.IDLE
    assert state.raffle.last_winner is None


def test_replacing_pool_cancels_running_spin(state):
    state.raffle.tick_interval = 5
    state.save_text("A\nB")
    ticker = state.start_spin()
    assert state.raffle.spinning

    state.save_text("C\nD")

    assert ticker.join(timeout=2)
    assert state.raffle.state == SpinState.IDLE
    assert state.winners == []


def test_load_upload_only_fills_draft(state):
    state.save_text("Existing")
    names = state.load_upload("name\nAlice\nBob\nBob\n".encode("utf-8"))

    assert names == ["Alice", "Bob", "Bob"]
    assert state.draft_text == "Alice\nBob\nBob"
    assert [p.name for p in state.participants] == ["Existing"]


def test_load_upload_rejects_bad_encoding(state):
    with pytest.raises(FileValidationError):
        state.load_upload("王小明".encode("big5"))


def test_load_sample(state):
    state.load_sample()
    assert len(state.draft_text.split("\n")) == 15
    assert state.participants == ()


def test_remove_duplicates(state):
    state.save_text("Alice\nBob\nBob")
    assert state.duplicates == {"Bob": 2}

    removed = state.remove_duplicates()

    assert removed == 1
    assert [p.name for p in state.participants] == ["Alice", "Bob"]
    assert state.duplicates == {}
    assert state.remove_duplicates() == 0


def test_spin_records_winner_history_newest_first(state):
    state.save_text("X\nY")

    spin_and_wait(state, prize_name="頭獎")
    spin_and_wait(state, prize_name="二獎")

    assert [w.prize_name for w in state.winners] == ["二獎", "頭獎"]
    assert state.eligible_participants() == []

    with pytest.raises(NoEligibleParticipantsError):
        state.start_spin()


def test_failed_spin_keeps_settings(state):
    state.save_text("X")
    spin_and_wait(state, prize_name="頭獎")

    with pytest.raises(NoEligibleParticipantsError):
        state.start_spin(prize_name="二獎")

    assert state.raffle_settings.prize_name == "頭獎"


def test_allow_duplicates_setting_is_remembered(state):
    state.save_text("X")
    spin_and_wait(state, allow_duplicates=True)
    spin_and_wait(state)

    assert len(state.winners) == 2
    assert state.raffle_settings.allow_duplicates is True


def test_raffle_snapshot(state):
    state.save_text("X\nY\nZ")
    spin_and_wait(state, prize_name="頭獎")

    snapshot = state.raffle_snapshot()

    assert snapshot["state"] == "revealed"
    assert snapshot["total"] == 3
    assert snapshot["remaining"] == 2
    assert snapshot["winner"]["prize_name"] == "頭獎"
    assert len(snapshot["history"]) == 1


def test_generate_groups_stores_result(state):
    state.save_text("A\nB\nC\nD\nE")

    outcome = state.generate_groups(2)

    assert state.groups is outcome.groups
    assert sorted(g.size for g in state.groups) == [2, 3]
    assert state.grouping_settings.group_count == 2


def test_generate_groups_with_themes(state, theme_generator):
    theme_generator.result = ThemeSuccess((GroupTheme("火箭隊", "衝衝衝"), GroupTheme("閃電隊", "快快快")))
    state.save_text("A\nB\nC")

    state.generate_groups(2, use_ai_themes=True)

    assert theme_generator.calls == [2]
    assert [g.name for g in state.groups] == ["火箭隊", "閃電隊"]


def test_generate_groups_discarded_when_pool_changes(state, theme_generator):
    state.save_text("A\nB\nC")

    class ReplacingGenerator:
        def generate(self, count):
            state.save_text("D\nE")
            return theme_generator.generate(count)

    state.grouping.theme_generator = ReplacingGenerator()
    outcome = state.generate_groups(2, use_ai_themes=True)

    assert outcome.groups == []
    assert state.groups == []
    assert [p.name for p in state.participants] == ["D", "E"]


def test_generate_groups_invalid_count(state):
    state.save_text("A\nB")
    with pytest.raises(InvalidGroupCountError):
        state.generate_groups(3)
    assert state.groups == []
