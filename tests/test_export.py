"""Tests for the grouping CSV export."""

import csv
import io
import random
from datetime import date

import pytest

from core.exceptions import EmptyExportError
from core.models import Group, Participant
from services.export import build_groups_csv, export_filename, iter_group_rows
from services.grouping import partition


def make_groups():
    return [
        Group(id="g-0", name="火箭隊", theme="衝衝衝", members=[
            Participant(id="p-1", name="王小明"),
            Participant(id="p-2", name="李大華"),
        ]),
        Group(id="g-1", name="第 2 組", members=[Participant(id="p-3", name='Ann "A", Lee')]),
    ]


def test_csv_layout():
    content = build_groups_csv(make_groups())

    assert content.startswith("\ufeff組名,組員姓名,組隊口號\n")
    lines = content.lstrip("\ufeff").split("\n")
    assert lines[1] == '"火箭隊","王小明","衝衝衝"'
    assert lines[2] == '"火箭隊","李大華","衝衝衝"'
    assert lines[3] == '"第 2 組","Ann ""A"", Lee",""'
    assert lines[4] == ""


def test_csv_is_readable_back():
    groups = partition([Participant(id=f"p-{i}", name=f"P{i}") for i in range(7)], 3, random.Random(2))
    rows = list(csv.reader(io.StringIO(build_groups_csv(groups).lstrip("\ufeff"))))

    assert rows[0] == ["組名", "組員姓名", "組隊口號"]
    assert len(rows) == 1 + 7
    assert sorted(r[1] for r in rows[1:]) == sorted(f"P{i}" for i in range(7))


def test_empty_groups_refused():
    with pytest.raises(EmptyExportError):
        build_groups_csv([])


def test_iter_group_rows_uses_empty_slogan():
    rows = list(iter_group_rows(make_groups()))
    assert rows[-1] == ("第 2 組", 'Ann "A", Lee', "")


def test_export_filename_uses_date():
    assert export_filename(date(2024, 3, 5)) == "分組結果_2024-03-05.csv"
