"""Tests for Japanese number readings."""

import pytest

from soroban.reader import read_number


def test_zero():
    assert read_number(0) == "ぜろ"


@pytest.mark.parametrize("n,expected", [
    (1, "いち"),
    (4, "よん"),
    (7, "なな"),
    (9, "きゅう"),
    (10, "じゅう"),
    (11, "じゅういち"),
    (40, "よんじゅう"),
    (99, "きゅうじゅうきゅう"),
    (100, "ひゃく"),
    (300, "さんびゃく"),
    (600, "ろっぴゃく"),
    (800, "はっぴゃく"),
    (1000, "せん"),
    (3000, "さんぜん"),
    (8000, "はっせん"),
    (10000, "いちまん"),
    (10001, "いちまんいち"),
    (12345, "いちまんにせんさんびゃくよんじゅうご"),
    (99999, "きゅうまんきゅうせんきゅうひゃくきゅうじゅうきゅう"),
    (1000000, "ひゃくまん"),
    (100000000, "いちおく"),
    (123456789, "いちおくにせんさんびゃくよんじゅうごまんろくせんななひゃくはちじゅうきゅう"),
])
def test_known_readings(n, expected):
    assert read_number(n) == expected


def test_five_digit_range_is_non_empty_and_neighbours_differ():
    prev = read_number(0)
    for n in range(1, 100000):
        cur = read_number(n)
        assert cur
        assert cur != prev
        prev = cur


def test_32bit_values_are_readable():
    assert read_number(2**32 - 1).startswith("よんじゅうにおく")


def test_negative_is_rejected():
    with pytest.raises(ValueError):
        read_number(-1)
