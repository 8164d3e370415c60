"""Tests for shared numeric and parsing helpers."""

import math

import pytest

from vibecore.utils import clamp, hour_of_epoch_ms, mean, parse_duration_minutes, parse_published_at, variance


@pytest.mark.parametrize(
    "text,expected",
    [
        ("3:00", 3.0),
        ("4:30", 4.5),
        ("1:05:00", 65.0),
        ("0:00:30", 0.5),
    ],
)
def test_parse_duration_valid(text, expected):
    assert parse_duration_minutes(text) == pytest.approx(expected)


@pytest.mark.parametrize("text", ["", None, "abc", "12", "1:2:3:4", "-3:00", "x:10", "nan:00"])
def test_parse_duration_malformed_falls_back(text):
    assert parse_duration_minutes(text) == 5.0
    assert parse_duration_minutes(text, default=7.5) == 7.5


def test_variance_small_sets_mean_maximal_uncertainty():
    assert variance([]) == 1.0
    assert variance([0.4]) == 1.0
    assert variance([0.0, 1.0]) == pytest.approx(0.25)


def test_mean_and_clamp():
    assert mean([], default=0.3) == 0.3
    assert mean([1.0, 0.0]) == 0.5
    assert clamp(1.7) == 1.0
    assert clamp(-0.2) == 0.0
    assert clamp(math.nan) == 0.0


def test_hour_of_epoch_ms_respects_timezone():
    # 2024-05-01T08:00:00Z
    stamp = 1714550400000
    assert hour_of_epoch_ms(stamp, "UTC") == 8
    assert hour_of_epoch_ms(stamp, "Asia/Tokyo") == 17


def test_parse_published_at():
    assert parse_published_at("2024-04-01T10:00:00Z").tzinfo is not None
    assert parse_published_at("2024-04-01").year == 2024
    assert parse_published_at("yesterday") is None
    assert parse_published_at("") is None


def test_hour_of_out_of_range_timestamp_is_none():
    assert hour_of_epoch_ms(10**18) is None
    assert hour_of_epoch_ms(-(10**18), "Asia/Tokyo") is None
