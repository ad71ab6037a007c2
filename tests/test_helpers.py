"""Tests for the independent helpers."""

import asyncio
import math
import string
import time
from datetime import date, datetime, timedelta, timezone

import pytest

from valuecheck.application import helpers
from valuecheck.application.helpers import (
    float_to_int,
    generate_random_number,
    generate_random_string,
    get_current_timestamp,
    int_to_float,
    sleep,
)
from valuecheck.domain.exceptions import ConfigurationError, ValidationError


@pytest.mark.asyncio
async def test_sleep_waits_at_least_the_requested_time():
    loop = asyncio.get_running_loop()
    start = loop.time()
    await sleep(20)
    assert loop.time() - start >= 0.019


@pytest.mark.asyncio
@pytest.mark.parametrize("milliseconds", [0, -5, 1.5, "10", None])
async def test_sleep_rejects_invalid_duration(milliseconds):
    with pytest.raises(ValidationError):
        await sleep(milliseconds)


@pytest.mark.asyncio
async def test_sleep_lenient_mode_uses_fallback(monkeypatch):
    waits = []

    async def fake_sleep(seconds):
        waits.append(seconds)

    monkeypatch.setattr(helpers.asyncio, "sleep", fake_sleep)
    monkeypatch.setattr(helpers.settings, "sleep_fallback_ms", 250)

    await sleep(-1, throw_on_failure=False)
    await sleep(40, throw_on_failure=False)
    assert waits == [0.25, 0.04]


def test_random_number_stays_in_closed_range():
    seen = {generate_random_number(-3, 3) for _ in range(500)}
    assert seen <= set(range(-3, 4))
    assert {-3, 3} <= seen


def test_random_number_adjacent_bounds():
    """Adjacent integers only ever yield one of the two bounds."""
    seen = {generate_random_number(7, 8) for _ in range(200)}
    assert seen == {7, 8}


@pytest.mark.parametrize("low, high", [(5, 5), (6, 5)])
def test_random_number_requires_min_below_max(low, high):
    with pytest.raises(ConfigurationError, match="min_value must be less than"):
        generate_random_number(low, high)
    assert generate_random_number(low, high, throw_on_failure=False) == 0


@pytest.mark.parametrize(
    "low, high", [(0, 2**31), (-(2**31) - 1, 0), (0.5, 3), ("1", 3)]
)
def test_random_number_bounds_must_be_32_bit_integers(low, high):
    with pytest.raises(ValidationError):
        generate_random_number(low, high)


def test_random_string_length_and_alphabet():
    value = generate_random_string(64)
    assert len(value) == 64
    assert set(value) <= set(string.ascii_letters + string.digits)


def test_random_string_character_classes():
    digits = generate_random_string(50, lowercase=False, uppercase=False)
    assert set(digits) <= set(string.digits)

    custom = generate_random_string(
        30, lowercase=False, uppercase=False, number=False, other_chars="xy"
    )
    assert set(custom) <= {"x", "y"}


def test_random_string_single_character_alphabet():
    value = generate_random_string(
        5, lowercase=False, uppercase=False, number=False, other_chars="z"
    )
    assert value == "zzzzz"


def test_random_string_empty_alphabet_is_configuration_error():
    with pytest.raises(ConfigurationError, match="no characters available"):
        generate_random_string(8, lowercase=False, uppercase=False, number=False)
    assert (
        generate_random_string(
            8, lowercase=False, uppercase=False, number=False, throw_on_failure=False
        )
        == ""
    )


@pytest.mark.parametrize(
    "kwargs",
    [
        {"length": 0},
        {"length": 3.5},
        {"length": 4, "lowercase": 1},
        {"length": 4, "other_chars": None},
    ],
)
def test_random_string_validates_arguments(kwargs):
    with pytest.raises(ValidationError):
        generate_random_string(**kwargs)


def test_current_timestamp_defaults_to_now():
    before = math.floor(time.time())
    assert before <= get_current_timestamp() <= before + 2


def test_current_timestamp_of_aware_datetime():
    moment = datetime(2024, 1, 1, 0, 0, 30, 900000, tzinfo=timezone.utc)
    assert get_current_timestamp(moment) == 1704067230


def test_current_timestamp_floors_before_epoch():
    moment = datetime(1970, 1, 1, tzinfo=timezone.utc) - timedelta(milliseconds=500)
    assert get_current_timestamp(moment) == -1


def test_current_timestamp_of_plain_date_is_local_midnight():
    expected = math.floor(datetime(2024, 3, 10).timestamp())
    assert get_current_timestamp(date(2024, 3, 10)) == expected


def test_current_timestamp_rejects_non_dates():
    with pytest.raises(ValidationError, match="not of type date"):
        get_current_timestamp("2024-01-01")
    assert get_current_timestamp(1704067200, throw_on_failure=False) == 0


def test_int_to_float():
    assert int_to_float(12345) == 123.45
    assert int_to_float(5, 1) == 0.5
    assert int_to_float(-250, 3) == -0.25


def test_float_to_int_floors():
    assert float_to_int(1.005, 2) == math.floor(1.005 * 100)
    assert float_to_int(12.349) == 1234
    assert float_to_int(-0.001) == -1


@pytest.mark.parametrize("value", [0.0, 1.23, 99.99, 123456.789, -42.5])
@pytest.mark.parametrize("precision", [1, 2, 4, 6])
def test_fixed_point_round_trip(value, precision):
    restored = int_to_float(float_to_int(value, precision), precision)
    assert abs(restored - value) <= 10**-precision + 1e-9


@pytest.mark.parametrize("precision", [0, 7, 2.5, "2"])
def test_precision_range(precision):
    with pytest.raises(ValidationError):
        int_to_float(100, precision)
    with pytest.raises(ValidationError):
        float_to_int(1.0, precision)
    assert int_to_float(100, precision, throw_on_failure=False) == 0
    assert float_to_int(1.0, precision, throw_on_failure=False) == 0


def test_fixed_point_value_validation():
    with pytest.raises(ValidationError):
        int_to_float(1.5)
    with pytest.raises(ValidationError):
        int_to_float(2**53)
    with pytest.raises(ValidationError):
        float_to_int(float("nan"))
    with pytest.raises(ValidationError, match="out of range"):
        float_to_int(1e308, 6)
