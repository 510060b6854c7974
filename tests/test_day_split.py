import pytest

from day_split import split_cycling_days


@pytest.mark.parametrize("total", [0.1, 1, 30, 59.9, 60, 61, 100, 119.9, 120])
def test_split_within_caps(total):
    day1, day2 = split_cycling_days(total)
    assert 0 < day1 <= 60
    assert 0 < day2 <= 60
    assert day1 + day2 == pytest.approx(min(total, 120))


def test_split_is_even():
    assert split_cycling_days(112) == [56, 56]
    assert split_cycling_days(45) == [22.5, 22.5]


def test_split_infeasible():
    assert split_cycling_days(0) is None
    assert split_cycling_days(-5) is None


def test_split_truncates_above_two_day_cap():
    # 140 km rapporteras som 2 x 60 km, resten tappas
    assert split_cycling_days(140) == [60, 60]
    assert sum(split_cycling_days(130)) == 120


def test_split_custom_cap():
    assert split_cycling_days(50, max_day_km=20) == [20, 20]
