"""
Property-based tests for the roster edit window.
"""
import pytest
from hypothesis import given, strategies as st, settings
from calendar import monthrange
from datetime import datetime, timedelta

from rosterdesk.services.edit_window import get_edit_deadline, is_edit_window_open


years = st.integers(min_value=2000, max_value=2100)
months = st.integers(min_value=1, max_value=12)
cutoff_days = st.integers(min_value=-5, max_value=40)


@pytest.mark.property
@settings(max_examples=200)
@given(year=years, month=months, cutoff_day=cutoff_days, use_next_month=st.booleans())
def test_deadline_falls_on_valid_day_of_target_month(year, month, cutoff_day, use_next_month):
    """The deadline is a real calendar day of the roster month or the month after."""
    deadline = get_edit_deadline(year, month, cutoff_day, use_next_month)

    if use_next_month:
        expected = (year + 1, 1) if month == 12 else (year, month + 1)
    else:
        expected = (year, month)
    assert (deadline.year, deadline.month) == expected
    assert 1 <= deadline.day <= monthrange(deadline.year, deadline.month)[1]
    assert deadline.day == min(max(cutoff_day, 1), 31, monthrange(*expected)[1])
    assert (deadline.hour, deadline.minute, deadline.second) == (23, 59, 59)


@pytest.mark.property
@settings(max_examples=200)
@given(year=years, month=months, cutoff_day=cutoff_days, use_next_month=st.booleans())
def test_window_open_exactly_until_deadline(year, month, cutoff_day, use_next_month):
    deadline = get_edit_deadline(year, month, cutoff_day, use_next_month)

    assert is_edit_window_open(year, month, cutoff_day, use_next_month, now=deadline)
    assert not is_edit_window_open(
        year, month, cutoff_day, use_next_month, now=deadline + timedelta(milliseconds=1)
    )


@pytest.mark.property
@settings(max_examples=100)
@given(year=years, month=months, cutoff_day=st.integers(min_value=1, max_value=31))
def test_next_month_deadline_is_later(year, month, cutoff_day):
    same = get_edit_deadline(year, month, cutoff_day, False)
    following = get_edit_deadline(year, month, cutoff_day, True)

    assert following > same
    assert isinstance(following, datetime)
