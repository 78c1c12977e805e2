"""Pytest configuration and shared fixtures."""

import pytest

from tests.fixtures.sample_data import (
    sample_criteria,
    sample_hotel_row,
    sample_record,
    sample_records,
    sample_tour_row,
)


@pytest.fixture
def record():
    """Single sample record."""
    return sample_record()


@pytest.fixture
def records():
    """List of 10 sample records."""
    return sample_records(10)


@pytest.fixture
def criteria():
    """Default filter criteria."""
    return sample_criteria()


@pytest.fixture
def tour_row():
    """Raw Supabase tours row."""
    return sample_tour_row()


@pytest.fixture
def hotel_row():
    """Raw Supabase hotels row."""
    return sample_hotel_row()
