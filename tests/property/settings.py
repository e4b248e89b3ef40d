# tests/property/settings.py
"""Standardized Hypothesis settings profiles for property tests.

Provides consistent test intensity across all property test modules.
Import these instead of using inline @settings(max_examples=...).

Usage:
    from tests.property.settings import STANDARD_SETTINGS

    @given(record=records())
    @STANDARD_SETTINGS
    def test_something(record):
        ...

Tiers:
- DETERMINISM_SETTINGS: 500 examples - same input, same field set
- STANDARD_SETTINGS: 100 examples - Regular property tests
"""

from hypothesis import settings

# Resolution must be a pure function of its inputs
DETERMINISM_SETTINGS = settings(max_examples=500)

# Standard property tests - good balance of coverage and speed
STANDARD_SETTINGS = settings(max_examples=100)
