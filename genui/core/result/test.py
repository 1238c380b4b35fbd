"""Tests for result values."""

import pytest

from .lib import Failure, Success


class TestOutcome:
    """Tests for Success/Failure."""

    @pytest.mark.unit
    def test_success_carries_value(self):
        outcome = Success(3)
        assert outcome.value == 3

    @pytest.mark.unit
    def test_failure_defaults(self):
        failure = Failure("boom")
        assert failure.reason == "boom"
        assert failure.kind == "error"

    @pytest.mark.unit
    def test_ok_flags(self):
        assert Success(None).ok is True
        assert Failure("x").ok is False

    @pytest.mark.unit
    def test_frozen(self):
        with pytest.raises(AttributeError):
            Failure("x").kind = "auth"
