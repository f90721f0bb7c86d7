"""
Unit tests for the age eligibility rules.

Boundaries: 11 (below minimum), 12 (minor), 17 (minor), 18 (adult),
100 (adult), 101 (implausible).
"""

from datetime import date

import pytest

from festival.services.eligibility import (
    AgeEligibilityEvaluator,
    AgeStatus,
    calculate_age,
    evaluate_age,
    parse_birth_date,
)

AS_OF = date(2025, 10, 15)


@pytest.fixture
def evaluator():
    return AgeEligibilityEvaluator()


class TestCalculateAge:
    def test_birthday_already_passed(self):
        assert calculate_age(date(2000, 1, 1), AS_OF) == 25

    def test_birthday_today(self):
        assert calculate_age(date(2000, 10, 15), AS_OF) == 25

    def test_birthday_tomorrow(self):
        assert calculate_age(date(2000, 10, 16), AS_OF) == 24


class TestParseBirthDate:
    def test_iso_format(self):
        assert parse_birth_date("2010-05-01") == date(2010, 5, 1)

    def test_brazilian_format(self):
        assert parse_birth_date("01/05/2010") == date(2010, 5, 1)

    @pytest.mark.parametrize("value", [None, "", "   "])
    def test_empty(self, value):
        assert parse_birth_date(value) is None

    def test_garbage_raises(self):
        with pytest.raises(ValueError):
            parse_birth_date("ontem")


class TestAgeEligibilityEvaluator:
    """Tests for AgeEligibilityEvaluator.evaluate()."""

    @pytest.mark.parametrize(
        "birth_date, age, status, is_valid, guardian",
        [
            ("2014-10-16", 10, AgeStatus.BELOW_MINIMUM, False, False),
            ("2013-10-16", 11, AgeStatus.BELOW_MINIMUM, False, False),
            ("2013-10-15", 12, AgeStatus.GUARDIAN_REQUIRED, True, True),
            ("2008-10-15", 17, AgeStatus.GUARDIAN_REQUIRED, True, True),
            ("2007-10-15", 18, AgeStatus.ELIGIBLE, True, False),
            ("1925-10-15", 100, AgeStatus.ELIGIBLE, True, False),
            ("1924-10-15", 101, AgeStatus.IMPLAUSIBLE, False, False),
        ],
    )
    def test_boundaries(self, evaluator, birth_date, age, status, is_valid, guardian):
        result = evaluator.evaluate(birth_date, as_of=AS_OF)

        assert result.age == age
        assert result.status == status
        assert result.is_valid is is_valid
        assert result.needs_guardian_authorization is guardian

    def test_minor_message_mentions_guardian(self, evaluator):
        result = evaluator.evaluate("2010-01-01", as_of=AS_OF)
        assert "responsável legal" in result.message

    def test_below_minimum_message(self, evaluator):
        result = evaluator.evaluate("2020-01-01", as_of=AS_OF)
        assert "12 anos" in result.message

    def test_future_birth_date_is_below_minimum(self, evaluator):
        result = evaluator.evaluate("2030-01-01", as_of=AS_OF)
        assert result.status == AgeStatus.BELOW_MINIMUM
        assert not result.is_valid

    @pytest.mark.parametrize("value", [None, ""])
    def test_empty_is_neutral(self, evaluator, value):
        result = evaluator.evaluate(value, as_of=AS_OF)

        assert result.status == AgeStatus.EMPTY
        assert result.is_valid is True
        assert result.age == 0
        assert result.message == ""

    def test_unparseable_is_invalid(self, evaluator):
        result = evaluator.evaluate("31/02/2000", as_of=AS_OF)

        assert result.status == AgeStatus.INVALID_DATE
        assert result.is_valid is False

    def test_accepts_date_objects(self, evaluator):
        result = evaluator.evaluate(date(1990, 1, 15), as_of=AS_OF)
        assert result.status == AgeStatus.ELIGIBLE

    def test_to_dict_serializes_status(self):
        data = evaluate_age("2010-01-01", as_of=AS_OF).to_dict()
        assert data["status"] == "guardian_required"
        assert data["needs_guardian_authorization"] is True
        assert data["age"] == 15
