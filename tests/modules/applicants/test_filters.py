"""
Unit tests for the applicant list filter.
"""

import pytest
from sqlalchemy.sql.elements import True_

from volunteer_api.core.errors import ValidationFailedError
from volunteer_api.modules.applicants.filters import ApplicantFilter
from volunteer_api.modules.applicants.models import Interest


class TestFromQuery:
    """Tests for parsing raw query parameters."""

    def test_no_parameters(self):
        filters = ApplicantFilter.from_query()
        assert filters == ApplicantFilter()
        assert filters.conditions() == []

    def test_blank_values_are_absent(self):
        filters = ApplicantFilter.from_query(search="   ", interest="", reviewed=" ")
        assert filters == ApplicantFilter()

    def test_search_is_trimmed(self):
        assert ApplicantFilter.from_query(search="  jane ").search == "jane"

    @pytest.mark.parametrize("raw", ["Tech", "tech", "TECH"])
    def test_interest_is_case_insensitive(self, raw):
        assert ApplicantFilter.from_query(interest=raw).interest == Interest.TECH

    def test_interest_with_space(self):
        filters = ApplicantFilter.from_query(interest="community service")
        assert filters.interest == Interest.COMMUNITY_SERVICE

    @pytest.mark.parametrize(
        ("raw", "expected"),
        [("true", True), ("TRUE", True), ("1", True), ("false", False), ("0", False)],
    )
    def test_reviewed_values(self, raw, expected):
        assert ApplicantFilter.from_query(reviewed=raw).reviewed is expected

    def test_all_invalid_parameters_reported_together(self):
        with pytest.raises(ValidationFailedError) as exc_info:
            ApplicantFilter.from_query(search="jane", interest="Cooking", reviewed="maybe")

        fields = [error.field for error in exc_info.value.errors]
        assert fields == ["interest", "reviewed"]
        assert exc_info.value.status_code == 400

    def test_long_search_is_accepted(self):
        term = "x" * 300
        assert ApplicantFilter.from_query(search=term).search == term


class TestConditions:
    """Tests for SQL predicate construction."""

    def test_one_condition_per_criterion(self):
        filters = ApplicantFilter(search="jane", interest=Interest.TECH, reviewed=False)
        assert len(filters.conditions()) == 3

    def test_search_matches_name_or_email(self):
        sql = str(ApplicantFilter(search="jane").predicate())
        assert "full_name" in sql
        assert "email" in sql
        assert " OR " in sql

    def test_interest_uses_exists(self):
        sql = str(ApplicantFilter(interest=Interest.HEALTHCARE).predicate())
        assert "EXISTS" in sql
        assert "applicant_interests" in sql

    def test_empty_filter_is_always_true(self):
        assert isinstance(ApplicantFilter().predicate(), True_)
