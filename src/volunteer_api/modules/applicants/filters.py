"""
Applicant list filters.

Turns the optional dashboard query parameters into one SQL predicate:

- ``search``: case-insensitive substring of full name OR email
- ``interest``: the tag is one of the applicant's interests
- ``reviewed``: exact match on the review flag

Provided criteria are combined with AND; absent or blank ones add nothing.
"""

from dataclasses import dataclass

from sqlalchemy import ColumnElement, and_, or_, true

from volunteer_api.core.errors import FieldError, ValidationFailedError
from volunteer_api.modules.applicants.models import Applicant, ApplicantInterest, Interest

_TRUE_VALUES = {"true", "1", "yes"}
_FALSE_VALUES = {"false", "0", "no"}


@dataclass(frozen=True)
class ApplicantFilter:
    search: str | None = None
    interest: Interest | None = None
    reviewed: bool | None = None

    @classmethod
    def from_query(
        cls,
        search: str | None = None,
        interest: str | None = None,
        reviewed: str | None = None,
    ) -> "ApplicantFilter":
        """
        Parse raw query-string values.

        Blank values count as absent, since HTML forms submit empty fields.

        Raises:
            ValidationFailedError: With one entry per invalid parameter
        """
        errors: list[FieldError] = []

        search = search.strip() if search else None

        parsed_interest = None
        if interest and interest.strip():
            parsed_interest = _parse_interest(interest.strip())
            if parsed_interest is None:
                allowed = ", ".join(member.value for member in Interest)
                errors.append(FieldError("interest", f"Interest must be one of: {allowed}"))

        parsed_reviewed = None
        if reviewed and reviewed.strip():
            token = reviewed.strip().lower()
            if token in _TRUE_VALUES:
                parsed_reviewed = True
            elif token in _FALSE_VALUES:
                parsed_reviewed = False
            else:
                errors.append(FieldError("reviewed", "Reviewed must be 'true' or 'false'"))

        if errors:
            raise ValidationFailedError(errors, message="Invalid filter parameters")

        return cls(search=search or None, interest=parsed_interest, reviewed=parsed_reviewed)

    def conditions(self) -> list[ColumnElement[bool]]:
        """One SQL condition per provided criterion."""
        conditions: list[ColumnElement[bool]] = []

        if self.search:
            # autoescape makes % and _ in the term match literally
            conditions.append(
                or_(
                    Applicant.full_name.icontains(self.search, autoescape=True),
                    Applicant.email.icontains(self.search, autoescape=True),
                )
            )

        if self.interest is not None:
            conditions.append(
                Applicant.interest_links.any(ApplicantInterest.interest == self.interest)
            )

        if self.reviewed is not None:
            conditions.append(Applicant.reviewed.is_(self.reviewed))

        return conditions

    def predicate(self) -> ColumnElement[bool]:
        """All conditions ANDed together; always true when no criteria are set."""
        conditions = self.conditions()
        if not conditions:
            return true()
        return and_(*conditions)


def _parse_interest(value: str) -> Interest | None:
    lowered = value.lower()
    for member in Interest:
        if member.value.lower() == lowered:
            return member
    return None
