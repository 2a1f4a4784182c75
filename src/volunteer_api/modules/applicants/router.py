"""
Applicants Router

Endpoints:
- POST /applicants - Submit a volunteer application (public)
- GET /applicants - List applications with optional filters (admin)
- GET /applicants/{id} - Get one application (admin)
- PUT /applicants/{id}/review - Toggle the reviewed flag (admin)

Security:
- Submission is public but rate limited per client IP
- Every read and the review toggle require a valid admin bearer token
- Input validation via Pydantic schemas; all field errors returned together
"""

import logging
from uuid import UUID

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.ext.asyncio import AsyncSession

from volunteer_api.core.auth import AuthenticatedAdmin, get_current_admin
from volunteer_api.core.database import get_db
from volunteer_api.core.rate_limit import RateLimiter
from volunteer_api.modules.applicants import service
from volunteer_api.modules.applicants.filters import ApplicantFilter
from volunteer_api.modules.applicants.schemas import (
    ApplicantCreate,
    ApplicantListResponse,
    ApplicantResponse,
    ApplicantSubmissionResponse,
    ReviewStatusResponse,
)

logger = logging.getLogger(__name__)

router = APIRouter()

RATE_LIMIT_SUBMIT = RateLimiter("applicant_submit", limit=10, window_seconds=60)


def get_applicant_filter(
    search: str | None = Query(
        None,
        description="Case-insensitive substring of full name or email",
    ),
    interest: str | None = Query(
        None,
        description="Only applicants who selected this interest",
    ),
    reviewed: str | None = Query(
        None,
        description="Filter by review status (true/false)",
    ),
) -> ApplicantFilter:
    """Parse the dashboard filter query parameters."""
    return ApplicantFilter.from_query(search=search, interest=interest, reviewed=reviewed)


@router.post(
    "",
    response_model=ApplicantSubmissionResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Submit Volunteer Application",
    dependencies=[Depends(RATE_LIMIT_SUBMIT)],
    responses={
        400: {"description": "Validation failed; every field error is listed"},
        409: {"description": "An application with this email already exists"},
        429: {"description": "Too many submissions from this client"},
    },
)
async def submit_application(
    data: ApplicantCreate,
    db: AsyncSession = Depends(get_db),
) -> ApplicantSubmissionResponse:
    """Submit a new volunteer application. The record starts as not reviewed."""
    applicant = await service.submit_application(db, data)
    return ApplicantSubmissionResponse.model_validate(applicant)


@router.get(
    "",
    response_model=ApplicantListResponse,
    summary="List Applicants",
    description="""
List volunteer applications, newest first.

**Filters** (all optional, combined with AND):
- `search`: substring of full name or email, case-insensitive
- `interest`: one of Education, Tech, Outreach, Healthcare, Environment, Community Service
- `reviewed`: `true` or `false`

**Access:** Admin only
""",
    responses={
        400: {"description": "Invalid filter value"},
        401: {"description": "Unauthorized - invalid or missing token"},
    },
)
async def list_applicants(
    admin: AuthenticatedAdmin = Depends(get_current_admin),
    filters: ApplicantFilter = Depends(get_applicant_filter),
    db: AsyncSession = Depends(get_db),
) -> ApplicantListResponse:
    applicants = await service.list_applicants(db, filters)

    return ApplicantListResponse(
        count=len(applicants),
        applicants=[ApplicantResponse.model_validate(applicant) for applicant in applicants],
    )


@router.get(
    "/{applicant_id}",
    response_model=ApplicantResponse,
    summary="Get Applicant",
    responses={
        400: {"description": "Malformed applicant id"},
        401: {"description": "Unauthorized - invalid or missing token"},
        404: {"description": "Applicant not found"},
    },
)
async def get_applicant(
    applicant_id: UUID,
    db: AsyncSession = Depends(get_db),
    admin: AuthenticatedAdmin = Depends(get_current_admin),
) -> ApplicantResponse:
    applicant = await service.get_applicant(db, applicant_id)

    logger.info(f"Admin {admin.id} viewed applicant {applicant_id}")

    return ApplicantResponse.model_validate(applicant)


@router.put(
    "/{applicant_id}/review",
    response_model=ReviewStatusResponse,
    summary="Toggle Review Status",
    responses={
        400: {"description": "Malformed applicant id"},
        401: {"description": "Unauthorized - invalid or missing token"},
        404: {"description": "Applicant not found"},
    },
)
async def toggle_review_status(
    applicant_id: UUID,
    db: AsyncSession = Depends(get_db),
    admin: AuthenticatedAdmin = Depends(get_current_admin),
) -> ReviewStatusResponse:
    """Flip the applicant between reviewed and unreviewed."""
    applicant = await service.toggle_review_status(db, applicant_id, admin_id=admin.id)

    response = ApplicantResponse.model_validate(applicant)
    return ReviewStatusResponse(
        **response.model_dump(),
        message=f"Applicant marked as {'reviewed' if applicant.reviewed else 'unreviewed'}",
    )
