"""
Applicants Module

Volunteer application intake and the admin review dashboard.

API Endpoints:
- POST /applicants - Submit an application (public)
- GET /applicants - List with search / interest / reviewed filters (admin)
- GET /applicants/{id} - Application detail (admin)
- PUT /applicants/{id}/review - Toggle reviewed flag (admin)
"""

from .router import router

__all__ = ["router"]
