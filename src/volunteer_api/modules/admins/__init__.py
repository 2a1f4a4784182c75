"""
Admins module - admin accounts (credential store).
"""

from volunteer_api.modules.admins.models import AdminAccount
from volunteer_api.modules.admins.repository import AdminRepository, normalize_email

__all__ = ["AdminAccount", "AdminRepository", "normalize_email"]
