"""Admin authentication module."""

from volunteer_api.modules.auth.router import router
from volunteer_api.modules.auth.schemas import AuthResponse, LoginRequest, RegisterRequest

__all__ = ["router", "LoginRequest", "RegisterRequest", "AuthResponse"]
