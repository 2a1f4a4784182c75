"""Volunteer application intake API with an admin review dashboard."""

__version__ = "1.0.0"
