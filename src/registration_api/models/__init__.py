"""Database models for the Registration API"""

from registration_api.models.registration import (
    Registration,
    RegistrationCreate,
    RegistrationRead,
    SessionMode,
)

__all__ = [
    "Registration",
    "RegistrationCreate",
    "RegistrationRead",
    "SessionMode",
]
