"""Service layer for the Registration API"""

from registration_api.services.query_builder import (
    FilterRequest,
    SearchMode,
    build_filter_conditions,
)
from registration_api.services.registration_service import (
    FilterResult,
    RegistrationService,
)

__all__ = [
    "FilterRequest",
    "FilterResult",
    "RegistrationService",
    "SearchMode",
    "build_filter_conditions",
]
