"""Registration service for creating, listing, filtering and removing records"""

import logging
import uuid
from dataclasses import dataclass, field
from typing import Any, Optional

from sqlalchemy import func
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlmodel import Session, col, select

from registration_api.errors import (
    ConflictError,
    InternalError,
    InvalidArgumentError,
    NotFoundError,
)
from registration_api.models.registration import (
    DEFAULT_SESSION,
    Registration,
    RegistrationCreate,
    RegistrationRead,
    SessionMode,
)
from registration_api.services.export_service import build_workbook
from registration_api.services.pagination import (
    DEFAULT_LIMIT,
    DEFAULT_PAGE,
    RegistrationPage,
    page_offset,
    parse_page_params,
)
from registration_api.services.query_builder import (
    FilterRequest,
    SearchMode,
    build_filter_conditions,
)

logger = logging.getLogger(__name__)


def normalize_email(email: Optional[str]) -> str:
    if email is None or not email.strip():
        raise InvalidArgumentError("Email is required")
    return email.strip().lower()


def normalize_session(selected_session: Optional[str]) -> SessionMode:
    """Default to Morning; otherwise title-case and validate membership"""
    if selected_session is None or not selected_session.strip():
        return DEFAULT_SESSION

    formatted = selected_session.strip().capitalize()
    if formatted not in SessionMode.values():
        raise InvalidArgumentError(
            f"Invalid selectedSession. Use one of: {', '.join(SessionMode.values())}"
        )
    return SessionMode(formatted)


@dataclass
class FilterResult:
    """Outcome of a strict filter: the filters echoed back plus the matches"""

    filters_applied: dict[str, str]
    registrations: list[Registration] = field(default_factory=list)

    @property
    def count(self) -> int:
        return len(self.registrations)


class RegistrationService:
    """Service for managing registrations"""

    def __init__(
        self, db_session: Session, search_mode: SearchMode = SearchMode.CONTAINS
    ):
        self.db = db_session
        self.search_mode = search_mode

    def create_registration(self, data: RegistrationCreate) -> Registration:
        """
        Create a new registration.

        Args:
            data: Incoming registration fields

        Returns:
            Registration: The stored record including id and created_at

        Raises:
            InvalidArgumentError: If email is missing or selectedSession is invalid
            ConflictError: If the normalized email is already registered
            InternalError: If the record store fails unexpectedly
        """
        email = normalize_email(data.email)

        if self.get_registration_by_email(email):
            logger.warning(f"Rejected duplicate registration for {email}")
            raise ConflictError("Email already registered")

        registration = Registration(
            first_name=data.first_name,
            last_name=data.last_name,
            email=email,
            phone=data.phone,
            location=data.location,
            course_of_interest=data.course_of_interest,
            selected_session=normalize_session(data.selected_session),
        )

        try:
            self.db.add(registration)
            self.db.commit()
            self.db.refresh(registration)
        except IntegrityError:
            # Lost the race against a concurrent insert of the same email
            self.db.rollback()
            logger.warning(f"Unique email constraint rejected {email}")
            raise ConflictError("Email already registered")
        except SQLAlchemyError as e:
            self.db.rollback()
            logger.error(f"Error creating registration: {e}")
            raise InternalError("Registration failed") from e

        logger.info(f"Created registration {registration.id}")
        return registration

    def get_registration_by_email(self, email: str) -> Optional[Registration]:
        """Get a registration by its normalized email"""
        try:
            stmt = select(Registration).where(Registration.email == email)
            return self.db.exec(stmt).first()
        except SQLAlchemyError as e:
            logger.error(f"Error retrieving registration by email {email}: {e}")
            raise InternalError("Failed to fetch registration") from e

    def count_registrations(self) -> int:
        stmt = select(func.count()).select_from(Registration)
        return self.db.exec(stmt).one()

    def list_registrations(
        self, page: Any = DEFAULT_PAGE, limit: Any = DEFAULT_LIMIT
    ) -> RegistrationPage:
        """
        Get one page of registrations, newest first.

        ``page`` and ``limit`` may be raw query-string values; anything that is
        not a positive integer falls back to page 1 and 25 records per page, and
        ``limit`` is capped at MAX_LIMIT.
        """
        page, limit = parse_page_params(page, limit)

        try:
            total = self.count_registrations()
            stmt = (
                select(Registration)
                .order_by(col(Registration.created_at).desc())
                .offset(page_offset(page, limit))
                .limit(limit)
            )
            registrations = list(self.db.exec(stmt).all())
        except SQLAlchemyError as e:
            logger.error(f"Error listing registrations: {e}")
            raise InternalError("Failed to fetch registrations") from e

        return RegistrationPage(
            current_page=page,
            limit=limit,
            total_records=total,
            registrations=registrations,
        )

    def _find(self, conditions: list) -> list[Registration]:
        stmt = select(Registration)
        if conditions:
            stmt = stmt.where(*conditions)
        stmt = stmt.order_by(col(Registration.created_at).desc())
        try:
            return list(self.db.exec(stmt).all())
        except SQLAlchemyError as e:
            logger.error(f"Error filtering registrations: {e}")
            raise InternalError("Failed to fetch registrations") from e

    def filter_registrations(self, filters: FilterRequest) -> list[Registration]:
        """Lenient filter: unknown sessions are ignored and no filters means all"""
        conditions = build_filter_conditions(filters, search_mode=self.search_mode)
        return self._find(conditions)

    def strict_filter_registrations(self, filters: FilterRequest) -> FilterResult:
        """
        Strict filter: exact case-sensitive search, at least one filter required.

        Raises:
            InvalidArgumentError: If no filters are supplied, the session is not
                one of the allowed values, or the date is malformed
        """
        if filters.is_empty():
            raise InvalidArgumentError(
                "At least one filter (search, session, date, location) is required"
            )

        conditions = build_filter_conditions(
            filters, search_mode=SearchMode.EXACT, reject_unknown_session=True
        )
        return FilterResult(
            filters_applied=filters.applied_filters(),
            registrations=self._find(conditions),
        )

    def delete_registration(self, registration_id: str) -> RegistrationRead:
        """
        Permanently delete a registration.

        Returns:
            Snapshot of the record as it was before deletion

        Raises:
            NotFoundError: If no record has that id (malformed ids included)
        """
        try:
            uid = uuid.UUID(str(registration_id))
        except ValueError:
            raise NotFoundError("User not found")

        registration = self.db.get(Registration, uid)
        if not registration:
            raise NotFoundError("User not found")

        snapshot = RegistrationRead.model_validate(registration)
        try:
            self.db.delete(registration)
            self.db.commit()
        except SQLAlchemyError as e:
            self.db.rollback()
            logger.error(f"Error deleting registration {uid}: {e}")
            raise InternalError("Failed to delete user") from e

        logger.info(f"Deleted registration {uid}")
        return snapshot

    def export_registrations(self) -> bytes:
        """
        Export every registration to an .xlsx workbook, newest first.

        Raises:
            NotFoundError: If there are no registrations to export
        """
        registrations = self._find([])
        if not registrations:
            raise NotFoundError("No users found")

        logger.info(f"Exporting {len(registrations)} registrations")
        return build_workbook(registrations)
