"""Registration API endpoints"""

import io
import logging
from typing import Optional

from fastapi import APIRouter, Depends, Request
from fastapi.responses import JSONResponse, StreamingResponse
from sqlmodel import Session

from registration_api.config import config
from registration_api.errors import InvalidArgumentError
from registration_api.models.database import get_db
from registration_api.models.registration import RegistrationCreate, RegistrationRead
from registration_api.services.export_service import XLSX_MEDIA_TYPE
from registration_api.services.query_builder import FilterRequest, SearchMode
from registration_api.services.registration_service import RegistrationService

router = APIRouter(prefix="/api", tags=["Registrations"])

logger = logging.getLogger(__name__)

FILTER_KEYS = ("search", "session", "date", "location")


def get_registration_service(
    request: Request, db: Session = Depends(get_db)
) -> RegistrationService:
    search_mode = getattr(request.app.state, "search_mode", SearchMode.CONTAINS)
    return RegistrationService(db, search_mode=search_mode)


@router.post("/register", status_code=201)
async def register_user(
    payload: RegistrationCreate,
    service: RegistrationService = Depends(get_registration_service),
):
    """Register a new user"""
    registration = service.create_registration(payload)
    return {
        "message": "Registration successful",
        "user": RegistrationRead.serialize(registration),
    }


@router.get("/registrations")
async def get_registrations(
    request: Request,
    page: Optional[str] = None,
    limit: Optional[str] = None,
    search: Optional[str] = None,
    session: Optional[str] = None,
    date: Optional[str] = None,
    location: Optional[str] = None,
    service: RegistrationService = Depends(get_registration_service),
):
    """Paginated listing, or a strict filter when any filter key is present"""
    if any(key in request.query_params for key in FILTER_KEYS):
        filters = FilterRequest(
            search=search, session=session, date=date, location=location
        )
        return _strict_filter_response(service, filters)

    result = service.list_registrations(page=page, limit=limit)
    return {
        "currentPage": result.current_page,
        "totalPages": result.total_pages,
        "totalRecords": result.total_records,
        "registrations": [
            RegistrationRead.serialize(r) for r in result.registrations
        ],
    }


def _strict_filter_response(
    service: RegistrationService, filters: FilterRequest
) -> JSONResponse:
    try:
        result = service.strict_filter_registrations(filters)
    except InvalidArgumentError as e:
        return JSONResponse(
            status_code=e.status_code,
            content={
                "success": False,
                "message": e.message,
                "filtersApplied": filters.applied_filters(),
            },
        )

    if not result.registrations:
        return JSONResponse(
            status_code=404,
            content={
                "success": False,
                "message": "No registrations match the supplied filters",
                "count": 0,
                "filtersApplied": result.filters_applied,
                "data": [],
            },
        )

    return JSONResponse(
        content={
            "success": True,
            "message": f"Found {result.count} matching registration(s)",
            "count": result.count,
            "filtersApplied": result.filters_applied,
            "data": [RegistrationRead.serialize(r) for r in result.registrations],
        }
    )


@router.get("/filter")
async def get_filtered_registrations(
    search: Optional[str] = None,
    session: Optional[str] = None,
    date: Optional[str] = None,
    location: Optional[str] = None,
    service: RegistrationService = Depends(get_registration_service),
):
    """Lenient filter over name/email search, session, date and location"""
    filters = FilterRequest(
        search=search, session=session, date=date, location=location
    )
    registrations = service.filter_registrations(filters)
    return [RegistrationRead.serialize(r) for r in registrations]


@router.delete("/delete/{registration_id}")
async def delete_user(
    registration_id: str,
    service: RegistrationService = Depends(get_registration_service),
):
    """Permanently delete a registration by id"""
    deleted = service.delete_registration(registration_id)
    return {
        "message": "User deleted successfully",
        "user": deleted.model_dump(mode="json", by_alias=True),
    }


@router.get("/export/excel")
async def export_users_as_excel(
    service: RegistrationService = Depends(get_registration_service),
):
    """Download every registration as an .xlsx spreadsheet"""
    content = service.export_registrations()
    filename = config["export_filename"]
    return StreamingResponse(
        io.BytesIO(content),
        media_type=XLSX_MEDIA_TYPE,
        headers={"Content-Disposition": f'attachment; filename="{filename}"'},
    )
