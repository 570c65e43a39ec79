"""Spreadsheet export of registrations"""

import io
from typing import Iterable

from openpyxl import Workbook
from openpyxl.styles import Font

from registration_api.models.registration import Registration, as_utc

XLSX_MEDIA_TYPE = "application/vnd.openxmlformats-officedocument.spreadsheetml.sheet"

SHEET_TITLE = "Registered Users"

DATE_FORMAT = "%Y-%m-%d %H:%M:%S"

# (header, attribute, column width)
COLUMNS = [
    ("First Name", "first_name", 20),
    ("Last Name", "last_name", 20),
    ("Email", "email", 30),
    ("Phone", "phone", 20),
    ("Location", "location", 20),
    ("Course of Interest", "course_of_interest", 25),
    ("Selected Session", "selected_session", 25),
    ("Registration Date", "created_at", 25),
]


def format_timestamp(value) -> str:
    """Render a stored UTC timestamp in server-local time"""
    return as_utc(value).astimezone().strftime(DATE_FORMAT)


def _cell_value(registration: Registration, attribute: str):
    value = getattr(registration, attribute)
    if value is None:
        return None
    if attribute == "created_at":
        return format_timestamp(value)
    if attribute == "selected_session":
        return getattr(value, "value", value)
    return value


def build_workbook(registrations: Iterable[Registration]) -> bytes:
    """Render registrations into an .xlsx document and return its bytes"""
    workbook = Workbook()
    worksheet = workbook.active
    worksheet.title = SHEET_TITLE

    worksheet.append([header for header, _, _ in COLUMNS])
    for cell in worksheet[1]:
        cell.font = Font(bold=True)

    for index, (_, _, width) in enumerate(COLUMNS, start=1):
        letter = worksheet.cell(row=1, column=index).column_letter
        worksheet.column_dimensions[letter].width = width

    for registration in registrations:
        worksheet.append(
            [_cell_value(registration, attribute) for _, attribute, _ in COLUMNS]
        )

    buffer = io.BytesIO()
    workbook.save(buffer)
    return buffer.getvalue()
