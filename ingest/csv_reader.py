"""
Record store reader.

Reads the four delimited record sources (family members, recipients,
companies, company officers) into typed models. Every run reads fresh;
nothing is cached between calls.
"""

import csv
import logging
from collections.abc import Callable
from pathlib import Path
from typing import Any, TypeVar

from pydantic import BaseModel
from pydantic import ValidationError as PydanticValidationError

from models import Company, CompanyOfficer, FamilyMember, Recipient
from shared.errors import SourceReadError
from shared.utils import parse_date_string

logger = logging.getLogger(__name__)

ModelT = TypeVar("ModelT", bound=BaseModel)

FAMILY_MEMBER_COLUMNS = [
    "id", "firstname", "middlename", "lastname", "birthDate",
    "gender", "parents", "weddingDate", "spouses", "deathDate",
]
RECIPIENT_COLUMNS = ["id", "firstname", "lastname", "mobileNo", "email", "familyId"]
COMPANY_COLUMNS = [
    "id", "company_name", "company_number", "company_type",
    "incorporation_date", "company_status", "registered_address",
    "accounts_due_date", "accounts_next_due_date", "accounts_last_made_up_date",
    "returns_due_date", "returns_next_due_date", "returns_last_made_up_date",
]
COMPANY_OFFICER_COLUMNS = ["id", "firstname", "lastname", "mobileNo", "email"]


def _read_rows(path: Path, required_columns: list[str]) -> list[dict[str, str]]:
    try:
        with open(path, newline="", encoding="utf-8-sig") as f:
            reader = csv.DictReader(f)
            header = reader.fieldnames
            if not header:
                raise SourceReadError(f"{path}: missing header row")
            missing = [col for col in required_columns if col not in header]
            if missing:
                raise SourceReadError(
                    f"{path}: missing column(s) {', '.join(missing)}"
                )
            return [
                {key: (value or "") for key, value in row.items() if key is not None}
                for row in reader
            ]
    except OSError as e:
        raise SourceReadError(f"Could not read {path}: {e}") from e
    except (csv.Error, UnicodeDecodeError) as e:
        raise SourceReadError(f"Malformed record file {path}: {e}") from e


def _date_field(row: dict[str, str], column: str, path: Path, line: int, dayfirst: bool):
    raw = row.get(column, "").strip()
    if not raw:
        return None
    parsed = parse_date_string(raw, dayfirst=dayfirst)
    if parsed is None:
        raise SourceReadError(f"{path}, row {line}: invalid date in '{column}': {raw!r}")
    return parsed


def _load(
    path: Path,
    columns: list[str],
    build: Callable[[dict[str, str], int], dict[str, Any]],
    model: type[ModelT],
) -> list[ModelT]:
    path = Path(path)
    records = []
    # Header is line 1
    for line, row in enumerate(_read_rows(path, columns), start=2):
        try:
            records.append(model(**build(row, line)))
        except PydanticValidationError as e:
            raise SourceReadError(f"{path}, row {line}: {e}") from e

    logger.info("Read %d %s record(s) from %s", len(records), model.__name__, path)
    return records


def read_family_members(path: Path, dayfirst: bool = False) -> list[FamilyMember]:
    """Read family members; blank dates become None, id lists are split once."""
    path = Path(path)

    def build(row: dict[str, str], line: int) -> dict[str, Any]:
        return {
            "id": row["id"],
            "firstname": row["firstname"],
            "middlename": row["middlename"],
            "lastname": row["lastname"],
            "gender": row["gender"],
            "birth_date": _date_field(row, "birthDate", path, line, dayfirst),
            "wedding_date": _date_field(row, "weddingDate", path, line, dayfirst),
            "death_date": _date_field(row, "deathDate", path, line, dayfirst),
            "parents": row["parents"],
            "spouses": row["spouses"],
        }

    return _load(path, FAMILY_MEMBER_COLUMNS, build, FamilyMember)


def read_recipients(path: Path) -> list[Recipient]:
    def build(row: dict[str, str], line: int) -> dict[str, Any]:
        return {
            "id": row["id"],
            "firstname": row["firstname"],
            "lastname": row["lastname"],
            "mobile_no": row["mobileNo"],
            "email": row["email"],
            "family_id": row["familyId"],
        }

    return _load(Path(path), RECIPIENT_COLUMNS, build, Recipient)


def read_companies(path: Path, dayfirst: bool = False) -> list[Company]:
    path = Path(path)
    date_columns = [
        "incorporation_date",
        "accounts_due_date",
        "accounts_next_due_date",
        "accounts_last_made_up_date",
        "returns_due_date",
        "returns_next_due_date",
        "returns_last_made_up_date",
    ]

    def build(row: dict[str, str], line: int) -> dict[str, Any]:
        data: dict[str, Any] = {
            "id": row["id"],
            "company_name": row["company_name"],
            "company_number": row["company_number"],
            "company_type": row["company_type"],
            "company_status": row["company_status"],
            "registered_address": row["registered_address"],
        }
        for column in date_columns:
            data[column] = _date_field(row, column, path, line, dayfirst)
        return data

    return _load(path, COMPANY_COLUMNS, build, Company)


def read_company_officers(path: Path) -> list[CompanyOfficer]:
    def build(row: dict[str, str], line: int) -> dict[str, Any]:
        return {
            "id": row["id"],
            "firstname": row["firstname"],
            "lastname": row["lastname"],
            "mobile_no": row["mobileNo"],
            "email": row["email"],
        }

    return _load(Path(path), COMPANY_OFFICER_COLUMNS, build, CompanyOfficer)
