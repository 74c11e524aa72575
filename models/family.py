"""Pydantic models for the family celebrant domain."""

import re
from datetime import date

from pydantic import BaseModel, ConfigDict, Field, field_validator

from models.types import EmailAddress, IdList, PersonID, PhoneNumber, RecipientID

ID_LIST_SEPARATORS = re.compile(r"[,;|]")


def split_id_list(value: str | list[str] | None) -> list[str]:
    """Split a delimiter-joined id string into an ordered list of ids."""
    if value is None:
        return []
    if isinstance(value, str):
        value = ID_LIST_SEPARATORS.split(value)
    return [str(item).strip() for item in value if str(item).strip()]


class FamilyMember(BaseModel):
    """A person whose birthday or wedding anniversary can be celebrated."""

    model_config = ConfigDict(str_strip_whitespace=True, frozen=True)

    id: PersonID = Field(..., min_length=1)
    firstname: str = ""
    middlename: str = ""
    lastname: str = ""
    gender: str = ""
    birth_date: date | None = None
    wedding_date: date | None = None
    death_date: date | None = None
    parents: IdList = Field(default_factory=list)
    spouses: IdList = Field(default_factory=list)

    @field_validator("parents", "spouses", mode="before")
    @classmethod
    def _parse_id_list(cls, value):
        return split_id_list(value)

    @property
    def full_name(self) -> str:
        return f"{self.firstname} {self.lastname}".strip()


class Recipient(BaseModel):
    """Someone who receives celebrant reminders."""

    model_config = ConfigDict(str_strip_whitespace=True, frozen=True)

    id: RecipientID = Field(..., min_length=1)
    firstname: str = ""
    lastname: str = ""
    mobile_no: PhoneNumber | None = None
    email: EmailAddress | None = None
    family_id: PersonID | None = None

    @field_validator("mobile_no", "email", "family_id", mode="before")
    @classmethod
    def _blank_to_none(cls, value):
        if isinstance(value, str) and not value.strip():
            return None
        return value
