"""Pydantic models for the company filing-deadline domain."""

from datetime import date

from pydantic import BaseModel, ConfigDict, Field, field_validator

from models.types import CompanyID, EmailAddress, OfficerID, PhoneNumber


class Company(BaseModel):
    """A registered company with accounts and returns deadlines."""

    model_config = ConfigDict(str_strip_whitespace=True, frozen=True)

    id: CompanyID = Field(..., min_length=1)
    company_name: str = Field(..., min_length=1)
    company_number: str = ""
    company_type: str = ""
    company_status: str = ""
    registered_address: str = ""
    incorporation_date: date | None = None

    # Only the *_due_date fields take part in window matching
    accounts_due_date: date | None = None
    accounts_next_due_date: date | None = None
    accounts_last_made_up_date: date | None = None
    returns_due_date: date | None = None
    returns_next_due_date: date | None = None
    returns_last_made_up_date: date | None = None

    @property
    def display_name(self) -> str:
        """Name and registration number, e.g. 'ABC Ltd(12345)'."""
        if self.company_number:
            return f"{self.company_name}({self.company_number})"
        return self.company_name


class CompanyOfficer(BaseModel):
    """Receives company deadline reminders. Never a celebrant."""

    model_config = ConfigDict(str_strip_whitespace=True, frozen=True)

    id: OfficerID = Field(..., min_length=1)
    firstname: str = ""
    lastname: str = ""
    mobile_no: PhoneNumber | None = None
    email: EmailAddress | None = None

    @field_validator("mobile_no", "email", mode="before")
    @classmethod
    def _blank_to_none(cls, value):
        if isinstance(value, str) and not value.strip():
            return None
        return value
