"""Pydantic models for data validation and type checking."""

from models.company import Company, CompanyOfficer
from models.family import FamilyMember, Recipient
from models.notification import (
    Channel,
    DeliveryResult,
    DispatchReport,
    ErrorKind,
    JobState,
    RunResult,
)

__all__ = [
    "FamilyMember",
    "Recipient",
    "Company",
    "CompanyOfficer",
    "Channel",
    "ErrorKind",
    "JobState",
    "DeliveryResult",
    "DispatchReport",
    "RunResult",
]
