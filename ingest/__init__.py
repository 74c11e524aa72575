"""
Record store readers.

Loads family members, recipients, companies and company officers from
delimited files with a header row.
"""

from .csv_reader import (
    read_companies,
    read_company_officers,
    read_family_members,
    read_recipients,
)

__all__ = [
    "read_family_members",
    "read_recipients",
    "read_companies",
    "read_company_officers",
]
