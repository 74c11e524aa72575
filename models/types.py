"""Shared type definitions for type checking.

Uses NewType for IDs to provide compile-time type safety - prevents mixing
different ID types (e.g., passing RecipientID where PersonID expected).

Uses TypeAlias for complex types that are purely structural.
"""

from typing import NewType, TypeAlias

# ID types using NewType for type safety
PersonID = NewType("PersonID", str)
RecipientID = NewType("RecipientID", str)
CompanyID = NewType("CompanyID", str)
OfficerID = NewType("OfficerID", str)

# Structural aliases
IdList: TypeAlias = list[PersonID]  # ordered, parsed once at load time
PhoneNumber: TypeAlias = str  # +<countrycode><number>
EmailAddress: TypeAlias = str  # local@domain.tld
