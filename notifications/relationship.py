"""
Relationship resolution between a recipient and a matched celebrant.

Decides whether a celebrant is the recipient themself, the recipient's
spouse (anniversaries only) or an unrelated person, and picks the label
used in place of the celebrant's name.
"""

from enum import Enum

from models import FamilyMember
from models.types import PersonID

SELF_MARKER = "Yourself"
SPOUSE_MARKER = "Your spouse"


class Relationship(str, Enum):
    SELF = "self"
    SPOUSE = "spouse"
    OTHER = "other"


class EventType(str, Enum):
    BIRTHDAY = "birthday"
    ANNIVERSARY = "anniversary"


def resolve_relationship(
    family_id: PersonID | None, celebrant: FamilyMember, event: EventType
) -> Relationship:
    """
    Classify a celebrant relative to a recipient's linked family record.

    Checks, in order: same identity, then (anniversaries only) membership of
    the recipient in the celebrant's spouse list. A recipient without a
    family link is always unrelated.
    """
    if family_id is None:
        return Relationship.OTHER
    if celebrant.id == family_id:
        return Relationship.SELF
    if event is EventType.ANNIVERSARY and family_id in celebrant.spouses:
        return Relationship.SPOUSE
    return Relationship.OTHER


def resolve_label(
    family_id: PersonID | None, celebrant: FamilyMember, event: EventType
) -> str:
    """Display label for a celebrant as seen by one recipient."""
    relationship = resolve_relationship(family_id, celebrant, event)
    if relationship is Relationship.SELF:
        return SELF_MARKER
    if relationship is Relationship.SPOUSE:
        return SPOUSE_MARKER
    return celebrant.full_name
