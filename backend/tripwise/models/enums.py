"""Status and type enums shared by models, schemas and services."""

import enum

from sqlalchemy import Enum


class ItemStatus(str, enum.Enum):
    DRAFT = "draft"
    SHORTLISTED = "shortlisted"
    CONFIRMED = "confirmed"
    NOT_SELECTED = "not_selected"


class FlightType(str, enum.Enum):
    ONE_WAY = "one_way"
    ROUND_TRIP = "round_trip"
    MULTI_CITY = "multi_city"


class LegDirection(str, enum.Enum):
    OUTBOUND = "outbound"
    RETURN = "return"


class CostType(str, enum.Enum):
    TOTAL = "total"
    PER_HEAD = "per_head"


class CostModule(str, enum.Enum):
    FLIGHTS = "flights"
    ACCOMMODATIONS = "accommodations"
    ITINERARY = "itinerary"
    ADHOC = "adhoc"


class PackingPriority(str, enum.Enum):
    CRITICAL = "critical"
    IMPORTANT = "important"
    NORMAL = "normal"


def enum_type(enum_cls: type[enum.Enum]) -> Enum:
    """Store an enum by value in a plain VARCHAR column."""
    return Enum(
        enum_cls,
        native_enum=False,
        length=20,
        values_callable=lambda members: [m.value for m in members],
    )
