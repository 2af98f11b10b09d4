"""SQLAlchemy models for the tourdesk service."""
from tourdesk.models.agency import Agency
from tourdesk.models.activity import ACTIVITY_STATES, Activity
from tourdesk.models.catalogue import (
    AddOn,
    Discount,
    Transport,
    activity_add_ons,
    activity_discounts,
    activity_transports,
)
from tourdesk.models.job import SlotGenerationJob
from tourdesk.models.modification import MODIFICATION_TYPES, TemporaryModification
from tourdesk.models.reservation import RESERVATION_STATES, Reservation, ReservationItem
from tourdesk.models.schedule import ALL_WEEKDAYS, Schedule
from tourdesk.models.slot import Slot
from tourdesk.models.tariff import Tariff

__all__ = [
    "ACTIVITY_STATES",
    "ALL_WEEKDAYS",
    "MODIFICATION_TYPES",
    "RESERVATION_STATES",
    "Activity",
    "AddOn",
    "Agency",
    "Discount",
    "Reservation",
    "ReservationItem",
    "Schedule",
    "Slot",
    "SlotGenerationJob",
    "Tariff",
    "TemporaryModification",
    "Transport",
    "activity_add_ons",
    "activity_discounts",
    "activity_transports",
]
