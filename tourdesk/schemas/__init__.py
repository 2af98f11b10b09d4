from .activity import (
    ActivityCreate,
    ActivityDetailResponse,
    ActivityResponse,
    ActivityStateUpdate,
    ActivityUpdate,
)
from .common import ApiResponse
from .job import SlotGenerationJobResponse
from .modification import (
    ModificationCreate,
    ModificationResponse,
    UnblockRequest,
    UnblockResponse,
)
from .reservation import (
    ExpiredHoldsResponse,
    ReservationCreate,
    ReservationResponse,
    ReservationStateUpdate,
)
from .schedule import ScheduleCreate, ScheduleEntry, ScheduleResponse, ScheduleUpdate
from .slot import (
    CheckReservationsRequest,
    CheckReservationsResponse,
    GenerateSlotsRequest,
    GenerationResultResponse,
    SlotResponse,
    SlotUpdate,
)
from .tariff import TariffCreate, TariffInput, TariffResponse, TariffUpdate

__all__ = [
    "ActivityCreate",
    "ActivityDetailResponse",
    "ActivityResponse",
    "ActivityStateUpdate",
    "ActivityUpdate",
    "ApiResponse",
    "CheckReservationsRequest",
    "CheckReservationsResponse",
    "ExpiredHoldsResponse",
    "GenerateSlotsRequest",
    "GenerationResultResponse",
    "ModificationCreate",
    "ModificationResponse",
    "ReservationCreate",
    "ReservationResponse",
    "ReservationStateUpdate",
    "ScheduleCreate",
    "ScheduleEntry",
    "ScheduleResponse",
    "ScheduleUpdate",
    "SlotGenerationJobResponse",
    "SlotResponse",
    "SlotUpdate",
    "TariffCreate",
    "TariffInput",
    "TariffResponse",
    "TariffUpdate",
    "UnblockRequest",
    "UnblockResponse",
]
