from .activity_service import ActivityBundle, ActivityService
from .job_service import SlotGenerationJobService
from .modification_service import ModificationService
from .notification_client import NotificationClient
from .pivot_sync import PivotSynchronizer
from .reservation_service import ReservationService
from .schedule_service import ScheduleService
from .schedule_sync import ScheduleSynchronizer, ScheduleSyncSummary
from .slot_generator import GenerationResult, SlotGenerator
from .slot_service import SlotService
from .tariff_service import TariffService
from .tariff_sync import TariffSynchronizer, TariffSyncSummary

__all__ = [
    "ActivityBundle",
    "ActivityService",
    "GenerationResult",
    "ModificationService",
    "NotificationClient",
    "PivotSynchronizer",
    "ReservationService",
    "ScheduleService",
    "ScheduleSyncSummary",
    "ScheduleSynchronizer",
    "SlotGenerationJobService",
    "SlotGenerator",
    "SlotService",
    "TariffService",
    "TariffSyncSummary",
    "TariffSynchronizer",
]
