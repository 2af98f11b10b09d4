from . import (
    activity_repository,
    job_repository,
    modification_repository,
    pivot_repository,
    reservation_repository,
    schedule_repository,
    slot_repository,
    tariff_repository,
)

__all__ = [
    "activity_repository",
    "job_repository",
    "modification_repository",
    "pivot_repository",
    "reservation_repository",
    "schedule_repository",
    "slot_repository",
    "tariff_repository",
]
