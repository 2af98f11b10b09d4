"""Result type and domain errors shared by every service call."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Any, Generic, Optional, TypeVar, Union

from fastapi import status

T = TypeVar("T")


class ErrorKind(str, Enum):
    VALIDATION = "validation"
    NOT_FOUND = "not_found"
    CONFLICT = "conflict"
    FOREIGN_KEY = "foreign_key"
    DUPLICATE_ID = "duplicate_id"
    PAST_DATE = "past_date"
    TIME_RANGE = "time_range"
    RESERVATIONS_CONFLICT = "reservations_conflict"
    INTERNAL = "internal"


_STATUS_BY_KIND = {
    ErrorKind.VALIDATION: status.HTTP_400_BAD_REQUEST,
    ErrorKind.DUPLICATE_ID: status.HTTP_400_BAD_REQUEST,
    ErrorKind.PAST_DATE: status.HTTP_400_BAD_REQUEST,
    ErrorKind.TIME_RANGE: status.HTTP_400_BAD_REQUEST,
    ErrorKind.NOT_FOUND: status.HTTP_404_NOT_FOUND,
    ErrorKind.CONFLICT: status.HTTP_409_CONFLICT,
    ErrorKind.FOREIGN_KEY: status.HTTP_409_CONFLICT,
    ErrorKind.RESERVATIONS_CONFLICT: status.HTTP_409_CONFLICT,
    ErrorKind.INTERNAL: status.HTTP_500_INTERNAL_SERVER_ERROR,
}


@dataclass(frozen=True)
class DomainError:
    kind: ErrorKind
    message: str
    errors: Any = None

    @property
    def status_code(self) -> int:
        return _STATUS_BY_KIND[self.kind]


@dataclass(frozen=True)
class Ok(Generic[T]):
    value: T


@dataclass(frozen=True)
class Err:
    error: DomainError


Result = Union[Ok[T], Err]


class DomainException(Exception):
    """Raised at the HTTP boundary to render an ``Err`` as a JSON envelope."""

    def __init__(self, error: DomainError) -> None:
        super().__init__(error.message)
        self.error = error


def unwrap(result: "Result[T]") -> T:
    """Return the value of ``Ok`` or raise :class:`DomainException` for ``Err``."""

    if isinstance(result, Err):
        raise DomainException(result.error)
    return result.value


def not_found(message: str) -> Err:
    return Err(DomainError(ErrorKind.NOT_FOUND, message))


def activity_not_found(activity_id: int) -> Err:
    return not_found(f"Actividad {activity_id} no encontrada o sin permiso")


def validation_error(message: str = "Datos de entrada inválidos", errors: Any = None) -> Err:
    return Err(DomainError(ErrorKind.VALIDATION, message, errors))


def conflict(message: str) -> Err:
    return Err(DomainError(ErrorKind.CONFLICT, message))


def foreign_key_violation(resource: str) -> Err:
    return Err(
        DomainError(
            ErrorKind.FOREIGN_KEY,
            f"{resource} está vinculado a otros registros y no puede eliminarse",
        )
    )


def duplicate_schedule_ids(ids: Optional[list[int]] = None) -> Err:
    return Err(DomainError(ErrorKind.DUPLICATE_ID, "IDs duplicados en cronograma", ids))


def past_start_date(index: Optional[int] = None) -> Err:
    errors = {"indice": index} if index is not None else None
    return Err(
        DomainError(ErrorKind.PAST_DATE, "fecha_inicio no puede ser anterior a hoy", errors)
    )


def invalid_time_range(index: Optional[int] = None) -> Err:
    errors = {"indice": index} if index is not None else None
    return Err(DomainError(ErrorKind.TIME_RANGE, "hora_inicio debe ser < hora_fin", errors))


def reservations_conflict(schedule_ids: Optional[list[int]] = None) -> Err:
    errors = {"horarios": schedule_ids} if schedule_ids else None
    return Err(
        DomainError(
            ErrorKind.RESERVATIONS_CONFLICT, "Horario con reservas confirmadas", errors
        )
    )


def internal_error() -> Err:
    return Err(DomainError(ErrorKind.INTERNAL, "Error interno del servidor"))


__all__ = [
    "DomainError",
    "DomainException",
    "Err",
    "ErrorKind",
    "Ok",
    "Result",
    "activity_not_found",
    "conflict",
    "duplicate_schedule_ids",
    "foreign_key_violation",
    "internal_error",
    "invalid_time_range",
    "not_found",
    "past_start_date",
    "reservations_conflict",
    "unwrap",
    "validation_error",
]
