"""Helpers that wrap route payloads in the ``{code, message, data}`` envelope."""

from typing import Any

from fastapi import status


def envelope(
    data: Any = None,
    message: str = "Operación exitosa",
    code: int = status.HTTP_200_OK,
) -> dict[str, Any]:
    body: dict[str, Any] = {"code": code, "message": message}
    if data is not None:
        body["data"] = data
    return body


__all__ = ["envelope"]
