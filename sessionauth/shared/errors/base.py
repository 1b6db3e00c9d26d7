# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass
from http import HTTPStatus
from typing import Any, cast


@dataclass(slots=True)
class AppError(Exception):
    """Error that maps onto an HTTP response.

    ``code`` is the stable machine-readable identifier used in logs,
    ``message`` is what the caller sees in the ``error`` field. When no
    message is given the code doubles as the message.
    """

    code: str
    status: HTTPStatus
    message: str | None = None
    context: Mapping[str, Any] | None = None

    def __post_init__(self) -> None:
        Exception.__init__(self, self.code)

    def to_dict(self) -> dict[str, Any]:
        payload: dict[str, Any] = {"error": self.message or self.code}
        if self.context:
            payload["context"] = dict(self.context)
        return payload


class DomainError(AppError):
    def __init__(
        self,
        *,
        code: str | None = None,
        status: HTTPStatus | None = None,
        message: str | None = None,
        context: Mapping[str, Any] | None = None,
    ) -> None:
        resolved_code = code or cast(str, getattr(type(self), "default_code", "domain_error"))
        resolved_status = status or cast(
            HTTPStatus, getattr(type(self), "default_status", HTTPStatus.BAD_REQUEST)
        )
        resolved_message = message or cast(
            "str | None", getattr(type(self), "default_message", None)
        )
        super().__init__(
            code=resolved_code,
            status=resolved_status,
            message=resolved_message,
            context=context,
        )


class InfrastructureError(AppError):
    def __init__(
        self,
        code: str = "infrastructure_error",
        *,
        status: HTTPStatus | None = None,
        context: Mapping[str, Any] | None = None,
    ) -> None:
        resolved_status = status or HTTPStatus.INTERNAL_SERVER_ERROR
        super().__init__(code=code, status=resolved_status, context=context)

    def to_dict(self) -> dict[str, Any]:
        # Storage details stay in the logs.
        return {"error": "internal_error"}


class StorageError(InfrastructureError):
    def __init__(self, operation: str) -> None:
        super().__init__("storage_error", context={"operation": operation})


class ValidationError(AppError):
    def __init__(
        self,
        code: str = "validation_error",
        *,
        status: HTTPStatus = HTTPStatus.UNPROCESSABLE_ENTITY,
        context: Mapping[str, Any] | None = None,
    ) -> None:
        super().__init__(code=code, status=status, context=context)


class MalformedBodyError(ValidationError):
    def __init__(self) -> None:
        super().__init__("malformed_body", status=HTTPStatus.BAD_REQUEST)
