"""Domain errors and their HTTP representations."""

from __future__ import annotations

from dataclasses import asdict, dataclass
from http import HTTPStatus


class InternalError(Exception):
    """An error raised by the domain and application layers."""

    kind = "internal_server_error"

    def __init__(self, message: str, kind: str | None = None) -> None:
        super().__init__(message)
        self.message = message
        if kind is not None:
            self.kind = kind

    def __str__(self) -> str:
        return self.message


class NotFoundError(InternalError):
    """The requested resource does not exist."""

    kind = "not_found"


class InternalServerError(InternalError):
    """Something failed while serving the request."""

    kind = "internal_server_error"


class BadRequestError(InternalError):
    """The request carried invalid data."""

    kind = "bad_request"


@dataclass(frozen=True)
class Cause:
    """One field that made a request invalid."""

    field: str
    message: str


class RestError(Exception):
    """An error as sent to an HTTP client."""

    def __init__(
        self,
        message: str,
        err: str,
        code: int,
        causes: list[Cause] | None = None,
    ) -> None:
        super().__init__(message)
        self.message = message
        self.err = err
        self.code = code
        self.causes = causes

    def __str__(self) -> str:
        return self.message

    def to_dict(self) -> dict:
        """Return the JSON body for this error."""
        return {
            "message": self.message,
            "err": self.err,
            "code": self.code,
            "causes": None if self.causes is None else [asdict(c) for c in self.causes],
        }


def bad_request_rest_error(message: str, *args: Cause) -> RestError:
    """Build a 400 error, optionally listing the causes."""
    return RestError(message, "bad_request", HTTPStatus.BAD_REQUEST, list(args) or None)


def not_found_rest_error(message: str) -> RestError:
    """Build a 404 error."""
    return RestError(message, "not_found", HTTPStatus.NOT_FOUND)


def internal_server_rest_error(message: str) -> RestError:
    """Build a 500 error."""
    return RestError(message, "internal_server", HTTPStatus.INTERNAL_SERVER_ERROR)


def convert_error(error: InternalError) -> RestError:
    """Map a domain error onto the HTTP error that reports it."""
    if error.kind == "bad_request":
        return bad_request_rest_error(str(error))
    if error.kind == "not_found":
        return not_found_rest_error(str(error))
    return internal_server_rest_error(str(error))