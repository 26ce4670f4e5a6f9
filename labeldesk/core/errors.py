"""API error type rendered as ``{"error": CODE}`` by the exception handler in main."""

from fastapi import status


class ApiError(Exception):
    """Raised by routes and services to end a request with a JSON error code."""

    def __init__(self, status_code: int, code: str, message: str | None = None) -> None:
        self.status_code = status_code
        self.code = code
        self.message = message
        super().__init__(message or code)

    def to_body(self) -> dict[str, str]:
        body = {"error": self.code}
        if self.message:
            body["message"] = self.message
        return body


def invalid_input() -> ApiError:
    return ApiError(status.HTTP_400_BAD_REQUEST, "INVALID_INPUT")


def unauthorized() -> ApiError:
    return ApiError(status.HTTP_401_UNAUTHORIZED, "UNAUTHORIZED")


def forbidden() -> ApiError:
    return ApiError(status.HTTP_403_FORBIDDEN, "FORBIDDEN")
