"""Error taxonomy shared by the services and the HTTP layer.

Services raise these; only ``testgen.interfaces.api`` maps them to status
codes (400 / 404 / 500).
"""

from typing import Optional


class TestGenError(Exception):
    """Base exception for all pipeline errors."""

    __test__ = False

    def __init__(self, message: str):
        self.message = message
        super().__init__(message)


class NotFoundError(TestGenError):
    """An identifier did not resolve to a stored entity."""

    pass


class BadRequestError(TestGenError):
    """A precondition of the requested operation is not met."""

    pass


class RemoteServiceError(TestGenError):
    """GitHub or the LLM returned a non-success response or a malformed payload."""

    def __init__(self, message: str, service: str, original_error: Optional[Exception] = None):
        self.service = service
        self.original_error = original_error
        super().__init__(message)
