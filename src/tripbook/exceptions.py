"""Domain exceptions raised by services.

The pricing core never raises; these cover the service layer only (a listing
that does not exist or is inactive). Exception handlers in main.py translate
them into the error envelope: {"error": {"code": "...", "message": "..."}}.
"""


class DomainError(Exception):
    """Base class for all domain exceptions."""

    def __init__(self, message: str) -> None:
        self.message = message
        super().__init__(message)


class NotFoundError(DomainError):
    """Raised when a requested listing does not exist or is not bookable."""

    def __init__(self, entity: str, identifier: object) -> None:
        self.entity = entity
        self.identifier = identifier
        super().__init__(f"{entity} with id {identifier} not found")
