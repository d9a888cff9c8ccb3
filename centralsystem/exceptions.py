"""
Central system lookup exceptions.

These exceptions are transport-agnostic and should be caught by the server
layer to convert into appropriate HTTP responses.
"""


class CentralSystemError(Exception):
    """Base exception for all central system lookup errors."""

    pass


class MalformedIdentifierError(CentralSystemError):
    """Raised when a charge box identification cannot be parsed."""

    def __init__(self, identifier: str):
        self.identifier = identifier
        super().__init__("Invalid charge box identification!")


class UnknownChargeBoxError(CentralSystemError):
    """Raised when a well-formed charge box identification is not registered."""

    def __init__(self, identifier: str):
        self.identifier = identifier
        super().__init__("Unknown charge box identification!")
