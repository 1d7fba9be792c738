"""User-facing errors raised while loading sensor data."""
from typing import Sequence


class PirDataError(Exception):
    """Base class for recoverable ingestion errors shown to the user."""


class UnsupportedFormatError(PirDataError):
    def __init__(self, filename: str):
        self.filename = filename
        super().__init__(f"Unsupported file format: {filename}")


class UnresolvableSchemaError(PirDataError):
    def __init__(self, headers: Sequence[str]):
        self.headers = list(headers)
        super().__init__(
            "Could not identify the distance or angle column.\n"
            f"Columns: {', '.join(self.headers)}")


class EmptyInputError(PirDataError):
    def __init__(self, message: str = "No valid data rows."):
        super().__init__(message)
