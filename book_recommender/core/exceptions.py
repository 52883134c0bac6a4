"""
Infrastructure faults raised by the data access layer.

Domain rejections (not found, duplicate, out of range) are ordinary return
values. Only failures of the backing store itself are raised, so callers can
tell "your request was invalid" apart from "try again later".
"""


class StoreUnavailableError(Exception):
    """The database could not be reached or a query failed to execute."""

    def __init__(self, detail: str = "Database unavailable"):
        super().__init__(detail)
        self.detail = detail
