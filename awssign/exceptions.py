class SigV4Error(Exception):
    """Base class for all errors raised while signing a request."""


class MissingConfigError(SigV4Error):
    """A required signing config property was not supplied."""

    def __init__(self, field: str) -> None:
        self.field = field
        super().__init__(f"missing config property '{field}'")
