"""Error taxonomy shared by the storage gateway and the HTTP layer."""

from typing import Dict


class LexilogError(Exception):
    """Base class for every error this service raises on purpose."""


class ValidationError(LexilogError):
    """A payload failed schema constraints.

    ``errors`` maps a dotted field path (``word``, ``tags.1``) to a
    human-readable message.
    """

    def __init__(self, errors: Dict[str, str]):
        self.errors = errors
        super().__init__("Invalid word data")


class NotFoundError(LexilogError):
    def __init__(self, entity: str = "Word"):
        self.entity = entity
        super().__init__(f"{entity} not found")


class PersistenceError(LexilogError):
    """The store rejected a statement or could not be reached."""


class MalformedIdentifier(LexilogError):
    def __init__(self, raw: str):
        self.raw = raw
        super().__init__(f"Invalid ID format: {raw!r}")
