"""Result variants returned by asset store operations."""

from dataclasses import dataclass
from enum import Enum

from assetstore.storage.exceptions import AssetAlreadyExistsError, AssetNotFoundError


class StoreOutcome(str, Enum):
    """Outcome of a store operation."""

    OK = "ok"
    NOT_FOUND = "not_found"  # Object (or copy source) is absent
    ALREADY_EXISTS = "already_exists"  # Conditional write found the target occupied


class ErrorKind(str, Enum):
    """Backend-neutral classification of a provider failure."""

    NOT_FOUND = "not_found"
    ALREADY_EXISTS = "already_exists"
    CONFIGURATION = "configuration"
    TRANSPORT = "transport"


@dataclass(frozen=True)
class StoreResult:
    """Result of an upload, download, copy or delete."""

    outcome: StoreOutcome
    object_name: str
    detail: str = ""

    @classmethod
    def success(cls, object_name: str) -> "StoreResult":
        return cls(StoreOutcome.OK, object_name)

    @classmethod
    def missing(cls, object_name: str, detail: str = "") -> "StoreResult":
        return cls(StoreOutcome.NOT_FOUND, object_name, detail or object_name)

    @classmethod
    def exists(cls, object_name: str) -> "StoreResult":
        return cls(StoreOutcome.ALREADY_EXISTS, object_name, object_name)

    @property
    def ok(self) -> bool:
        return self.outcome is StoreOutcome.OK

    @property
    def not_found(self) -> bool:
        return self.outcome is StoreOutcome.NOT_FOUND

    @property
    def already_exists(self) -> bool:
        return self.outcome is StoreOutcome.ALREADY_EXISTS

    def raise_for_outcome(self) -> "StoreResult":
        """Raise the matching exception for a failed outcome.

        Returns:
            The result itself when the outcome is OK

        Raises:
            AssetNotFoundError: If the object was absent
            AssetAlreadyExistsError: If the conditional write lost
        """
        if self.outcome is StoreOutcome.NOT_FOUND:
            raise AssetNotFoundError(f"Asset not found: {self.detail}", self.object_name)
        if self.outcome is StoreOutcome.ALREADY_EXISTS:
            raise AssetAlreadyExistsError(
                f"Asset already exists: {self.object_name}", self.object_name
            )
        return self
