"""Deterministic object naming for versioned assets."""

from dataclasses import dataclass

DELIMITER = "_"


def object_name(identifier: str, version: int, suffix: str | None = "") -> str:
    """Build the backend object name for an asset version.

    Non-empty parts are joined with ``_`` in the order identifier, version,
    suffix. The version is always present, so the name stays unambiguous as
    long as the identifier itself holds no delimiter. The suffix may contain
    it because it is always the last part.

    Args:
        identifier: Asset identifier
        version: Asset version
        suffix: Optional variant suffix (e.g. a thumbnail size)

    Returns:
        Object name, e.g. ``a1_1`` or ``a1_1_100x100``
    """
    parts = [identifier, str(version), suffix or ""]
    return DELIMITER.join(part for part in parts if part)


@dataclass(frozen=True)
class AssetKey:
    """Logical identity of a stored asset blob."""

    identifier: str
    version: int
    suffix: str = ""

    def __post_init__(self):
        if not self.identifier:
            raise ValueError("identifier must not be empty")
        if DELIMITER in self.identifier:
            raise ValueError(
                f"identifier must not contain {DELIMITER!r}: {self.identifier!r}"
            )
        if isinstance(self.version, bool) or not isinstance(self.version, int):
            raise ValueError(f"version must be an integer, got {self.version!r}")
        if self.version < 0:
            raise ValueError(f"version must be non-negative, got {self.version}")
        if self.suffix is None:
            object.__setattr__(self, "suffix", "")

    @property
    def object_name(self) -> str:
        return object_name(self.identifier, self.version, self.suffix)

    def describe(self) -> str:
        """Diagnostic text identifying the asset."""
        return f"Id={self.identifier}, Version={self.version}"


def resolve_object_name(key: "AssetKey | str") -> str:
    """Map an asset key or a transient file name to an object name.

    Transient file names are used verbatim.

    Raises:
        ValueError: If a transient file name is empty
    """
    if isinstance(key, AssetKey):
        return key.object_name
    if not key:
        raise ValueError("file name must not be empty")
    return key


def describe_key(key: "AssetKey | str") -> str:
    """Diagnostic text for an asset key or transient file name."""
    if isinstance(key, AssetKey):
        return key.describe()
    return key
