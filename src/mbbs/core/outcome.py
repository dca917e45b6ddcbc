import enum


class BestEffort(str, enum.Enum):
    """Result of a side effect whose failure must not fail the caller.

    APPLIED means the side effect ran; DEGRADED means it raised, the error was
    logged and swallowed, and the primary operation still succeeded.
    """
    APPLIED = "applied"
    DEGRADED = "degraded_ignored_error"

    @property
    def ok(self) -> bool:
        return self is BestEffort.APPLIED
