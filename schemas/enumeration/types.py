from enum import StrEnum


class DataType(StrEnum):
    """Column data types the accessor synthesizer distinguishes."""

    ENUM = "enum"


class FailurePolicy(StrEnum):
    """What happens to already-installed predicates when a batch fails."""

    PARTIAL = "partial"  # keep whatever was installed before the failure
    ATOMIC = "atomic"    # validate the whole batch first, install nothing on failure
