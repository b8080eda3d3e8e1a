"""Legal status transitions for a deduplication process.

``Error`` and ``Cleaned`` are terminal. Operators may still force a reset out
of ``Error`` by hand, but that is not something this table authorizes.
"""

from facededup.domain.entities.statuses import ProcessStatus

ALLOWED_TRANSITIONS: dict[ProcessStatus, frozenset[ProcessStatus]] = {
    ProcessStatus.READY_TO_START: frozenset({
        ProcessStatus.IN_PROCESSING,
        ProcessStatus.ERROR,
    }),
    ProcessStatus.IN_PROCESSING: frozenset({
        ProcessStatus.COMPLETED,
        ProcessStatus.PAUSED,
        ProcessStatus.ERROR,
        ProcessStatus.CONFLICT_DETECTED,
    }),
    ProcessStatus.COMPLETED: frozenset({
        ProcessStatus.CLEANING,
        ProcessStatus.ERROR,
    }),
    ProcessStatus.PAUSED: frozenset({
        ProcessStatus.IN_PROCESSING,
        ProcessStatus.ERROR,
    }),
    ProcessStatus.CONFLICT_DETECTED: frozenset({
        ProcessStatus.IN_PROCESSING,
        ProcessStatus.ERROR,
    }),
    ProcessStatus.CLEANING: frozenset({
        ProcessStatus.CLEANED,
        ProcessStatus.ERROR,
    }),
    ProcessStatus.ERROR: frozenset(),
    ProcessStatus.CLEANED: frozenset(),
}


def is_valid_transition(current: ProcessStatus, new: ProcessStatus) -> bool:
    """Return True if a process may move from ``current`` to ``new``."""
    return new in ALLOWED_TRANSITIONS.get(current, frozenset())


def is_terminal(status: ProcessStatus) -> bool:
    return not ALLOWED_TRANSITIONS.get(status)
