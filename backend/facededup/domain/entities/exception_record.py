"""Domain entity for unresolved comparison outcomes awaiting review."""

from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any

from .statuses import ExceptionStatus

_TRUTHY = frozenset({"true", "1", "yes", "y", "on"})


@dataclass
class ExceptionRecord:
    """A comparison the pipeline could not auto-decide.

    ``metadata`` is a schema-less side channel (match details, error
    information, processing dates). Updates merge into it key by key.
    """

    id: str
    process_id: str
    file_name: str
    candidate_file_names: list[str] = field(default_factory=list)
    comparison_score: float = 0.0
    status: ExceptionStatus = ExceptionStatus.PENDING
    created_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))
    updated_at: datetime | None = None
    metadata: dict[str, Any] = field(default_factory=dict)

    def update_status(
        self,
        status: ExceptionStatus,
        additional_metadata: dict[str, Any] | None = None,
    ) -> None:
        """Set a new status; new metadata keys overwrite or extend, never replace the map."""
        self.status = status
        self.updated_at = datetime.now(timezone.utc)
        if additional_metadata:
            self.metadata.update(additional_metadata)

    def get_metadata_value(self, key: str, default: Any = None, as_type: type | None = None) -> Any:
        """Read a metadata value, converting it to ``as_type`` when given.

        Missing keys, ``None`` values and failed conversions all yield ``default``.
        """
        value = self.metadata.get(key)
        if value is None:
            return default
        if as_type is None or isinstance(value, as_type):
            return value
        try:
            if as_type is bool:
                return str(value).strip().lower() in _TRUTHY
            if as_type is datetime:
                return datetime.fromisoformat(str(value))
            return as_type(value)
        except (TypeError, ValueError):
            return default
