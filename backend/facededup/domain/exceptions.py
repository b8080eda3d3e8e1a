"""Domain-specific exceptions, framework-independent."""


class EntityNotFoundError(Exception):
    """Raised when a requested entity does not exist under any tried ID form."""

    def __init__(self, entity_type: str, entity_id: str):
        self.entity_type = entity_type
        self.entity_id = entity_id
        super().__init__(f"{entity_type} with id '{entity_id}' not found")


class InvalidInputError(Exception):
    """Raised when a request is missing required input (empty IDs, missing status...)."""


class InvalidStatusTransitionError(Exception):
    """Raised when a process action is not allowed from the process's current status."""

    def __init__(self, process_id: str, current_status: str, requested_status: str):
        self.process_id = process_id
        self.current_status = current_status
        self.requested_status = requested_status
        super().__init__(
            f"Process '{process_id}' cannot move from '{current_status}' to '{requested_status}'"
        )


class FaceApiError(Exception):
    """Raised when the external face-match API cannot serve a request.

    Carries the logical endpoint name and, when the API answered at all,
    the HTTP status code.
    """

    def __init__(self, message: str, endpoint: str, status_code: int | None = None):
        self.endpoint = endpoint
        self.status_code = status_code
        self.message = message
        super().__init__(f"[{endpoint}] {message}")
