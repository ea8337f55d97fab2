"""
Shared service plumbing.

A service wraps one Storage, checks caller input against the business
rules and raises ApplicationError subclasses. Errors propagate; the HTTP
layer decides how to log and render them.

    class FolderService(BaseService):
        def create_folder(self, user_id: str, data: FolderCreate) -> Folder:
            self._validate_required({"name": data.name}, ["name"])
            return self.storage.create_folder(user_id, name=data.name)
"""

from typing import Any

from notekeep.backend.core.exceptions import ValidationError
from notekeep.backend.core.logging import get_logger
from notekeep.backend.repositories.storage import Storage


def _is_blank(value: Any) -> bool:
    return value is None or (isinstance(value, str) and not value.strip())


class BaseService:
    """Storage access, input checks and operation logging for services."""

    def __init__(self, storage: Storage) -> None:
        self._storage = storage
        self._logger = get_logger(type(self).__module__)

    @property
    def storage(self) -> Storage:
        return self._storage

    def _validate_required(self, fields: dict[str, Any], field_names: list[str]) -> None:
        """
        Reject absent, None or whitespace-only values.

        Raises:
            ValidationError: With ``missing_fields`` listing every offender
        """
        missing = [name for name in field_names if _is_blank(fields.get(name))]
        if missing:
            raise ValidationError("Required fields missing", details={"missing_fields": missing})

    def _validate_string_length(
        self,
        value: str,
        field_name: str,
        min_length: int | None = None,
        max_length: int | None = None,
    ) -> None:
        """
        Raises:
            ValidationError: If len(value) falls outside [min_length, max_length]
        """
        if min_length is not None and len(value) < min_length:
            problem, limit = "too short", f"Minimum length is {min_length}"
        elif max_length is not None and len(value) > max_length:
            problem, limit = "too long", f"Maximum length is {max_length}"
        else:
            return
        raise ValidationError(f"{field_name} {problem}", details={field_name: limit})

    def _log_operation(self, operation: str, **context: Any) -> None:
        self._logger.info(operation, extra={"service": type(self).__name__, **context})

    def _log_debug(self, message: str, **context: Any) -> None:
        self._logger.debug(message, extra={"service": type(self).__name__, **context})
