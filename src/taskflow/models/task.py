"""Task domain model."""

from collections.abc import Mapping
from datetime import datetime
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, model_validator

from .enums import Priority, TaskStatus

# Python field name -> wire key used by the server
WIRE_KEYS: dict[str, str] = {
    "id": "_id",
    "task_name": "taskName",
    "description": "description",
    "priority": "priority",
    "status": "status",
    "due_date": "dueDate",
    "assignee": "assignee",
    "created_at": "createdAt",
    "updated_at": "updatedAt",
}

_FIELD_NAMES: dict[str, str] = {wire: name for name, wire in WIRE_KEYS.items()}
_FIELD_NAMES.update({name: name for name in WIRE_KEYS})
_FIELD_NAMES["title"] = "task_name"


class Task(BaseModel):
    """A task as reported by the server.

    Wire keys are camelCase (``taskName``, ``dueDate``) and the identifier
    travels as ``_id``; both spellings are accepted on input.
    """

    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    id: str = Field(alias="_id")
    task_name: str = Field(alias="taskName", min_length=1)
    description: str | None = None
    priority: Priority = Priority.P3
    status: TaskStatus = TaskStatus.TODO
    due_date: datetime | None = Field(default=None, alias="dueDate")
    assignee: str | None = None
    created_at: datetime | None = Field(default=None, alias="createdAt")
    updated_at: datetime | None = Field(default=None, alias="updatedAt")

    @model_validator(mode="before")
    @classmethod
    def _accept_title(cls, data: Any) -> Any:
        """Older responses (and parsed tasks) carry ``title`` instead of ``taskName``."""
        if isinstance(data, Mapping) and not data.get("taskName") and not data.get("task_name"):
            if data.get("title"):
                data = {**data, "taskName": data["title"]}
        return data

    @property
    def display_title(self) -> str:
        return self.task_name

    def merged(self, fields: Mapping[str, Any]) -> "Task":
        """Return a copy with ``fields`` merged in.

        Keys may be field names or wire keys. The id is never changed.
        """
        data = self.model_dump()
        for key, value in fields.items():
            name = _FIELD_NAMES.get(key)
            if name is None or name == "id":
                continue
            data[name] = value
        return Task.model_validate(data)


class TaskDraft(BaseModel):
    """Fields for a task that does not exist on the server yet."""

    title: str = Field(min_length=1)
    description: str = ""
    priority: Priority = Priority.P3
    status: TaskStatus = TaskStatus.TODO
    due_date: datetime | None = None
    assignee: str = ""

    def to_payload(self) -> dict[str, Any]:
        """Build the create request body (blank fields dropped)."""
        return strip_blank_fields(
            {
                "title": self.title,
                "description": self.description,
                "priority": self.priority.value,
                "status": self.status.value,
                "dueDate": self.due_date.isoformat() if self.due_date else None,
                "assignee": self.assignee,
            }
        )


def strip_blank_fields(fields: Mapping[str, Any]) -> dict[str, Any]:
    """Drop empty-string and None values.

    Omitted fields must not overwrite existing server values with blanks.
    """
    return {key: value for key, value in fields.items() if value is not None and value != ""}


def to_wire_fields(fields: Mapping[str, Any]) -> dict[str, Any]:
    """Translate a partial update into wire keys and JSON-ready values."""
    result: dict[str, Any] = {}
    for key, value in fields.items():
        name = _FIELD_NAMES.get(key, key)
        wire_key = WIRE_KEYS.get(name, key)
        if isinstance(value, (Priority, TaskStatus)):
            value = value.value
        elif isinstance(value, datetime):
            value = value.isoformat()
        result[wire_key] = value
    return result
