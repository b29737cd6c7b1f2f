"""Read-only snapshots of CloudConvert jobs and tasks.

These mirror the objects returned by the jobs/tasks API and embedded in
webhook deliveries. The server omits absent data, so most fields are optional.
"""

from collections.abc import Mapping
from datetime import datetime
from enum import Enum
from types import MappingProxyType
from typing import Annotated, Any, ClassVar

from pydantic import (
    AfterValidator,
    BaseModel,
    ConfigDict,
    Field,
    JsonValue,
    PlainSerializer,
    model_validator,
)


def _freeze(value: Any) -> Any:
    """Recursively turn dicts into read-only mappings and lists into tuples."""
    if isinstance(value, Mapping):
        return MappingProxyType({key: _freeze(item) for key, item in value.items()})
    if isinstance(value, (list, tuple)):
        return tuple(_freeze(item) for item in value)
    return value


def _thaw(value: Any) -> Any:
    if isinstance(value, Mapping):
        return {key: _thaw(item) for key, item in value.items()}
    if isinstance(value, tuple):
        return [_thaw(item) for item in value]
    return value


# JSON data exposed read-only, serialized back as plain dicts and lists
FrozenJson = Annotated[JsonValue, AfterValidator(_freeze), PlainSerializer(_thaw)]
FrozenJsonObject = Annotated[
    dict[str, JsonValue], AfterValidator(_freeze), PlainSerializer(_thaw)
]
FrozenLinks = Annotated[dict[str, str], AfterValidator(_freeze), PlainSerializer(_thaw)]


class Status(str, Enum):
    """Status of a job or task."""

    waiting = "waiting"
    processing = "processing"
    finished = "finished"
    error = "error"


class TaskStatus(BaseModel):
    """The status of a task.

    Docs: https://cloudconvert.com/api/v2/tasks#tasks-show
    """

    id: str = Field(..., description="Task ID")
    job_id: str | None = Field(default=None, description="ID of the job containing this task")
    name: str | None = Field(default=None, description="Task name, if it is part of a job")
    operation: str = Field(..., description="Operation name, e.g. 'convert' or 'export/url'")
    status: Status

    # If status is error, this holds the error details.
    status_message: str | None = Field(default=None, alias="message")
    error_code: str | None = Field(default=None, alias="code")
    credits: int | None = Field(default=None, description="Credits consumed once finished")
    percent: int | None = None

    retry_of_task_id: str | None = None
    retries: tuple[str, ...] = ()
    depends_on_task_ids: tuple[str, ...] = ()

    engine: str | None = None
    engine_version: str | None = None

    payload: FrozenJson = None
    result: FrozenJsonObject | None = None
    links: FrozenLinks | None = None

    created_at: datetime | None = None
    started_at: datetime | None = None
    ended_at: datetime | None = None

    model_config: ClassVar[ConfigDict] = ConfigDict(frozen=True, populate_by_name=True)


class Job(BaseModel):
    """The status or results of a job.

    Every task's ``job_id`` equals the job ``id``: a task that omits it gets
    the parent's id during validation, a task naming another job is rejected.
    Nothing can be changed afterwards: tasks and id lists are tuples, and
    JSON objects are read-only mappings.

    Docs: https://cloudconvert.com/api/v2/jobs#jobs-show
    """

    id: str
    tag: str | None = None
    status: Status | None = None
    tasks: tuple[TaskStatus, ...] = ()
    links: FrozenLinks | None = None

    created_at: datetime | None = None
    started_at: datetime | None = None
    ended_at: datetime | None = None

    model_config: ClassVar[ConfigDict] = ConfigDict(frozen=True)

    @model_validator(mode="before")
    @classmethod
    def fill_task_job_ids(cls, data: Any) -> Any:
        if not isinstance(data, dict):
            return data

        job_id = data.get("id")
        tasks = data.get("tasks")
        if not isinstance(job_id, str) or not isinstance(tasks, (list, tuple)):
            return data

        filled: list[Any] = []
        for task in tasks:
            if isinstance(task, dict) and task.get("job_id") is None:
                task = {**task, "job_id": job_id}
            elif isinstance(task, TaskStatus) and task.job_id is None:
                task = task.model_copy(update={"job_id": job_id})
            filled.append(task)

        # Copy rather than mutate the caller's data
        return {**data, "tasks": filled}

    @model_validator(mode="after")
    def check_task_job_ids(self) -> "Job":
        for task in self.tasks:
            if task.job_id != self.id:
                raise ValueError(
                    f"Task {task.id} belongs to job {task.job_id}, not {self.id}"
                )
        return self

    def get_task_by_name(self, name: str) -> TaskStatus | None:
        """Return the first task called ``name``, if the job has one."""
        return next((task for task in self.tasks if task.name == name), None)

    @classmethod
    def from_response(cls, body: bytes | str) -> "Job":
        """Parse a ``{"data": {...}}`` jobs API response body."""
        return JobsOutput.model_validate_json(body).data


class JobsOutput(BaseModel):
    """Envelope of the jobs API responses."""

    data: Job
