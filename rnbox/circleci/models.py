"""Models for CircleCI v2 API payloads."""

from enum import Enum
from typing import Generic, TypeVar

from pydantic import BaseModel, ConfigDict, Field

from rnbox.models.base import RnboxBaseModel


class WorkflowStatus(str, Enum):
    """Workflow states reported by CircleCI."""

    SUCCESS = "success"
    RUNNING = "running"
    NOT_RUN = "not_run"
    FAILED = "failed"
    ERROR = "error"
    FAILING = "failing"
    ON_HOLD = "on_hold"
    CANCELED = "canceled"
    UNAUTHORIZED = "unauthorized"


class CircleCIModel(RnboxBaseModel):
    """Base for API payloads, string values are compared exactly as sent."""

    model_config = ConfigDict(str_strip_whitespace=False)


class Pipeline(CircleCIModel):
    """One CI run for a branch."""

    id: str
    number: int


class Workflow(CircleCIModel):
    """A named group of jobs within a pipeline."""

    id: str
    name: str
    # Kept as a plain string, CircleCI adds states over time
    status: str

    @property
    def is_successful(self) -> bool:
        return self.status == WorkflowStatus.SUCCESS.value


class Job(CircleCIModel):
    """A single unit of work within a workflow."""

    name: str
    job_number: int | None = None
    id: str | None = None
    status: str | None = None


class Artifact(CircleCIModel):
    """A file produced by a job."""

    path: str
    url: str
    node_index: int = 0


ItemT = TypeVar("ItemT", bound=BaseModel)


class ItemPage(BaseModel, Generic[ItemT]):
    """Envelope shared by every CircleCI list endpoint."""

    items: list[ItemT]
    next_page_token: str | None = Field(default=None)
