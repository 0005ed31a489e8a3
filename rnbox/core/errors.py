"""Error hierarchy for rnbox."""

from typing import Any


class RnboxError(Exception):
    """Base exception for all rnbox errors."""


class ConfigError(RnboxError):
    """Raised when settings are missing or invalid."""


class ProcessError(RnboxError):
    """Raised when an external command exits with a non-zero status."""

    def __init__(
        self,
        message: str,
        command: str | list[str] | None = None,
        return_code: int | None = None,
    ) -> None:
        super().__init__(message)
        self.command = command
        self.return_code = return_code


class TransportError(RnboxError):
    """Raised when a request to the CI provider fails at the HTTP level."""

    def __init__(
        self,
        message: str,
        status_code: int | None = None,
        response_data: Any | None = None,
    ) -> None:
        super().__init__(message)
        self.status_code = status_code
        self.response_data = response_data


class AuthenticationError(TransportError):
    """Raised when the CI provider rejects the API token."""


class ResolutionError(RnboxError):
    """Raised when CI artifacts cannot be resolved for a branch."""


class NotFoundError(ResolutionError):
    """An expected pipeline, workflow, job or artifact is absent."""


class PipelineNotFoundError(NotFoundError):
    """No pipeline exists for the requested branch."""


class WorkflowNotFoundError(NotFoundError):
    """The pipeline has no workflow with the requested name."""


class JobNotFoundError(NotFoundError):
    """No job with the requested name was collected from the workflows."""


class ArtifactNotFoundError(NotFoundError):
    """No artifact of the job matches the requested path fragment."""


class WorkflowNotReadyError(ResolutionError):
    """A workflow exists but has not finished successfully."""

    def __init__(self, workflow_name: str, status: str) -> None:
        super().__init__(
            f"The {workflow_name} workflow status is {status}. "
            "Please, wait for it to be finished before start testing or fix it"
        )
        self.workflow_name = workflow_name
        self.status = status


class ResolverStateError(ResolutionError):
    """The resolver was used before initialization or initialized twice."""
