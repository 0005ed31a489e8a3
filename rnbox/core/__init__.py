from .errors import (
    ArtifactNotFoundError,
    AuthenticationError,
    ConfigError,
    JobNotFoundError,
    NotFoundError,
    PipelineNotFoundError,
    ProcessError,
    ResolutionError,
    ResolverStateError,
    RnboxError,
    TransportError,
    WorkflowNotFoundError,
    WorkflowNotReadyError,
)
from .logging import get_logger, setup_logging


__all__ = [
    "setup_logging",
    "get_logger",
    "RnboxError",
    "ConfigError",
    "ProcessError",
    "TransportError",
    "AuthenticationError",
    "ResolutionError",
    "NotFoundError",
    "PipelineNotFoundError",
    "WorkflowNotFoundError",
    "JobNotFoundError",
    "ArtifactNotFoundError",
    "WorkflowNotReadyError",
    "ResolverStateError",
]
