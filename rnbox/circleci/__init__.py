"""CircleCI API access and artifact resolution."""

from .artifacts import CircleCIArtifacts, setup_circleci_artifacts
from .client import CircleCIClient
from .models import Artifact, Job, Pipeline, Workflow, WorkflowStatus


__all__ = [
    "CircleCIArtifacts",
    "CircleCIClient",
    "setup_circleci_artifacts",
    "Artifact",
    "Job",
    "Pipeline",
    "Workflow",
    "WorkflowStatus",
]
