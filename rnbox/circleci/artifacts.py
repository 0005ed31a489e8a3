"""Resolve the artifacts built by CircleCI for a branch.

Artifact URLs are in the shape of:
https://app.circleci.com/pipelines/github/facebook/react-native/<pipelineNumber>/workflows/<workflowId>/jobs/<jobNumber>/artifacts/<artifactName>

The resolver picks the newest pipeline of a branch, requires both the release
dry-run and the tests workflows to have succeeded, and collects the jobs of
both so that artifacts can be looked up by job name and path fragment.
"""

import shutil
from collections.abc import Callable
from concurrent.futures import ThreadPoolExecutor
from pathlib import Path

from rnbox.android import get_device_cpu_abi
from rnbox.config.settings import RnboxSettings, default_base_tmp_path
from rnbox.core.errors import (
    ArtifactNotFoundError,
    JobNotFoundError,
    PipelineNotFoundError,
    ResolverStateError,
    WorkflowNotFoundError,
    WorkflowNotReadyError,
)
from rnbox.core.structlog_logger import get_struct_logger, get_struct_logger_with_context

from .client import CircleCIClient
from .models import Job, Pipeline, Workflow


logger = get_struct_logger(__name__)

PACKAGE_AND_RELEASE_WORKFLOW = "package_and_publish_release_dryrun"
TESTS_WORKFLOW = "tests"

HERMES_DEBUG_JOB = "build_hermes_macos-Debug"
NPM_PACKAGE_JOB = "build_and_publish_npm_package-2"
ANDROID_TEST_JOB = "test_android"


class CircleCIArtifacts:
    """Looks up and downloads the artifacts of the last pipeline of a branch."""

    def __init__(
        self,
        circleci_token: str,
        base_tmp_path: Path | str | None = None,
        client: CircleCIClient | None = None,
        abi_provider: Callable[[], str] = get_device_cpu_abi,
    ):
        self._client = client or CircleCIClient(circleci_token)
        self._abi_provider = abi_provider
        self._base_tmp_path = Path(base_tmp_path or default_base_tmp_path())
        self._base_tmp_path.mkdir(parents=True, exist_ok=True)

        self._pipeline: Pipeline | None = None
        self._workflows: tuple[Workflow, Workflow] | None = None
        self._jobs: dict[str, Job] | None = None

    @classmethod
    def from_settings(cls, settings: RnboxSettings) -> "CircleCIArtifacts":
        token = settings.circleci_token or ""
        client = CircleCIClient(
            token,
            org=settings.circleci_org,
            repo=settings.circleci_repo,
            base_url=settings.circleci_api_url,
            timeout=settings.request_timeout,
        )
        return cls(token, settings.base_tmp_path, client=client)

    @property
    def base_tmp_path(self) -> Path:
        return self._base_tmp_path

    @property
    def pipeline(self) -> Pipeline | None:
        return self._pipeline

    @property
    def is_initialized(self) -> bool:
        return self._jobs is not None

    @property
    def jobs(self) -> dict[str, Job]:
        return dict(self._require_jobs())

    def initialize(self, branch_name: str) -> None:
        """Select the newest pipeline of ``branch_name`` and collect its jobs.

        Raises:
            ResolverStateError: If the resolver was already initialized
            PipelineNotFoundError: If the branch has no pipeline
            WorkflowNotFoundError: If one of the two workflows is missing
            WorkflowNotReadyError: If one of the two workflows did not succeed
            TransportError: If a CircleCI request fails
        """
        if self._jobs is not None:
            raise ResolverStateError("CircleCI artifacts are already initialized")

        log = get_struct_logger_with_context(__name__, branch=branch_name)
        log.info("fetching_circleci_info")
        pipeline = self._get_last_pipeline(branch_name)
        log.debug("pipeline_selected", pipeline=pipeline.to_dict())
        workflows = self._client.get_workflows(pipeline.id)

        package_and_release = self._get_workflow(workflows, PACKAGE_AND_RELEASE_WORKFLOW)
        self._raise_if_pending_or_unsuccessful(package_and_release)
        tests = self._get_workflow(workflows, TESTS_WORKFLOW)
        self._raise_if_pending_or_unsuccessful(tests)

        # Both futures only issue GETs through the shared session
        with ThreadPoolExecutor(max_workers=2) as executor:
            release_jobs = executor.submit(self._client.get_jobs, package_and_release.id)
            test_jobs = executor.submit(self._client.get_jobs, tests.id)
            job_lists = [release_jobs.result(), test_jobs.result()]

        jobs: dict[str, Job] = {}
        for job in (job for job_list in job_lists for job in job_list):
            jobs.setdefault(job.name, job)

        self._pipeline = pipeline
        self._workflows = (package_and_release, tests)
        self._jobs = jobs
        log.info(
            "circleci_info_ready",
            pipeline_number=pipeline.number,
            job_count=len(jobs),
        )

    def _get_last_pipeline(self, branch_name: str) -> Pipeline:
        pipelines = self._client.get_pipelines(branch_name)
        if not pipelines:
            raise PipelineNotFoundError(
                f"No CircleCI pipeline found for branch {branch_name}"
            )
        return pipelines[0]

    @staticmethod
    def _get_workflow(workflows: list[Workflow], name: str) -> Workflow:
        for workflow in workflows:
            if workflow.name == name:
                return workflow
        raise WorkflowNotFoundError(f"The pipeline has no {name} workflow")

    @staticmethod
    def _raise_if_pending_or_unsuccessful(workflow: Workflow) -> None:
        if not workflow.is_successful:
            raise WorkflowNotReadyError(workflow.name, workflow.status)

    def _require_jobs(self) -> dict[str, Job]:
        if self._jobs is None:
            raise ResolverStateError(
                "CircleCI artifacts are not initialized, call initialize() first"
            )
        return self._jobs

    def find_artifact_url(self, job_name: str, path_fragment: str) -> str:
        """URL of the first artifact of ``job_name`` whose path contains ``path_fragment``."""
        job = self._require_jobs().get(job_name)
        if job is None:
            raise JobNotFoundError(f"No job named {job_name} in the selected workflows")
        if job.job_number is None:
            raise JobNotFoundError(f"Job {job_name} has no job number, it never ran")

        artifacts = self._client.get_artifacts(job.job_number)
        for artifact in artifacts:
            if path_fragment in artifact.path:
                logger.debug(
                    "artifact_resolved", job=job_name, path=artifact.path, url=artifact.url
                )
                return artifact.url

        raise ArtifactNotFoundError(
            f"Job {job_name} has no artifact matching {path_fragment}"
        )

    def artifact_url_hermes_debug(self) -> str:
        return self.find_artifact_url(HERMES_DEBUG_JOB, "hermes-ios-debug.tar.gz")

    def artifact_url_for_maven_local(self) -> str:
        return self.find_artifact_url(NPM_PACKAGE_JOB, "maven-local.zip")

    def artifact_url_for_packaged_react_native(self) -> str:
        return self.find_artifact_url(NPM_PACKAGE_JOB, "react-native-1000.0.0-")

    def artifact_url_for_hermes_rntester_apk(self, emulator_arch: str | None = None) -> str:
        arch = emulator_arch or self._abi_provider()
        return self.find_artifact_url(
            ANDROID_TEST_JOB,
            f"rntester-apk/hermes/release/app-hermes-{arch}-release.apk",
        )

    def artifact_url_for_jsc_rntester_apk(self, emulator_arch: str | None = None) -> str:
        arch = emulator_arch or self._abi_provider()
        return self.find_artifact_url(
            ANDROID_TEST_JOB,
            f"rntester-apk/jsc/release/app-jsc-{arch}-release.apk",
        )

    def download_artifact(self, artifact_url: str, destination: Path | str) -> Path:
        """Replace whatever is at ``destination`` with the downloaded artifact."""
        destination = Path(destination)
        if destination.is_dir() and not destination.is_symlink():
            shutil.rmtree(destination)
        elif destination.exists() or destination.is_symlink():
            destination.unlink()

        logger.info("downloading_artifact", url=artifact_url, destination=str(destination))
        return self._client.download(artifact_url, destination)


def setup_circleci_artifacts(
    circleci_token: str | None,
    branch_name: str,
    base_tmp_path: Path | str | None = None,
    settings: RnboxSettings | None = None,
) -> CircleCIArtifacts | None:
    """Create and initialize a resolver, or return None without a token."""
    if not circleci_token:
        return None

    if settings is not None:
        update: dict[str, object] = {"circleci_token": circleci_token}
        if base_tmp_path is not None:
            update["base_tmp_path"] = Path(base_tmp_path)
        artifacts = CircleCIArtifacts.from_settings(settings.model_copy(update=update))
    else:
        artifacts = CircleCIArtifacts(circleci_token, base_tmp_path)

    artifacts.initialize(branch_name)
    return artifacts
