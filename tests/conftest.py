"""Core test fixtures for the rnbox project."""

from collections.abc import Callable
from pathlib import Path
from typing import Any

import pytest
from typer.testing import CliRunner

from rnbox.circleci.artifacts import CircleCIArtifacts
from rnbox.circleci.client import CircleCIClient
from tests.helpers import API, PROJECT, FakeSession, items


@pytest.fixture
def cli_runner() -> CliRunner:
    """Return a Typer CLI test runner."""
    return CliRunner()


@pytest.fixture
def base_tmp_path(tmp_path: Path) -> Path:
    return tmp_path / "react-native-tmp"


@pytest.fixture
def happy_routes() -> dict[str, Any]:
    """CircleCI answers for branch "main" where both workflows succeeded."""
    return {
        f"{PROJECT}/pipeline": items(
            {"id": "p1", "number": 42}, {"id": "p0", "number": 41}
        ),
        f"{API}pipeline/p1/workflow": items(
            {"id": "w1", "name": "package_and_publish_release_dryrun", "status": "success"},
            {"id": "w2", "name": "tests", "status": "success"},
        ),
        f"{API}workflow/w1/job": items(
            {"name": "build_hermes_macos-Debug", "job_number": 7},
            {"name": "build_and_publish_npm_package-2", "job_number": 8},
        ),
        f"{API}workflow/w2/job": items({"name": "test_android", "job_number": 9}),
        f"{PROJECT}/7/artifacts": items(
            {"path": "hermes-ios-release.tar.gz", "url": "https://artifacts/7/release"},
            {"path": "hermes-ios-debug.tar.gz", "url": "https://artifacts/7/debug"},
        ),
        f"{PROJECT}/8/artifacts": items(
            {"path": "maven-local.zip", "url": "https://artifacts/8/maven"},
            {
                "path": "react-native-1000.0.0-abcdef.tgz",
                "url": "https://artifacts/8/react-native",
            },
        ),
        f"{PROJECT}/9/artifacts": items(
            {
                "path": "rntester-apk/hermes/debug/app-hermes-arm64-v8a-debug.apk",
                "url": "https://artifacts/9/hermes-debug",
            },
            {
                "path": "rntester-apk/hermes/release/app-hermes-arm64-v8a-release.apk",
                "url": "https://artifacts/9/hermes-arm64",
            },
            {
                "path": "home/circleci/rntester-apk/hermes/release/app-hermes-arm64-v8a-release.apk",
                "url": "https://artifacts/9/hermes-arm64-second",
            },
            {
                "path": "rntester-apk/jsc/release/app-jsc-x86_64-release.apk",
                "url": "https://artifacts/9/jsc-x86_64",
            },
        ),
    }


@pytest.fixture
def fake_session(happy_routes: dict[str, Any]) -> FakeSession:
    return FakeSession(happy_routes)


@pytest.fixture
def circleci_client(fake_session: FakeSession) -> CircleCIClient:
    return CircleCIClient("token-123", session=fake_session)  # type: ignore[arg-type]


@pytest.fixture
def artifacts_factory(
    base_tmp_path: Path, circleci_client: CircleCIClient
) -> Callable[..., CircleCIArtifacts]:
    def factory(**kwargs: Any) -> CircleCIArtifacts:
        kwargs.setdefault("client", circleci_client)
        kwargs.setdefault("abi_provider", lambda: "arm64-v8a")
        return CircleCIArtifacts("token-123", base_tmp_path, **kwargs)

    return factory
