"""Download and stage the CircleCI artifacts a new project is built from."""

import json
import logging
import shutil
from dataclasses import dataclass
from pathlib import Path

from rnbox.circleci.artifacts import CircleCIArtifacts


logger = logging.getLogger(__name__)


@dataclass
class ProjectArtifacts:
    """Local paths of the artifacts needed to build RNTestProject."""

    maven_local_path: Path
    packaged_react_native_path: Path
    hermes_path: Path


def download_artifacts_from_circleci(
    circleci_artifacts: CircleCIArtifacts,
    maven_local_path: Path,
    local_node_tgz_path: Path,
) -> ProjectArtifacts:
    """Download Maven local repo, packaged react-native and Hermes.

    The packaged react-native tarball is copied to ``local_node_tgz_path`` so
    the template can depend on it with a ``file:`` URL.
    """
    maven_local_url = circleci_artifacts.artifact_url_for_maven_local()
    packaged_react_native_url = circleci_artifacts.artifact_url_for_packaged_react_native()
    hermes_url = circleci_artifacts.artifact_url_hermes_debug()

    packaged_react_native_path = (
        circleci_artifacts.base_tmp_path / "packaged-react-native.tar.gz"
    )
    hermes_path = circleci_artifacts.base_tmp_path / "hermes-ios-debug.tar.gz"

    logger.info("[Download] Maven Local Artifacts")
    circleci_artifacts.download_artifact(maven_local_url, maven_local_path)
    logger.info("[Download] Packaged React Native")
    circleci_artifacts.download_artifact(
        packaged_react_native_url, packaged_react_native_path
    )
    logger.info("[Download] Hermes")
    circleci_artifacts.download_artifact(hermes_url, hermes_path)

    logger.info(
        "Copying the packaged version of react native from %s to %s",
        packaged_react_native_path,
        local_node_tgz_path,
    )
    local_node_tgz_path.parent.mkdir(parents=True, exist_ok=True)
    shutil.copyfile(packaged_react_native_path, local_node_tgz_path)

    return ProjectArtifacts(
        maven_local_path=maven_local_path,
        packaged_react_native_path=packaged_react_native_path,
        hermes_path=hermes_path,
    )


def update_template_package(
    react_native_package_path: Path, dependencies: dict[str, str]
) -> Path:
    """Point dependencies of the project template at local packages.

    Returns:
        Path of the rewritten template package.json
    """
    package_json = react_native_package_path / "template" / "package.json"
    data = json.loads(package_json.read_text(encoding="utf-8"))

    for name, version in dependencies.items():
        for section in ("dependencies", "devDependencies"):
            if name in data.get(section, {}):
                data[section][name] = version
                break
        else:
            data.setdefault("dependencies", {})[name] = version

    package_json.write_text(json.dumps(data, indent=2) + "\n", encoding="utf-8")
    logger.debug("Updated %s with %s", package_json, dependencies)
    return package_json
