"""CircleCI v2 API client for the endpoints the artifact resolver needs."""

import logging
from pathlib import Path
from typing import Any, TypeVar
from urllib.parse import urljoin

import requests
from pydantic import BaseModel
from pydantic import ValidationError as PydanticValidationError

from rnbox.config.settings import DEFAULT_CIRCLECI_API_URL
from rnbox.core.errors import AuthenticationError, TransportError

from .models import Artifact, ItemPage, Job, Pipeline, Workflow


logger = logging.getLogger(__name__)

ItemT = TypeVar("ItemT", bound=BaseModel)

DOWNLOAD_CHUNK_SIZE = 1024 * 1024


class CircleCIClient:
    """Client for the CircleCI v2 REST API."""

    def __init__(
        self,
        token: str,
        org: str = "facebook",
        repo: str = "react-native",
        base_url: str = DEFAULT_CIRCLECI_API_URL,
        session: requests.Session | None = None,
        timeout: float = 30.0,
    ):
        self.org = org
        self.repo = repo
        self.base_url = base_url if base_url.endswith("/") else f"{base_url}/"
        self.timeout = timeout
        self.session = session or requests.Session()
        self.session.headers.update(
            {
                "Circle-Token": token,
                "accept": "application/json",
            }
        )

    def _get_full_url(self, endpoint: str) -> str:
        """Get full URL for API endpoint."""
        return urljoin(self.base_url, endpoint)

    def _handle_response(self, response: requests.Response) -> Any:
        """Handle API response and raise appropriate exceptions."""
        try:
            response.raise_for_status()
        except requests.exceptions.HTTPError as e:
            if response.status_code in (401, 403):
                raise AuthenticationError(
                    "CircleCI rejected the API token",
                    status_code=response.status_code,
                ) from e
            raise TransportError(
                f"CircleCI request failed: {e}",
                status_code=response.status_code,
                response_data=response.text[:200] if response.text else None,
            ) from e

        try:
            return response.json()
        except ValueError as json_error:
            content_preview = response.text[:200] if response.text else "(empty)"
            raise TransportError(
                f"CircleCI returned invalid JSON response. Status: {response.status_code}, "
                f"Content preview: {content_preview}",
                status_code=response.status_code,
            ) from json_error

    def _get_items(
        self,
        endpoint: str,
        item_type: type[ItemT],
        params: dict[str, str] | None = None,
    ) -> list[ItemT]:
        """GET a list endpoint and return the items of its first page."""
        url = self._get_full_url(endpoint)
        logger.debug("GET %s params=%s", url, params)
        try:
            response = self.session.get(url, params=params, timeout=self.timeout)
        except requests.exceptions.RequestException as e:
            raise TransportError(f"Network error while requesting {url}: {e}") from e

        data = self._handle_response(response)
        try:
            page = ItemPage[item_type].model_validate(data)  # type: ignore[valid-type]
        except PydanticValidationError as e:
            raise TransportError(
                f"Unexpected payload from {url}: {e}",
                status_code=response.status_code,
                response_data=data,
            ) from e

        # Only the first page is read
        if page.next_page_token:
            logger.warning(
                "Response from %s has more pages, only the first %d items are used",
                url,
                len(page.items),
            )
        return page.items

    def get_pipelines(self, branch: str) -> list[Pipeline]:
        """List pipelines of a branch, newest first."""
        return self._get_items(
            f"project/gh/{self.org}/{self.repo}/pipeline",
            Pipeline,
            params={"branch": branch},
        )

    def get_workflows(self, pipeline_id: str) -> list[Workflow]:
        """List the workflows of a pipeline."""
        return self._get_items(f"pipeline/{pipeline_id}/workflow", Workflow)

    def get_jobs(self, workflow_id: str) -> list[Job]:
        """List the jobs of a workflow."""
        return self._get_items(f"workflow/{workflow_id}/job", Job)

    def get_artifacts(self, job_number: int) -> list[Artifact]:
        """List the artifacts of a job."""
        return self._get_items(
            f"project/gh/{self.org}/{self.repo}/{job_number}/artifacts", Artifact
        )

    def download(self, url: str, destination: Path) -> Path:
        """Stream ``url`` into ``destination``.

        A partially written file is removed when the transfer fails.
        """
        destination.parent.mkdir(parents=True, exist_ok=True)
        logger.debug("Downloading %s to %s", url, destination)
        try:
            with self.session.get(
                url, stream=True, allow_redirects=True, timeout=self.timeout
            ) as response:
                self._raise_for_download_status(response, url)
                with destination.open("wb") as fh:
                    for chunk in response.iter_content(chunk_size=DOWNLOAD_CHUNK_SIZE):
                        if chunk:
                            fh.write(chunk)
        except requests.exceptions.RequestException as e:
            destination.unlink(missing_ok=True)
            raise TransportError(f"Failed to download {url}: {e}") from e
        except TransportError:
            destination.unlink(missing_ok=True)
            raise

        return destination

    def _raise_for_download_status(self, response: requests.Response, url: str) -> None:
        try:
            response.raise_for_status()
        except requests.exceptions.HTTPError as e:
            if response.status_code in (401, 403):
                raise AuthenticationError(
                    f"Not allowed to download {url}", status_code=response.status_code
                ) from e
            raise TransportError(
                f"Failed to download {url}: {e}", status_code=response.status_code
            ) from e
