"""Remote compile service client."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from urllib.parse import urlsplit

import httpx

from backend.config import settings
from engine.workspace.classifier import BACKEND_SERVICE, MOBILE_APP

logger = logging.getLogger(__name__)

# Which response key carries the URL for each remote kind
_URL_KEYS = {
    MOBILE_APP: "previewUrl",
    BACKEND_SERVICE: "apiUrl",
}


class CompileRequestError(Exception):
    """The compile service reported an error, or the call itself failed."""


@dataclass(frozen=True)
class CompileResult:
    kind: str
    url: str


def extract_session_id(url: str) -> str | None:
    """The session id is the last non-empty segment of the URL path."""
    segments = [s for s in urlsplit(url).path.split("/") if s]
    return segments[-1] if segments else None


class CompileClient:
    """
    Posts a project's flattened files to the kind-specific compile endpoint.

    A single AsyncClient is reused across requests; call aclose() on shutdown.
    """

    def __init__(
        self,
        base_url: str | None = None,
        timeout: float | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self.base_url = (base_url or settings.COMPILE_SERVICE_URL).rstrip("/")
        self.client = httpx.AsyncClient(
            base_url=self.base_url,
            timeout=timeout if timeout is not None else settings.COMPILE_TIMEOUT_SECONDS,
            transport=transport,
        )
        self.endpoints = {
            MOBILE_APP: settings.MOBILE_COMPILE_PATH,
            BACKEND_SERVICE: settings.BACKEND_COMPILE_PATH,
        }

    async def compile(self, kind: str, project_name: str, files: dict[str, str]) -> CompileResult:
        """
        Request a remote build.

        Args:
            kind: mobile-app or backend-service
            project_name: Project (top-level folder) name
            files: Flattened path → content map

        Returns:
            CompileResult carrying the preview/API URL

        Raises:
            CompileRequestError: on service-reported errors and transport faults
        """
        if kind not in self.endpoints:
            raise ValueError(f"No remote compile endpoint for kind {kind!r}")

        try:
            res = await self.client.post(
                self.endpoints[kind],
                json={"projectName": project_name, "files": files},
            )
        except httpx.HTTPError as e:
            logger.warning("compile_client: request for %s failed: %s", project_name, e)
            raise CompileRequestError(str(e) or e.__class__.__name__) from e

        try:
            body = res.json()
        except ValueError:
            body = None

        if isinstance(body, dict) and body.get("error"):
            raise CompileRequestError(str(body["error"]))
        if res.is_error:
            raise CompileRequestError(f"Compile service returned HTTP {res.status_code}")
        if not isinstance(body, dict):
            raise CompileRequestError("Compile service returned an invalid response")

        url = body.get(_URL_KEYS[kind])
        if not isinstance(url, str) or not url:
            raise CompileRequestError(f"Compile service response is missing {_URL_KEYS[kind]}")

        logger.info("compile_client: %s compiled as %s → %s", project_name, kind, url)
        return CompileResult(kind=kind, url=url)

    async def aclose(self) -> None:
        await self.client.aclose()
