"""Preview models — compile state and log entries."""

from __future__ import annotations

from typing import Literal

from pydantic import BaseModel, Field

from backend.services.log_stream import LogEntry
from backend.services.preview_orchestrator import PreviewState


class SandboxModel(BaseModel):
    template_id: str
    entry: str
    files: dict[str, str]
    dependencies: dict[str, str] = Field(default_factory=dict)


class PreviewStateResponse(BaseModel):
    """What the preview endpoints return for one project."""

    project_name: str
    kind: Literal["unset", "bundled-frontend", "backend-service", "mobile-app"]
    status: Literal["idle", "compiling", "ready", "error"]
    preview_url: str | None = None
    api_url: str | None = None
    error_message: str | None = None
    session_id: str | None = None
    sandbox: SandboxModel | None = None
    render_error: str | None = None

    @classmethod
    def from_state(cls, state: PreviewState) -> PreviewStateResponse:
        return cls.model_validate(state.to_dict())


class LogEntryResponse(BaseModel):
    type: Literal["log", "error", "warn", "info"]
    message: str
    timestamp: str
    sequence: int

    @classmethod
    def from_entry(cls, entry: LogEntry) -> LogEntryResponse:
        return cls.model_validate(entry.to_dict())


class SwitchProjectRequest(BaseModel):
    model_config = {"extra": "forbid"}

    project_name: str | None = None


class ActivePreviewResponse(BaseModel):
    active_project: str | None
    state: PreviewStateResponse | None = None
    states: dict[str, PreviewStateResponse] = Field(default_factory=dict)


class ConsoleMessageRequest(BaseModel):
    """One console line captured from the in-browser sandbox."""

    model_config = {"extra": "forbid"}

    type: Literal["log", "error", "warn", "info"] = "log"
    message: str
    timestamp: str | None = None
