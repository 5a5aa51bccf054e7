"""
Run-scoped context for an evaluation run.

RunContext carries the run's correlation ID and start time. It is created once
per run and handed to the HTTP client so every outbound provider request can be
traced back to the run that issued it.
"""

from __future__ import annotations

import uuid
from datetime import datetime, timezone

from pydantic import BaseModel, Field


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class RunContext(BaseModel):
    """Run-scoped context for provider calls.

    Attributes:
        run_id: Unique identifier for the run, used for log correlation.
        started_at: UTC time the run was started.
        provider: Name of the chat backend selected for the run.
    """

    run_id: str
    started_at: datetime = Field(default_factory=_utcnow)
    provider: str | None = None

    model_config = {"frozen": True}

    @classmethod
    def new(cls, provider: str | None = None) -> "RunContext":
        """Create a context with a fresh run ID."""
        return cls(run_id=uuid.uuid4().hex[:12], provider=provider)

    def elapsed_seconds(self) -> float:
        """Seconds since the run started."""
        return (_utcnow() - self.started_at).total_seconds()

    def get_headers(self) -> dict[str, str]:
        """Get HTTP headers for propagating context.

        Returns:
            Dictionary of headers to inject into outbound requests.
        """
        return {"X-Request-Id": self.run_id}
