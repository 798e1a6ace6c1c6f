from __future__ import annotations

import uuid
from datetime import datetime, timezone


def generate_run_id(prefix: str = "bktreex") -> str:
    """Return a sortable, collision-resistant identifier for one benchmark run."""

    stamp = datetime.now(timezone.utc).strftime("%Y%m%dT%H%M%SZ")
    return f"{prefix}-{stamp}-{uuid.uuid4().hex[:8]}"


def utc_timestamp() -> str:
    return datetime.now(timezone.utc).isoformat()


__all__ = ["generate_run_id", "utc_timestamp"]
