from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Optional


@dataclass
class PollContext:
    request_id: str

    status: Optional[str] = None
    data: Any = None

    candidates: list = field(default_factory=list)
    saved: int = 0
    failed: int = 0
