"""Pipeline output envelope.

Every operation returns a :class:`ToolResult`: a JSON payload plus an error
flag, rendered for callers as::

    {"content": [{"type": "text", "text": "<payload as JSON>"}], "isError": false}
"""

from __future__ import annotations

import json
from dataclasses import dataclass
from typing import Any, Optional

# Error kinds carried by failed results.
POLICY = "policy"
TRANSPORT = "transport"
REDIRECT = "redirect"
EXTRACTION = "extraction"
INVALID_PARAMS = "invalid_params"
UNKNOWN_TOOL = "unknown_tool"
INTERNAL = "internal"


@dataclass
class ToolResult:
    payload: dict[str, Any]
    is_error: bool = False
    error_kind: Optional[str] = None

    @classmethod
    def failure(cls, kind: str, message: str, **echo: Any) -> ToolResult:
        """Error result: ``{"error": message, **echo}``."""
        return cls(payload={"error": message, **echo}, is_error=True, error_kind=kind)

    def to_text(self) -> str:
        return json.dumps(self.payload, indent=2, ensure_ascii=False)

    def to_dict(self) -> dict[str, Any]:
        return {
            "content": [{"type": "text", "text": self.to_text()}],
            "isError": self.is_error,
        }
