"""Response shapes returned by trakt write endpoints.

Field names follow the JSON keys, so payloads map one to one.
"""

from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional


def _opt_int(value: Any) -> Optional[int]:
    try:
        return int(value) if value is not None else None
    except (TypeError, ValueError):
        return None


@dataclass
class Response:
    status: Optional[str] = None
    message: Optional[str] = None
    error: Optional[str] = None

    @classmethod
    def from_dict(cls, payload: Dict[str, Any]) -> "Response":
        payload = payload or {}
        return cls(
            status=payload.get("status"),
            message=payload.get("message"),
            error=payload.get("error"),
        )

    @property
    def is_success(self) -> bool:
        return self.status == "success"


@dataclass
class ListItemsResponse(Response):
    inserted: Optional[int] = None
    already_exist: Optional[int] = None
    skipped: Optional[int] = None
    skipped_array: List[Any] = field(default_factory=list)

    @classmethod
    def from_dict(cls, payload: Dict[str, Any]) -> "ListItemsResponse":
        payload = payload or {}
        skipped_array = payload.get("skipped_array")
        return cls(
            status=payload.get("status"),
            message=payload.get("message"),
            error=payload.get("error"),
            inserted=_opt_int(payload.get("inserted")),
            already_exist=_opt_int(payload.get("already_exist")),
            skipped=_opt_int(payload.get("skipped")),
            skipped_array=list(skipped_array) if isinstance(skipped_array, list) else [],
        )
