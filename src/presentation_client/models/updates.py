"""Push notification payloads and the change events derived from them.

Wire format of an update notification:

    {
        "<rulesetId>": {
            "hierarchy": "FULL" | [<partial hierarchy change>, ...],   # optional
            "content": "FULL" | [<partial content change>, ...]        # optional
        },
        ...
    }

"FULL" means everything produced by the ruleset must be reloaded. A list
describes individual changes (opaque to this client).
"""

from __future__ import annotations

__all__ = [
    "ContentChangeEventArgs",
    "ContentUpdateInfo",
    "HierarchyChangeEventArgs",
    "HierarchyUpdateInfo",
    "RulesetUpdateInfo",
    "UpdateInfo",
    "parse_update_info",
]

from dataclasses import dataclass
from typing import Any, Literal

from pydantic import BaseModel, ConfigDict, TypeAdapter, ValidationError

from presentation_client.models.rulesets import Ruleset

HierarchyUpdateInfo = Literal["FULL"] | list[Any]
ContentUpdateInfo = Literal["FULL"] | list[Any]


class RulesetUpdateInfo(BaseModel):
    """Changes reported for one ruleset. A missing field means no changes of that kind."""

    hierarchy: HierarchyUpdateInfo | None = None
    content: ContentUpdateInfo | None = None

    model_config = ConfigDict(extra="ignore")

    @property
    def is_empty(self) -> bool:
        """Whether neither hierarchy nor content changes are reported."""
        return self.hierarchy is None and self.content is None


UpdateInfo = dict[str, RulesetUpdateInfo]

_payload_adapter: TypeAdapter[dict[str, Any]] = TypeAdapter(dict[str, Any])


def parse_update_info(payload: Any) -> tuple[UpdateInfo, dict[str, ValidationError]]:
    """Validate a raw notification payload entry by entry.

    Key order of the payload is preserved. An entry with the wrong shape is
    left out of the result and reported separately, so the other rulesets
    of the same notification are still delivered.

    Args:
        payload: Decoded JSON object of the notification.

    Returns:
        Tuple of (valid entries by ruleset id, validation error by ruleset id).

    Raises:
        pydantic.ValidationError: If the payload is not a JSON object.
    """
    entries = _payload_adapter.validate_python(payload)
    info: UpdateInfo = {}
    errors: dict[str, ValidationError] = {}
    for ruleset_id, entry in entries.items():
        try:
            info[ruleset_id] = RulesetUpdateInfo.model_validate(entry)
        except ValidationError as e:
            errors[ruleset_id] = e
    return info, errors


@dataclass(frozen=True)
class HierarchyChangeEventArgs:
    """Hierarchy produced by a ruleset changed."""

    ruleset: Ruleset
    update_info: HierarchyUpdateInfo


@dataclass(frozen=True)
class ContentChangeEventArgs:
    """Content produced by a ruleset changed."""

    ruleset: Ruleset
    update_info: ContentUpdateInfo
