"""Request variants accepted by the manager and the canonical transport request.

Callers build one of a closed set of request dataclasses. The options
builder normalizes any of them into a single CanonicalRequest (ruleset
requests) or CanonicalLabelRequest (display label requests), which is what
the transport receives.

Variant hierarchy:
    RequestOptions                      connection, locale, unit_system
    ├── RulesetRequestOptions           + ruleset_or_id, ruleset_id, ruleset_variables
    │   ├── HierarchyRequestOptions     + paging, parent_key
    │   ├── HierarchyLoadRequestOptions + priority
    │   ├── FilterByTextRequestOptions  + filter_text
    │   ├── NodePathsRequestOptions     + instance_paths, marked_index
    │   ├── ContentDescriptorRequestOptions + display_type, keys, selection
    │   ├── ContentRequestOptions       + descriptor, keys, paging
    │   ├── DistinctValuesRequestOptions + descriptor, keys, field_descriptor, paging
    │   └── HierarchyCompareOptions     + prev, expanded_node_keys
    ├── DisplayLabelRequestOptions      + key
    └── DisplayLabelsRequestOptions     + keys
"""

from __future__ import annotations

__all__ = [
    "CanonicalLabelRequest",
    "CanonicalRequest",
    "ContentDescriptorRequestOptions",
    "ContentRequestOptions",
    "DisplayLabelRequestOptions",
    "DisplayLabelsRequestOptions",
    "DistinctValuesRequestOptions",
    "FilterByTextRequestOptions",
    "HierarchyCompareOptions",
    "HierarchyCompareState",
    "HierarchyLoadRequestOptions",
    "HierarchyRequestOptions",
    "NodePathsRequestOptions",
    "RequestOptions",
    "RulesetRequestOptions",
    "to_wire",
]

import dataclasses
from dataclasses import dataclass, field
from enum import Enum
from typing import TYPE_CHECKING, Any

from pydantic import BaseModel

from presentation_client.models.common import InstanceKey, PresentationUnitSystem, RequestPriority
from presentation_client.models.content import Descriptor
from presentation_client.models.paging import PagingWindow
from presentation_client.models.rulesets import Ruleset, RulesetVariable

if TYPE_CHECKING:
    from presentation_client.connections import Connection


def to_wire(value: Any) -> Any:
    """Convert a request value into JSON-compatible data.

    Objects exposing to_wire() are converted through it, other pydantic
    models are dumped by alias, enums become their values and containers are
    converted recursively.

    Args:
        value: Value to convert.

    Returns:
        JSON-compatible value.
    """
    if hasattr(value, "to_wire"):
        return value.to_wire()
    if isinstance(value, BaseModel):
        return value.model_dump(by_alias=True, exclude_none=True)
    if isinstance(value, Enum):
        return value.value
    if isinstance(value, dict):
        return {key: to_wire(item) for key, item in value.items()}
    if isinstance(value, (list, tuple)):
        return [to_wire(item) for item in value]
    return value


# =============================================================================
# Request variants
# =============================================================================


@dataclass(kw_only=True)
class RequestOptions:
    """Fields common to all requests.

    Attributes:
        connection: Connection the request is made for.
        locale: Locale for labels; the manager's active locale if None.
        unit_system: Unit system for values; the manager's active one if None.
    """

    connection: "Connection"
    locale: str | None = None
    unit_system: PresentationUnitSystem | None = None

    def operation_params(self) -> dict[str, Any]:
        """Operation-specific fields in wire form (camelCase keys)."""
        return {}


@dataclass(kw_only=True)
class RulesetRequestOptions(RequestOptions):
    """Request evaluated against a ruleset.

    Attributes:
        ruleset_or_id: Ruleset object, ruleset id, or "" for none.
        ruleset_id: Ruleset id, used when ruleset_or_id is empty.
        ruleset_variables: Variables sent ahead of the manager's variables.
    """

    ruleset_or_id: Ruleset | str = ""
    ruleset_id: str | None = None
    ruleset_variables: list[RulesetVariable] | None = None


@dataclass(kw_only=True)
class HierarchyRequestOptions(RulesetRequestOptions):
    """Nodes (or node count) under a parent node; root nodes when parent_key is None."""

    paging: PagingWindow | None = None
    parent_key: dict[str, Any] | None = None

    def operation_params(self) -> dict[str, Any]:
        return {"parentKey": to_wire(self.parent_key)}


@dataclass(kw_only=True)
class HierarchyLoadRequestOptions(RulesetRequestOptions):
    """Ask the backend to pre-create the whole hierarchy."""

    priority: int = RequestPriority.PRELOAD

    def operation_params(self) -> dict[str, Any]:
        return {"priority": int(self.priority)}


@dataclass(kw_only=True)
class FilterByTextRequestOptions(RulesetRequestOptions):
    """Paths to nodes whose labels match a filter text."""

    filter_text: str

    def operation_params(self) -> dict[str, Any]:
        return {"filterText": self.filter_text}


@dataclass(kw_only=True)
class NodePathsRequestOptions(RulesetRequestOptions):
    """Paths to nodes for given instance key paths."""

    instance_paths: list[list[InstanceKey]]
    marked_index: int = 0

    def operation_params(self) -> dict[str, Any]:
        return {"paths": to_wire(self.instance_paths), "markedIndex": self.marked_index}


@dataclass(kw_only=True)
class ContentDescriptorRequestOptions(RulesetRequestOptions):
    """Content descriptor for a set of input keys."""

    display_type: str
    keys: Any
    selection: dict[str, Any] | None = None

    def operation_params(self) -> dict[str, Any]:
        return {
            "displayType": self.display_type,
            "keys": to_wire(self.keys),
            "selection": to_wire(self.selection),
        }


@dataclass(kw_only=True)
class ContentRequestOptions(RulesetRequestOptions):
    """Content (or content set size) for a descriptor and input keys.

    descriptor is either a full Descriptor or a descriptor overrides dict.
    """

    descriptor: Descriptor | dict[str, Any]
    keys: Any
    paging: PagingWindow | None = None

    def operation_params(self) -> dict[str, Any]:
        return {"descriptor": _descriptor_to_wire(self.descriptor), "keys": to_wire(self.keys)}


@dataclass(kw_only=True)
class DistinctValuesRequestOptions(RulesetRequestOptions):
    """Distinct values of one content field."""

    descriptor: Descriptor | dict[str, Any]
    keys: Any
    field_descriptor: dict[str, Any]
    paging: PagingWindow | None = None

    def operation_params(self) -> dict[str, Any]:
        return {
            "descriptor": _descriptor_to_wire(self.descriptor),
            "keys": to_wire(self.keys),
            "fieldDescriptor": to_wire(self.field_descriptor),
        }


@dataclass(kw_only=True)
class HierarchyCompareState:
    """Ruleset and variables a hierarchy was previously created with.

    A state with neither field set means "nothing changed".
    """

    ruleset_or_id: Ruleset | str | None = None
    ruleset_variables: list[RulesetVariable] | None = None

    @property
    def is_empty(self) -> bool:
        """Whether the state carries no distinguishing fields."""
        return not self.ruleset_or_id and self.ruleset_variables is None

    def to_wire(self) -> dict[str, Any]:
        """Convert to the wire representation."""
        data: dict[str, Any] = {}
        if self.ruleset_or_id:
            data["rulesetOrId"] = to_wire(self.ruleset_or_id)
        if self.ruleset_variables is not None:
            data["rulesetVariables"] = to_wire(self.ruleset_variables)
        return data


@dataclass(kw_only=True)
class HierarchyCompareOptions(RulesetRequestOptions):
    """Compare the hierarchy created with `prev` state against the current one."""

    prev: HierarchyCompareState = field(default_factory=HierarchyCompareState)
    expanded_node_keys: list[dict[str, Any]] | None = None

    def operation_params(self) -> dict[str, Any]:
        return {"prev": self.prev.to_wire(), "expandedNodeKeys": to_wire(self.expanded_node_keys)}


@dataclass(kw_only=True)
class DisplayLabelRequestOptions(RequestOptions):
    """Display label of one instance."""

    key: InstanceKey

    def operation_params(self) -> dict[str, Any]:
        return {"key": to_wire(self.key)}


@dataclass(kw_only=True)
class DisplayLabelsRequestOptions(RequestOptions):
    """Display labels of many instances, in key order."""

    keys: list[InstanceKey]

    def operation_params(self) -> dict[str, Any]:
        return {"keys": to_wire(self.keys)}


def _descriptor_to_wire(descriptor: Descriptor | dict[str, Any]) -> dict[str, Any]:
    if isinstance(descriptor, Descriptor):
        return descriptor.create_descriptor_overrides()
    return to_wire(descriptor)


# =============================================================================
# Canonical requests (what the transport receives)
# =============================================================================


@dataclass(frozen=True)
class CanonicalRequest:
    """Normalized ruleset request.

    Attributes:
        imodel: Serializable token of the connection.
        ruleset_or_id: Resolved ruleset object or ruleset id ("" for none).
        ruleset_variables: Request-supplied variables followed by the manager's.
        locale: Effective locale.
        unit_system: Effective unit system.
        paging: Window for paged operations.
        params: Operation-specific fields in wire form.
    """

    imodel: dict[str, Any]
    ruleset_or_id: Ruleset | str
    ruleset_variables: list[RulesetVariable]
    locale: str | None = None
    unit_system: PresentationUnitSystem | None = None
    paging: PagingWindow | None = None
    params: dict[str, Any] = field(default_factory=dict)

    @property
    def ruleset_id(self) -> str:
        """Id of the resolved ruleset ("" for none)."""
        if isinstance(self.ruleset_or_id, Ruleset):
            return self.ruleset_or_id.id
        return self.ruleset_or_id

    def with_paging(self, paging: PagingWindow) -> "CanonicalRequest":
        """Return a copy requesting another window."""
        return dataclasses.replace(self, paging=paging)

    def with_params(self, **params: Any) -> "CanonicalRequest":
        """Return a copy with some operation fields replaced."""
        return dataclasses.replace(self, params={**self.params, **params})

    def to_wire(self) -> dict[str, Any]:
        """Convert to the JSON request body. Fields that are None are omitted."""
        data: dict[str, Any] = {
            "imodel": self.imodel,
            "rulesetOrId": to_wire(self.ruleset_or_id),
            "rulesetVariables": to_wire(self.ruleset_variables),
        }
        if self.locale is not None:
            data["locale"] = self.locale
        if self.unit_system is not None:
            data["unitSystem"] = self.unit_system.value
        if self.paging is not None:
            data["paging"] = self.paging.to_wire()
        data.update({key: value for key, value in self.params.items() if value is not None})
        return data


@dataclass(frozen=True)
class CanonicalLabelRequest:
    """Normalized display label request (no ruleset involved)."""

    imodel: dict[str, Any]
    locale: str | None = None
    unit_system: PresentationUnitSystem | None = None
    params: dict[str, Any] = field(default_factory=dict)

    def with_params(self, **params: Any) -> "CanonicalLabelRequest":
        """Return a copy with some operation fields replaced."""
        return dataclasses.replace(self, params={**self.params, **params})

    def to_wire(self) -> dict[str, Any]:
        """Convert to the JSON request body. Fields that are None are omitted."""
        data: dict[str, Any] = {"imodel": self.imodel}
        if self.locale is not None:
            data["locale"] = self.locale
        if self.unit_system is not None:
            data["unitSystem"] = self.unit_system.value
        data.update({key: value for key, value in self.params.items() if value is not None})
        return data
