"""Data models exchanged with the presentation backend.

- paging.py: PagingWindow and PagedResult
- rulesets.py: Ruleset and typed RulesetVariable values
- common.py: unit systems, request priorities, instance keys
- content.py: descriptor and content wrappers
- updates.py: push notification payloads and change event arguments
- requests.py: caller request variants and the canonical transport request

Nodes, content items, labels and descriptors are opaque JSON payloads.
"""

from .common import InstanceKey, PresentationUnitSystem, RequestPriority
from .content import (
    DESCRIPTOR_OVERRIDE_FIELDS,
    Content,
    ContentAndSize,
    Descriptor,
    NodesAndCount,
)
from .paging import PagedResult, PagingWindow
from .requests import (
    CanonicalLabelRequest,
    CanonicalRequest,
    ContentDescriptorRequestOptions,
    ContentRequestOptions,
    DisplayLabelRequestOptions,
    DisplayLabelsRequestOptions,
    DistinctValuesRequestOptions,
    FilterByTextRequestOptions,
    HierarchyCompareOptions,
    HierarchyCompareState,
    HierarchyLoadRequestOptions,
    HierarchyRequestOptions,
    NodePathsRequestOptions,
    RequestOptions,
    RulesetRequestOptions,
    to_wire,
)
from .rulesets import Ruleset, RulesetVariable, VariableValue, VariableValueType
from .updates import (
    ContentChangeEventArgs,
    ContentUpdateInfo,
    HierarchyChangeEventArgs,
    HierarchyUpdateInfo,
    RulesetUpdateInfo,
    UpdateInfo,
    parse_update_info,
)

__all__ = [
    # Paging
    "PagedResult",
    "PagingWindow",
    # Rulesets
    "Ruleset",
    "RulesetVariable",
    "VariableValue",
    "VariableValueType",
    # Common
    "InstanceKey",
    "PresentationUnitSystem",
    "RequestPriority",
    # Content
    "Content",
    "ContentAndSize",
    "DESCRIPTOR_OVERRIDE_FIELDS",
    "Descriptor",
    "NodesAndCount",
    # Updates
    "ContentChangeEventArgs",
    "ContentUpdateInfo",
    "HierarchyChangeEventArgs",
    "HierarchyUpdateInfo",
    "RulesetUpdateInfo",
    "UpdateInfo",
    "parse_update_info",
    # Requests
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
