"""Frontend presentation manager.

PresentationManager is the object application code talks to. It owns the
per-session state (ruleset registry, ruleset variables, known connections,
active locale and unit system) and wires the request pipeline:

    request variant
        -> RequestOptionsBuilder (token, ruleset, variables, locale)
        -> assemble_paged_response (paged operations only)
        -> PresentationTransport
        -> result

Push notifications are routed by an UpdateEventRouter into
on_hierarchy_changed / on_content_changed for the manager's lifetime.

There is no global manager: create one per session and dispose it.

Usage:
    manager = PresentationManager.create(
        PresentationManagerProps(transport=HttpPresentationTransport(url), push_channel=channel)
    )
    async with manager:
        nodes = await manager.get_nodes(HierarchyRequestOptions(connection=conn, ruleset_or_id="Tree"))
"""

from __future__ import annotations

__all__ = [
    "PresentationManager",
    "PresentationManagerProps",
]

import inspect
from dataclasses import dataclass
from types import TracebackType
from typing import Any

from presentation_client.comparison import HierarchyComparator
from presentation_client.connections import Connection, ConnectionLifecycleTracker
from presentation_client.events import Event
from presentation_client.exceptions import PresentationError, PresentationStatus
from presentation_client.models.common import PresentationUnitSystem
from presentation_client.models.content import Content, ContentAndSize, Descriptor, NodesAndCount
from presentation_client.models.paging import PagedResult, PagingWindow
from presentation_client.models.requests import (
    CanonicalRequest,
    ContentDescriptorRequestOptions,
    ContentRequestOptions,
    DisplayLabelRequestOptions,
    DisplayLabelsRequestOptions,
    DistinctValuesRequestOptions,
    FilterByTextRequestOptions,
    HierarchyCompareOptions,
    HierarchyLoadRequestOptions,
    HierarchyRequestOptions,
    NodePathsRequestOptions,
)
from presentation_client.models.updates import ContentChangeEventArgs, HierarchyChangeEventArgs
from presentation_client.options import RequestOptionsBuilder
from presentation_client.paging import assemble_paged_response
from presentation_client.rulesets import RulesetManager
from presentation_client.transport.protocol import PresentationTransport
from presentation_client.transport.push import PushChannel
from presentation_client.updates import UpdateEventRouter
from presentation_client.variables import RulesetVariablesManager, RulesetVariablesOverlay


@dataclass
class PresentationManagerProps:
    """Construction properties of a PresentationManager.

    Attributes:
        transport: Request/response channel to the backend.
        push_channel: Notification channel. None disables change events.
        push_enabled: Whether push delivery is meaningful in this
            environment. When False the manager never subscribes.
        active_locale: Locale used by requests that do not specify one.
        active_unit_system: Unit system used by requests that do not specify one.
        rulesets: Ruleset registry. A new empty one if not given.
    """

    transport: PresentationTransport
    push_channel: PushChannel | None = None
    push_enabled: bool = True
    active_locale: str | None = None
    active_unit_system: PresentationUnitSystem | None = None
    rulesets: RulesetManager | None = None


class PresentationManager:
    """Client-side mediator between application code and the presentation backend."""

    def __init__(self, props: PresentationManagerProps) -> None:
        """Initialize the manager and subscribe to update notifications.

        Prefer PresentationManager.create().

        Args:
            props: Construction properties.
        """
        self._transport = props.transport
        self._push_channel = props.push_channel
        self._active_locale = props.active_locale
        self._active_unit_system = props.active_unit_system
        self._rulesets = props.rulesets if props.rulesets is not None else RulesetManager()
        self._overlay = RulesetVariablesOverlay()
        self._tracker = ConnectionLifecycleTracker()
        self._disposed = False

        self._builder = RequestOptionsBuilder(
            overlay=self._overlay,
            registry=self._rulesets,
            tracker=self._tracker,
            on_first_use=lambda connection: self.on_new_connection(connection),
            active_locale=lambda: self._active_locale,
            active_unit_system=lambda: self._active_unit_system,
        )
        self._comparator = HierarchyComparator(self._builder, self._transport)
        self._router = UpdateEventRouter(self._push_channel, self._rulesets, enabled=props.push_enabled)
        self._router.subscribe()

    @classmethod
    def create(cls, props: PresentationManagerProps) -> "PresentationManager":
        """Create a manager."""
        return cls(props)

    # =========================================================================
    # Session state
    # =========================================================================

    @property
    def active_locale(self) -> str | None:
        return self._active_locale

    @active_locale.setter
    def active_locale(self, locale: str | None) -> None:
        self._active_locale = locale

    @property
    def active_unit_system(self) -> PresentationUnitSystem | None:
        return self._active_unit_system

    @active_unit_system.setter
    def active_unit_system(self, unit_system: PresentationUnitSystem | None) -> None:
        self._active_unit_system = unit_system

    @property
    def on_hierarchy_changed(self) -> Event[HierarchyChangeEventArgs]:
        """Raised when the hierarchy produced by a registered ruleset changes."""
        return self._router.hierarchy_changed

    @property
    def on_content_changed(self) -> Event[ContentChangeEventArgs]:
        """Raised when the content produced by a registered ruleset changes."""
        return self._router.content_changed

    @property
    def router(self) -> UpdateEventRouter:
        return self._router

    @property
    def is_disposed(self) -> bool:
        return self._disposed

    def rulesets(self) -> RulesetManager:
        """Return the ruleset registry of this manager."""
        return self._rulesets

    def vars(self, ruleset_id: str) -> RulesetVariablesManager:
        """Return the ruleset variables of a ruleset."""
        return self._overlay.vars(ruleset_id)

    def on_new_connection(self, connection: Connection) -> None:
        """Called the first time a connection is used, and again after it is reopened.

        Override to set up per-connection state. The default does nothing.
        """

    # =========================================================================
    # Hierarchy
    # =========================================================================

    async def get_nodes_count(self, options: HierarchyRequestOptions) -> int:
        """Return the number of nodes under options.parent_key (root nodes if None)."""
        request = await self._build(options)
        return await self._transport.get_nodes_count(request)

    async def get_nodes(self, options: HierarchyRequestOptions) -> list[Any]:
        """Return the nodes of the requested window."""
        result = await self._paged(options, self._transport.get_paged_nodes)
        return result.items

    async def get_nodes_and_count(self, options: HierarchyRequestOptions) -> NodesAndCount:
        """Return the nodes of the requested window and the number of nodes at that level."""
        result = await self._paged(options, self._transport.get_paged_nodes)
        return NodesAndCount(count=result.total, nodes=result.items)

    async def get_filtered_node_paths(self, options: FilterByTextRequestOptions) -> list[Any]:
        """Return paths to the nodes whose labels match options.filter_text."""
        request = await self._build(options)
        return await self._transport.get_filtered_node_paths(request)

    async def get_node_paths(self, options: NodePathsRequestOptions) -> list[Any]:
        """Return node paths for the given instance key paths."""
        request = await self._build(options)
        return await self._transport.get_node_paths(request)

    async def load_hierarchy(self, options: HierarchyLoadRequestOptions) -> None:
        """Ask the backend to create the whole hierarchy ahead of requests."""
        request = await self._build(options)
        await self._transport.load_hierarchy(request)

    async def compare_hierarchies(self, options: HierarchyCompareOptions) -> list[Any]:
        """Return hierarchy changes since options.prev.

        Returns [] when options.prev is empty or the backend canceled the
        comparison.
        """
        self._check_not_disposed()
        return await self._comparator.compare(options)

    # =========================================================================
    # Content
    # =========================================================================

    async def get_content_descriptor(self, options: ContentDescriptorRequestOptions) -> Descriptor | None:
        """Return the content descriptor, or None if there is no content for the keys."""
        request = await self._build(options)
        return Descriptor.from_wire(await self._transport.get_content_descriptor(request))

    async def get_content_set_size(self, options: ContentRequestOptions) -> int:
        request = await self._build(options)
        return await self._transport.get_content_set_size(request)

    async def get_content(self, options: ContentRequestOptions) -> Content | None:
        """Return the content of the requested window, or None if there is none."""
        result = await self.get_content_and_size(options)
        return result.content if result is not None else None

    async def get_content_and_size(self, options: ContentRequestOptions) -> ContentAndSize | None:
        """Return the content of the requested window and the content set size.

        With a full Descriptor, every window is fetched as a content set. With
        descriptor overrides, the first window is fetched together with the
        descriptor the backend creates for them.

        Returns:
            ContentAndSize, or None when the backend produced no descriptor.
        """
        request = await self._build(options)
        descriptor = options.descriptor if isinstance(options.descriptor, Descriptor) else None
        first_call = True

        async def get_window(window: PagingWindow) -> PagedResult[Any]:
            nonlocal descriptor, first_call
            windowed = request.with_paging(window)
            if first_call and descriptor is None:
                first_call = False
                content = await self._transport.get_paged_content(windowed)
                if not content:
                    return PagedResult(total=0, items=[])
                descriptor = Descriptor.from_wire(content.get("descriptor"))
                return PagedResult.from_wire(content.get("contentSet"))
            first_call = False
            return PagedResult.from_wire(await self._transport.get_paged_content_set(windowed))

        result = await assemble_paged_response(options.paging, get_window)
        if descriptor is None:
            return None
        return ContentAndSize(size=result.total, content=Content(descriptor=descriptor, content_set=result.items))

    async def get_paged_distinct_values(self, options: DistinctValuesRequestOptions) -> PagedResult[Any]:
        """Return distinct values of a content field for the requested window."""
        return await self._paged(options, self._transport.get_paged_distinct_values)

    # =========================================================================
    # Display labels
    # =========================================================================

    async def get_display_label_definition(self, options: DisplayLabelRequestOptions) -> dict[str, Any]:
        self._check_not_disposed()
        request = self._builder.build_label(options)
        return await self._transport.get_display_label_definition(request)

    async def get_display_label_definitions(self, options: DisplayLabelsRequestOptions) -> list[Any]:
        """Return label definitions for all keys, in key order.

        The backend may return fewer labels than requested; the remaining
        keys are requested again until all labels arrive.
        """
        self._check_not_disposed()
        request = self._builder.build_label(options)
        keys = request.params.get("keys") or []

        async def get_window(window: PagingWindow) -> PagedResult[Any]:
            partial = request if not window.start else request.with_params(keys=keys[window.start :])
            return PagedResult.from_wire(await self._transport.get_paged_display_label_definitions(partial))

        result = await assemble_paged_response(None, get_window)
        return result.items

    # =========================================================================
    # Lifecycle
    # =========================================================================

    def dispose(self) -> None:
        """Stop routing update notifications and forget known connections.

        Operations called after dispose() raise PresentationError.
        """
        if self._disposed:
            return
        self._disposed = True
        self._router.unsubscribe()
        self._tracker.clear()

    async def aclose(self) -> None:
        """Dispose the manager and close its transport and push channel."""
        self.dispose()
        await self._router.wait_idle()
        await self._transport.aclose()
        close = getattr(self._push_channel, "aclose", None)
        if close is not None:
            result = close()
            if inspect.isawaitable(result):
                await result

    def __enter__(self) -> "PresentationManager":
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        self.dispose()

    async def __aenter__(self) -> "PresentationManager":
        return self

    async def __aexit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        await self.aclose()

    # =========================================================================
    # Helpers
    # =========================================================================

    def _check_not_disposed(self) -> None:
        if self._disposed:
            raise PresentationError(PresentationStatus.USE_AFTER_DISPOSAL, "Presentation manager is disposed")

    async def _build(self, options: Any) -> CanonicalRequest:
        self._check_not_disposed()
        return await self._builder.build(options)

    async def _paged(self, options: Any, fetch: Any) -> PagedResult[Any]:
        request = await self._build(options)

        async def get_window(window: PagingWindow) -> PagedResult[Any]:
            return PagedResult.from_wire(await fetch(request.with_paging(window)))

        return await assemble_paged_response(options.paging, get_window)
