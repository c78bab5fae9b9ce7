"""Normalization of caller requests into canonical transport requests.

RequestOptionsBuilder turns any request variant into a CanonicalRequest:

1. The connection handle is replaced by its token (and first use of the
   connection is reported to the lifecycle tracker).
2. The ruleset is resolved: a ruleset object is kept, an id registered in
   the ruleset registry becomes the registered ruleset object, any other id
   is sent as-is, and no ruleset at all becomes "".
3. Variables: the request's own ruleset_variables first, then the variables
   set on the manager for the resolved ruleset id. Duplicates are kept.
4. Locale and unit system fall back to the manager's active values.
"""

from __future__ import annotations

__all__ = ["RequestOptionsBuilder"]

from collections.abc import Callable
from typing import Any

from presentation_client.connections import Connection, ConnectionLifecycleTracker
from presentation_client.models.common import PresentationUnitSystem
from presentation_client.models.requests import (
    CanonicalLabelRequest,
    CanonicalRequest,
    RequestOptions,
    RulesetRequestOptions,
)
from presentation_client.models.rulesets import Ruleset
from presentation_client.rulesets import RulesetRegistry
from presentation_client.variables import RulesetVariablesOverlay


class RequestOptionsBuilder:
    """Builds canonical requests in the context of one manager.

    Args:
        overlay: Manager-level ruleset variables.
        registry: Registry used to resolve ruleset ids.
        tracker: Connection first-use tracker.
        on_first_use: Hook run on first use of a connection.
        active_locale: Returns the manager's active locale.
        active_unit_system: Returns the manager's active unit system.
    """

    def __init__(
        self,
        *,
        overlay: RulesetVariablesOverlay,
        registry: RulesetRegistry,
        tracker: ConnectionLifecycleTracker,
        on_first_use: Callable[[Connection], None],
        active_locale: Callable[[], str | None],
        active_unit_system: Callable[[], PresentationUnitSystem | None],
    ) -> None:
        self._overlay = overlay
        self._registry = registry
        self._tracker = tracker
        self._on_first_use = on_first_use
        self._active_locale = active_locale
        self._active_unit_system = active_unit_system

    async def build(self, options: RulesetRequestOptions) -> CanonicalRequest:
        """Normalize a ruleset request.

        Args:
            options: Any ruleset request variant.

        Returns:
            Canonical request with operation fields in `params`.
        """
        token = self._token(options)
        ruleset_or_id = await self._resolve_ruleset(options)
        ruleset_id = ruleset_or_id.id if isinstance(ruleset_or_id, Ruleset) else ruleset_or_id

        variables = list(options.ruleset_variables or [])
        variables.extend(self._overlay.get(ruleset_id))

        return CanonicalRequest(
            imodel=token,
            ruleset_or_id=ruleset_or_id,
            ruleset_variables=variables,
            locale=self._locale(options),
            unit_system=self._unit_system(options),
            paging=getattr(options, "paging", None),
            params=options.operation_params(),
        )

    def build_label(self, options: RequestOptions) -> CanonicalLabelRequest:
        """Normalize a display label request (no ruleset, no variables)."""
        return CanonicalLabelRequest(
            imodel=self._token(options),
            locale=self._locale(options),
            unit_system=self._unit_system(options),
            params=options.operation_params(),
        )

    def _token(self, options: RequestOptions) -> dict[str, Any]:
        self._tracker.ensure_initialized(options.connection, self._on_first_use)
        return options.connection.get_rpc_props()

    async def _resolve_ruleset(self, options: RulesetRequestOptions) -> Ruleset | str:
        if isinstance(options.ruleset_or_id, Ruleset):
            return options.ruleset_or_id
        ruleset_id = options.ruleset_or_id or options.ruleset_id or ""
        if not ruleset_id:
            return ""
        registered = await self._registry.get(ruleset_id)
        if registered is not None:
            return registered.ruleset
        return ruleset_id

    def _locale(self, options: RequestOptions) -> str | None:
        return options.locale if options.locale is not None else self._active_locale()

    def _unit_system(self, options: RequestOptions) -> PresentationUnitSystem | None:
        if options.unit_system is not None:
            return options.unit_system
        return self._active_unit_system()
