"""Tests for request normalization into canonical requests."""

from __future__ import annotations

from unittest.mock import MagicMock

import pytest

from presentation_client.connections import ConnectionLifecycleTracker, RemoteConnection
from presentation_client.models.common import InstanceKey, PresentationUnitSystem
from presentation_client.models.content import Descriptor
from presentation_client.models.paging import PagingWindow
from presentation_client.models.requests import (
    ContentRequestOptions,
    DisplayLabelRequestOptions,
    HierarchyRequestOptions,
)
from presentation_client.models.rulesets import Ruleset, RulesetVariable, VariableValueType
from presentation_client.options import RequestOptionsBuilder
from presentation_client.rulesets import RulesetManager
from presentation_client.variables import RulesetVariablesOverlay


@pytest.fixture
def overlay() -> RulesetVariablesOverlay:
    return RulesetVariablesOverlay()


@pytest.fixture
def registry() -> RulesetManager:
    return RulesetManager()


@pytest.fixture
def first_use_hook() -> MagicMock:
    return MagicMock()


@pytest.fixture
def session() -> dict:
    """Mutable active locale and unit system."""
    return {"locale": None, "unit_system": None}


@pytest.fixture
def builder(
    overlay: RulesetVariablesOverlay, registry: RulesetManager, first_use_hook: MagicMock, session: dict
) -> RequestOptionsBuilder:
    return RequestOptionsBuilder(
        overlay=overlay,
        registry=registry,
        tracker=ConnectionLifecycleTracker(),
        on_first_use=first_use_hook,
        active_locale=lambda: session["locale"],
        active_unit_system=lambda: session["unit_system"],
    )


class TestRulesetResolution:
    """Ruleset object, ruleset id, or nothing."""

    async def test_ruleset_object_is_kept(self, builder: RequestOptionsBuilder, connection: RemoteConnection) -> None:
        ruleset = Ruleset(id="inline", rules=[{"ruleType": "RootNodes"}])

        request = await builder.build(HierarchyRequestOptions(connection=connection, ruleset_or_id=ruleset))

        assert request.ruleset_or_id is ruleset
        assert request.to_wire()["rulesetOrId"] == {"id": "inline", "rules": [{"ruleType": "RootNodes"}]}

    async def test_unregistered_id_is_sent_as_is(
        self, builder: RequestOptionsBuilder, connection: RemoteConnection
    ) -> None:
        request = await builder.build(HierarchyRequestOptions(connection=connection, ruleset_or_id="Tree"))

        assert request.ruleset_or_id == "Tree"

    async def test_registered_id_becomes_ruleset_object(
        self, builder: RequestOptionsBuilder, registry: RulesetManager, connection: RemoteConnection
    ) -> None:
        ruleset = Ruleset(id="Tree", rules=[])
        await registry.add(ruleset)

        request = await builder.build(HierarchyRequestOptions(connection=connection, ruleset_or_id="Tree"))

        assert request.ruleset_or_id == ruleset

    async def test_ruleset_id_field_is_used_when_ruleset_or_id_empty(
        self, builder: RequestOptionsBuilder, connection: RemoteConnection
    ) -> None:
        request = await builder.build(HierarchyRequestOptions(connection=connection, ruleset_id="ById"))

        assert request.ruleset_or_id == "ById"

    async def test_no_ruleset_becomes_empty_string(
        self, builder: RequestOptionsBuilder, connection: RemoteConnection
    ) -> None:
        request = await builder.build(HierarchyRequestOptions(connection=connection))

        wire = request.to_wire()
        assert wire["rulesetOrId"] == ""
        assert wire["rulesetVariables"] == []


class TestVariableOverlay:
    """Request variables first, then manager variables."""

    async def test_request_variables_precede_manager_variables(
        self, builder: RequestOptionsBuilder, overlay: RulesetVariablesOverlay, connection: RemoteConnection
    ) -> None:
        overlay.set("R", "managed", VariableValueType.STRING, "from-manager")
        supplied = RulesetVariable(id="supplied", type=VariableValueType.INT, value=1)

        request = await builder.build(
            HierarchyRequestOptions(connection=connection, ruleset_or_id="R", ruleset_variables=[supplied])
        )

        assert [v.id for v in request.ruleset_variables] == ["supplied", "managed"]

    async def test_same_id_is_not_deduplicated(
        self, builder: RequestOptionsBuilder, overlay: RulesetVariablesOverlay, connection: RemoteConnection
    ) -> None:
        overlay.set("R", "v", VariableValueType.INT, 2)
        supplied = RulesetVariable(id="v", type=VariableValueType.INT, value=1)

        request = await builder.build(
            HierarchyRequestOptions(connection=connection, ruleset_or_id="R", ruleset_variables=[supplied])
        )

        assert [v.value for v in request.ruleset_variables] == [1, 2]

    async def test_variables_of_other_rulesets_are_not_applied(
        self, builder: RequestOptionsBuilder, overlay: RulesetVariablesOverlay, connection: RemoteConnection
    ) -> None:
        overlay.set("Other", "v", VariableValueType.INT, 2)

        request = await builder.build(HierarchyRequestOptions(connection=connection, ruleset_or_id="R"))

        assert request.ruleset_variables == []

    async def test_variables_follow_resolved_ruleset_object(
        self, builder: RequestOptionsBuilder, overlay: RulesetVariablesOverlay, connection: RemoteConnection
    ) -> None:
        overlay.set("inline", "v", VariableValueType.BOOL, True)

        request = await builder.build(
            HierarchyRequestOptions(connection=connection, ruleset_or_id=Ruleset(id="inline"))
        )

        assert request.to_wire()["rulesetVariables"] == [{"id": "v", "type": "bool", "value": True}]


class TestSessionDefaults:
    """Locale and unit system fall back to the manager's active values."""

    async def test_active_values_used_when_request_omits_them(
        self, builder: RequestOptionsBuilder, session: dict, connection: RemoteConnection
    ) -> None:
        session.update(locale="de", unit_system=PresentationUnitSystem.METRIC)

        wire = (await builder.build(HierarchyRequestOptions(connection=connection))).to_wire()

        assert wire["locale"] == "de"
        assert wire["unitSystem"] == "metric"

    async def test_request_values_win(
        self, builder: RequestOptionsBuilder, session: dict, connection: RemoteConnection
    ) -> None:
        session.update(locale="de", unit_system=PresentationUnitSystem.METRIC)

        request = await builder.build(
            HierarchyRequestOptions(
                connection=connection, locale="lt", unit_system=PresentationUnitSystem.US_SURVEY
            )
        )

        assert request.locale == "lt"
        assert request.unit_system == PresentationUnitSystem.US_SURVEY

    async def test_unset_values_are_omitted_from_wire(
        self, builder: RequestOptionsBuilder, connection: RemoteConnection
    ) -> None:
        wire = (await builder.build(HierarchyRequestOptions(connection=connection))).to_wire()

        assert "locale" not in wire
        assert "unitSystem" not in wire


class TestCanonicalRequest:
    """Token, paging and operation fields."""

    async def test_connection_replaced_by_token(
        self, builder: RequestOptionsBuilder, connection: RemoteConnection, first_use_hook: MagicMock
    ) -> None:
        request = await builder.build(HierarchyRequestOptions(connection=connection))

        assert request.imodel == connection.get_rpc_props()
        first_use_hook.assert_called_once_with(connection)

    async def test_paging_and_parent_key(self, builder: RequestOptionsBuilder, connection: RemoteConnection) -> None:
        request = await builder.build(
            HierarchyRequestOptions(
                connection=connection,
                paging=PagingWindow(start=1, size=2),
                parent_key={"type": "ECInstancesNode", "pathFromRoot": []},
            )
        )

        wire = request.to_wire()
        assert wire["paging"] == {"start": 1, "size": 2}
        assert wire["parentKey"] == {"type": "ECInstancesNode", "pathFromRoot": []}

    async def test_full_descriptor_sent_as_overrides(
        self, builder: RequestOptionsBuilder, connection: RemoteConnection
    ) -> None:
        descriptor = Descriptor(
            payload={"displayType": "Grid", "fields": [{"name": "f"}], "sorting": {"field": "f"}}
        )

        request = await builder.build(ContentRequestOptions(connection=connection, descriptor=descriptor, keys=[]))

        assert request.to_wire()["descriptor"] == {"displayType": "Grid", "sorting": {"field": "f"}}

    async def test_label_request_has_no_ruleset(
        self, builder: RequestOptionsBuilder, connection: RemoteConnection, first_use_hook: MagicMock
    ) -> None:
        request = builder.build_label(
            DisplayLabelRequestOptions(connection=connection, key=InstanceKey(class_name="S:C", id="0x1"))
        )

        assert request.to_wire() == {"imodel": connection.get_rpc_props(), "key": {"className": "S:C", "id": "0x1"}}
        first_use_hook.assert_called_once_with(connection)
