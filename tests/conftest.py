"""Shared fixtures for presentation-client tests."""

from __future__ import annotations

from collections.abc import Iterator
from unittest.mock import AsyncMock, MagicMock

import pytest

from presentation_client.connections import RemoteConnection
from presentation_client.manager import PresentationManager, PresentationManagerProps
from presentation_client.transport.push import InProcessPushChannel

TRANSPORT_METHODS = (
    "get_nodes_count",
    "get_paged_nodes",
    "get_filtered_node_paths",
    "get_node_paths",
    "load_hierarchy",
    "get_content_descriptor",
    "get_content_set_size",
    "get_paged_content_set",
    "get_paged_content",
    "get_paged_distinct_values",
    "get_display_label_definition",
    "get_paged_display_label_definitions",
    "compare_hierarchies",
    "aclose",
)


@pytest.fixture
def transport() -> MagicMock:
    """Transport whose operations are AsyncMocks."""
    mock = MagicMock()
    for name in TRANSPORT_METHODS:
        setattr(mock, name, AsyncMock())
    return mock


@pytest.fixture
def connection() -> RemoteConnection:
    """An open connection."""
    return RemoteConnection(imodel_id="imodel-1", changeset_id="cs-1", key="imodel-key")


@pytest.fixture
def push_channel() -> InProcessPushChannel:
    return InProcessPushChannel()


@pytest.fixture
def manager(transport: MagicMock, push_channel: InProcessPushChannel) -> Iterator[PresentationManager]:
    """Manager over the mock transport with push delivery enabled."""
    manager = PresentationManager.create(PresentationManagerProps(transport=transport, push_channel=push_channel))
    yield manager
    manager.dispose()
