"""Ruleset registry.

The options builder and the update router look rulesets up by id through
the RulesetRegistry protocol. RulesetManager is the in-memory registry owned
by a PresentationManager: rulesets added here are sent to the backend as
objects instead of ids.
"""

from __future__ import annotations

__all__ = [
    "RegisteredRuleset",
    "RulesetManager",
    "RulesetRegistry",
]

import uuid
from dataclasses import dataclass, field
from typing import Protocol, runtime_checkable

from presentation_client.events import Event
from presentation_client.models.rulesets import Ruleset


@dataclass(frozen=True)
class RegisteredRuleset:
    """Ruleset stored in a registry.

    Attributes:
        ruleset: The ruleset payload.
        unique_identifier: Identifier of this registration. Adding a ruleset
            with the same id again produces a new identifier.
    """

    ruleset: Ruleset
    unique_identifier: str = field(default_factory=lambda: uuid.uuid4().hex)

    @property
    def id(self) -> str:
        return self.ruleset.id


@runtime_checkable
class RulesetRegistry(Protocol):
    """Lookup of rulesets by id."""

    async def get(self, ruleset_id: str) -> RegisteredRuleset | None:
        """Return the registered ruleset, or None if the id is unknown."""
        ...


class RulesetManager:
    """In-memory ruleset registry.

    on_ruleset_modified is raised with the new registration whenever an
    existing ruleset is replaced.
    """

    def __init__(self) -> None:
        self._rulesets: dict[str, RegisteredRuleset] = {}
        self.on_ruleset_modified: Event[RegisteredRuleset] = Event()

    def __len__(self) -> int:
        return len(self._rulesets)

    async def get(self, ruleset_id: str) -> RegisteredRuleset | None:
        return self._rulesets.get(ruleset_id)

    async def add(self, ruleset: Ruleset) -> RegisteredRuleset:
        """Register a ruleset, replacing any ruleset with the same id.

        Args:
            ruleset: Ruleset to register.

        Returns:
            The new registration.
        """
        registered = RegisteredRuleset(ruleset=ruleset)
        replaced = ruleset.id in self._rulesets
        self._rulesets[ruleset.id] = registered
        if replaced:
            self.on_ruleset_modified.raise_event(registered)
        return registered

    async def remove(self, ruleset: RegisteredRuleset | tuple[str, str]) -> bool:
        """Remove a registration.

        Only the exact registration is removed: a ruleset re-added since
        `ruleset` was obtained stays registered.

        Args:
            ruleset: Registration, or (ruleset id, unique identifier).

        Returns:
            True if removed, False if no matching registration exists.
        """
        if isinstance(ruleset, RegisteredRuleset):
            ruleset_id, unique_identifier = ruleset.id, ruleset.unique_identifier
        else:
            ruleset_id, unique_identifier = ruleset

        current = self._rulesets.get(ruleset_id)
        if current is None or current.unique_identifier != unique_identifier:
            return False
        del self._rulesets[ruleset_id]
        return True

    async def clear(self) -> None:
        """Remove all registrations."""
        self._rulesets.clear()
