"""Lookup of component kinds by unique id, name or nickname."""

import logging
from collections.abc import Iterable, Iterator
from dataclasses import dataclass, field

from ghx_engine._graph import Node, normalize_guid, normalize_name

from . import (
    curve,
    display,
    inputs,
    maths_domain,
    maths_matrix,
    maths_operators,
    maths_util,
    mesh,
    params,
    sets,
    vector,
)
from ._base import ComponentKind

logger = logging.getLogger(__name__)

CATEGORY_TABLES: tuple[tuple[ComponentKind, ...], ...] = (
    params.REGISTRATIONS,
    inputs.REGISTRATIONS,
    maths_operators.REGISTRATIONS,
    maths_matrix.REGISTRATIONS,
    maths_domain.REGISTRATIONS,
    maths_util.REGISTRATIONS,
    vector.REGISTRATIONS,
    curve.REGISTRATIONS,
    sets.REGISTRATIONS,
    mesh.REGISTRATIONS,
    display.REGISTRATIONS,
)


@dataclass(slots=True)
class ComponentRegistry:
    """Index of component kinds by normalized guid and by normalized name.

    Kinds are registered under every guid and every name they carry. When
    two kinds claim the same key, the one registered first keeps it.

    The registry is only read during evaluation and may be shared between
    concurrent evaluations of independent graphs.
    """

    _kinds: list[ComponentKind] = field(default_factory=list)
    _by_guid: dict[str, ComponentKind] = field(default_factory=dict)
    _by_name: dict[str, ComponentKind] = field(default_factory=dict)

    @classmethod
    def default(cls) -> "ComponentRegistry":
        """Build the registry from the static tables of every category."""
        registry = cls()
        for kinds in CATEGORY_TABLES:
            registry.register_all(kinds)
        logger.debug(
            "Default registry: %d kinds, %d guids, %d names",
            len(registry._kinds),
            len(registry._by_guid),
            len(registry._by_name),
        )
        return registry

    def register(self, kind: ComponentKind) -> None:
        self._kinds.append(kind)
        for guid in kind.guids:
            key = normalize_guid(guid)
            if key in self._by_guid:
                logger.debug("Guid %s already taken by %s; %s not indexed", key, self._by_guid[key].name, kind.name)
                continue
            self._by_guid[key] = kind
        for name in kind.names:
            self._by_name.setdefault(normalize_name(name), kind)

    def register_all(self, kinds: Iterable[ComponentKind]) -> None:
        for kind in kinds:
            self.register(kind)

    def resolve(
        self,
        guid: str | None = None,
        name: str | None = None,
        nickname: str | None = None,
    ) -> ComponentKind | None:
        """Find the kind for a node's identifiers.

        The guid is tried first, then the canonical name, then the
        nickname. A supplied identifier that misses falls through to the
        next one.

        Returns:
            The matching kind, or None when nothing matches.

        """
        if guid and (kind := self._by_guid.get(normalize_guid(guid))) is not None:
            return kind
        if name and (kind := self._by_name.get(normalize_name(name))) is not None:
            return kind
        if nickname and (kind := self._by_name.get(normalize_name(nickname))) is not None:
            return kind
        return None

    def resolve_node(self, node: Node) -> ComponentKind | None:
        return self.resolve(node.guid, node.name, node.nickname)

    def kinds(self) -> list[ComponentKind]:
        """All registered kinds in registration order."""
        return list(self._kinds)

    def search(self, text: str) -> list[ComponentKind]:
        """Kinds whose name, nickname, guid or category contains ``text`` (case-insensitive)."""
        needle = text.strip().lower()
        return [
            kind
            for kind in self._kinds
            if needle in kind.category.lower()
            or any(needle in name.lower() for name in kind.names)
            or any(needle in normalize_guid(guid) for guid in kind.guids)
        ]

    def __len__(self) -> int:
        return len(self._kinds)

    def __iter__(self) -> Iterator[ComponentKind]:
        return iter(self._kinds)
