"""
Entity Catalog
==============

Provides read-only access to the spawnable kinds loaded from config.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, Optional, Tuple

from valdebt.core.config_loader import GameConfig, EntityConfig, get_config
from valdebt.core.kinds import Category, EntityKind, VisualTag


@dataclass(frozen=True)
class EntityDef:
    """
    Runtime representation of a spawnable kind.

    Wraps EntityConfig with convenience properties.
    """
    config: EntityConfig

    @property
    def kind(self) -> EntityKind:
        return self.config.kind

    @property
    def category(self) -> Category:
        return self.config.category

    @property
    def points(self) -> int:
        return self.config.points

    @property
    def speed(self) -> float:
        return self.config.speed

    @property
    def size(self) -> float:
        return self.config.size

    @property
    def weight(self) -> float:
        return self.config.weight

    @property
    def visual(self) -> VisualTag:
        return self.config.visual

    @property
    def label_key(self) -> str:
        return self.config.label_key

    @property
    def is_asset(self) -> bool:
        return self.config.category == Category.ASSET

    @property
    def is_terminal(self) -> bool:
        """True if catching this kind ends the run at once."""
        return self.config.terminal

    @property
    def is_flashing(self) -> bool:
        return self.config.flashing

    def __repr__(self) -> str:
        return f"EntityDef({self.kind.value}: {self.points:+d})"


class EntityCatalog:
    """
    Collection of all spawnable kinds.

    The table is fixed once built; economy changes go through game_config.yaml.
    """

    def __init__(self, config: Optional[GameConfig] = None):
        """
        Initialize catalog from game config.

        Args:
            config: GameConfig instance. If None, loads from default location.
        """
        if config is None:
            config = get_config()

        self._config = config
        self._defs: Tuple[EntityDef, ...] = tuple(
            EntityDef(entity_config) for entity_config in config.entities
        )
        self._by_kind: Dict[EntityKind, EntityDef] = {d.kind: d for d in self._defs}

    def __len__(self) -> int:
        return len(self._defs)

    def __getitem__(self, kind: EntityKind) -> EntityDef:
        """Get definition by kind."""
        try:
            return self._by_kind[EntityKind(kind)]
        except (KeyError, ValueError):
            raise KeyError(f"Unknown entity kind: {kind}") from None

    def __iter__(self):
        return iter(self._defs)

    @property
    def all_defs(self) -> Tuple[EntityDef, ...]:
        """All definitions in config order."""
        return self._defs

    @property
    def assets(self) -> Tuple[EntityDef, ...]:
        return tuple(d for d in self._defs if d.category == Category.ASSET)

    @property
    def liabilities(self) -> Tuple[EntityDef, ...]:
        return tuple(d for d in self._defs if d.category == Category.LIABILITY)

    @property
    def terminal_kinds(self) -> Tuple[EntityKind, ...]:
        return tuple(d.kind for d in self._defs if d.is_terminal)

    def is_terminal(self, kind: EntityKind) -> bool:
        return self[kind].is_terminal

    def get_by_name(self, name: str) -> Optional[EntityDef]:
        """Get definition by kind name (case-insensitive)."""
        name_lower = name.lower()
        for entity_def in self._defs:
            if entity_def.kind.value == name_lower:
                return entity_def
        return None


# Module-level singleton
_cached_catalog: Optional[EntityCatalog] = None


def get_catalog(config: Optional[GameConfig] = None) -> EntityCatalog:
    """
    Get the entity catalog singleton.

    Args:
        config: Optional config to use. If None, uses cached or default config.

    Returns:
        EntityCatalog instance.
    """
    global _cached_catalog
    if _cached_catalog is None or config is not None:
        _cached_catalog = EntityCatalog(config)
    return _cached_catalog
