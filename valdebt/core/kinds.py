"""
Kinds
=====

Closed enumerations shared by the catalog, the simulation and the renderer.
"""

from __future__ import annotations

from enum import Enum


class Category(str, Enum):
    """Whether catching an object helps or hurts."""
    ASSET = "asset"
    LIABILITY = "liability"


class EntityKind(str, Enum):
    """Every spawnable kind. Adding a kind requires a catalog row."""
    FAMILY_HOME = "family_home"
    STOCKS = "stocks"
    EDUCATION = "education"
    COMM_PLAZA = "comm_plaza"
    MAINTENANCE = "maintenance"
    INTEREST_HIKE = "interest_hike"
    MARKET_CRASH = "market_crash"


class VisualTag(str, Enum):
    """Drawing style for a kind; the renderer keeps one drawer per tag."""
    HOUSE = "house"
    CHART = "chart"
    BOOK = "book"
    TOWER = "tower"
    WRENCH = "wrench"
    SPIKE = "spike"
    CRASH = "crash"


class GameStatus(str, Enum):
    MENU = "menu"
    PLAYING = "playing"
    GAMEOVER = "gameover"
