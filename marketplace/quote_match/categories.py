"""
Category normalization strategies for quote comparison.

Vendors type their own category labels, so "타일" and "타일공사" never
line up under plain string equality. The comparison engine takes a
CategoryNormalizer so a controlled vocabulary can be swapped in without
touching the comparison logic. Raw equality stays the default.

Aliases are declarative JSON - edit category_config.json, not the code.
"""

import json
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from pathlib import Path


DEFAULT_CONFIG_PATH = Path(__file__).parent / "category_config.json"


class CategoryNormalizer(ABC):
    """Maps a vendor-entered category label to the key used for alignment."""

    @abstractmethod
    def canonical(self, label: str) -> str:
        pass


class ExactCategoryNormalizer(CategoryNormalizer):
    """Labels align only when they are identical (case-sensitive)."""

    def canonical(self, label: str) -> str:
        return label


@dataclass
class CategoryConfig:
    """Standard category vocabulary plus free-text aliases."""
    standard_categories: list[str] = field(default_factory=list)
    aliases: dict[str, list[str]] = field(default_factory=dict)


class AliasCategoryNormalizer(CategoryNormalizer):
    """
    Resolves labels through an alias table.

    Lookup is case-insensitive and ignores surrounding whitespace. Labels
    with no alias entry pass through unchanged so unknown work still shows
    up in the comparison.
    """

    def __init__(self, config: CategoryConfig):
        self.config = config
        self._lookup: dict[str, str] = {}
        for canonical, aliases in config.aliases.items():
            self._lookup[_key(canonical)] = canonical
            for alias in aliases:
                self._lookup[_key(alias)] = canonical
        for canonical in config.standard_categories:
            self._lookup.setdefault(_key(canonical), canonical)

    def canonical(self, label: str) -> str:
        return self._lookup.get(_key(label), label)


def load_category_config(config_path: str | Path = DEFAULT_CONFIG_PATH) -> CategoryConfig:
    """
    Load the category vocabulary from JSON.

    Expected shape:
        {"standard_categories": ["도배", ...], "aliases": {"타일": ["타일공사"]}}
    """
    path = Path(config_path)
    with open(path, "r", encoding="utf-8") as f:
        data = json.load(f)

    return CategoryConfig(
        standard_categories=list(data.get("standard_categories", [])),
        aliases={k: list(v) for k, v in data.get("aliases", {}).items()},
    )


def _key(label: str) -> str:
    return label.strip().lower()
