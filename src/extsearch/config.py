"""Configuration file handling for extsearch."""

import logging
import sys
from dataclasses import dataclass, field
from enum import IntEnum
from pathlib import Path

if sys.version_info >= (3, 11):
    import tomllib
else:
    import tomli as tomllib

logger = logging.getLogger(__name__)


class ShowIncompatible(IntEnum):
    """When extensions unsupported by the running shell are listed."""

    HIDE = 0
    SHOW = 1
    FULL_LIST_ONLY = 2
    HIDE_IN_GLOBAL = 3


class ResultsOrder(IntEnum):
    """Ordering of the complete list shown for a bare prefix."""

    ALPHABETICAL = 0
    INCOMPATIBLE_LAST = 1
    ENABLED_FIRST = 2
    ORDER_OF_ENABLING = 3


@dataclass(frozen=True)
class SearchConfig:
    """Search-related settings."""

    custom_prefixes: str = ""  # space separated
    exclude_from_global_search: bool = False
    fuzzy_match: bool = False
    show_incompatible: ShowIncompatible = ShowIncompatible.SHOW
    results_order: ResultsOrder = ResultsOrder.INCOMPATIBLE_LAST

    @property
    def enabled_first(self) -> bool:
        return self.results_order == ResultsOrder.ENABLED_FIRST

    @property
    def order_of_enabling(self) -> bool:
        return self.results_order == ResultsOrder.ORDER_OF_ENABLING

    @property
    def incompatible_last(self) -> bool:
        return self.results_order != ResultsOrder.ALPHABETICAL

    @property
    def incompatible_full_only(self) -> bool:
        return self.show_incompatible == ShowIncompatible.FULL_LIST_ONLY

    @property
    def incompatible_hide_global(self) -> bool:
        return self.show_incompatible == ShowIncompatible.HIDE_IN_GLOBAL


@dataclass(frozen=True)
class ResultsConfig:
    """Result list settings."""

    max_results: int = 5


@dataclass(frozen=True)
class Config:
    """Main configuration container."""

    search: SearchConfig = field(default_factory=SearchConfig)
    results: ResultsConfig = field(default_factory=ResultsConfig)


def find_config_file(base_dir: Path | None = None) -> Path | None:
    """Find config file in base dir or user config dir."""
    candidates = []

    if base_dir:
        candidates.append(base_dir / ".extsearchrc")
        candidates.append(base_dir / ".extsearchrc.toml")

    config_home = Path.home() / ".config" / "extsearch"
    candidates.append(config_home / "config.toml")

    for path in candidates:
        if path.exists():
            return path

    return None


def _enum_option(enum_cls, section: dict, key: str, default):
    value = section.get(key, default)
    try:
        return enum_cls(int(value))
    except (TypeError, ValueError):
        logger.warning(f"Ignoring invalid {key} = {value!r}, using {int(default)}")
        return default


def _bool_option(section: dict, key: str, default: bool) -> bool:
    value = section.get(key, default)
    if isinstance(value, bool):
        return value
    logger.warning(f"Ignoring non-boolean {key} = {value!r}")
    return default


def parse_config(data: dict) -> Config:
    """Build a Config from already-parsed TOML data."""
    config = Config()

    search = config.search
    if "search" in data:
        sc = data["search"]
        prefixes = sc.get("custom_prefixes", search.custom_prefixes)
        if not isinstance(prefixes, str):
            logger.warning(f"Ignoring non-string custom_prefixes = {prefixes!r}")
            prefixes = search.custom_prefixes
        search = SearchConfig(
            custom_prefixes=prefixes,
            exclude_from_global_search=_bool_option(
                sc, "exclude_from_global_search", search.exclude_from_global_search
            ),
            fuzzy_match=_bool_option(sc, "fuzzy_match", search.fuzzy_match),
            show_incompatible=_enum_option(
                ShowIncompatible, sc, "show_incompatible", search.show_incompatible
            ),
            results_order=_enum_option(
                ResultsOrder, sc, "results_order", search.results_order
            ),
        )

    results = config.results
    if "results" in data:
        rs = data["results"]
        max_results = rs.get("max_results", results.max_results)
        if not isinstance(max_results, int) or isinstance(max_results, bool) or max_results < 0:
            logger.warning(f"Ignoring invalid max_results = {max_results!r}")
            max_results = results.max_results
        results = ResultsConfig(max_results=max_results)

    return Config(search=search, results=results)


def load_config(base_dir: Path | None = None, path: Path | None = None) -> Config:
    """Load configuration from file or return defaults."""
    config_path = path or find_config_file(base_dir)

    if config_path is None:
        return Config()

    try:
        with open(config_path, "rb") as f:
            data = tomllib.load(f)
    except (OSError, tomllib.TOMLDecodeError) as e:
        logger.warning(f"Failed to read config {config_path}, using defaults: {e}")
        return Config()

    return parse_config(data)
