"""Extensions search provider.

Wraps the ranker with the per-query state a search surface expects:
whether the last query asked for the complete list, result capping,
and row metadata for the ids it returned.
"""

import logging
from typing import Callable, Mapping, Sequence

from .config import Config
from .models import Candidate, ResultMeta
from .prefixes import DEFAULT_PREFIX, build_prefix_table
from .ranker import RankResult, rank

logger = logging.getLogger(__name__)

Registry = Callable[[], Mapping[str, Candidate]]


def format_version(candidate: Candidate) -> str:
    """'<version-name>/<version>' when both exist, otherwise whichever does."""
    if candidate.version_name and candidate.version:
        return f"{candidate.version_name}/{candidate.version}"
    return candidate.version_name or candidate.version


def format_status(candidate: Candidate) -> str:
    update = "UPDATE PENDING | " if candidate.has_update else ""
    return f"{update}{candidate.state.label}"


class ExtensionsSearchProvider:
    """Search provider listing installed extensions."""

    id = "extensions"

    def __init__(self, registry: Registry, config: Config | None = None):
        """
        Args:
            registry: Callable returning a fresh {id: Candidate} snapshot
            config: Settings, defaults when omitted
        """
        self.registry = registry
        self.config = config or Config()
        self.extensions: Mapping[str, Candidate] = {}
        self.list_all = False

    @property
    def prefix_table(self):
        return build_prefix_table(self.config.search.custom_prefixes)

    @property
    def keywords(self) -> list[str]:
        return self.prefix_table.keywords

    def get_initial_result_set(self, terms: Sequence[str]) -> list[str]:
        """Take a fresh registry snapshot and rank it for terms."""
        self.extensions = self.registry()
        return self._get_result_set(terms)

    def get_subsearch_result_set(
        self, previous_results: Sequence[str], terms: Sequence[str]
    ) -> list[str]:
        # Always a full re-run; states may have changed since the last keystroke
        return self.get_initial_result_set(terms)

    def _get_result_set(self, terms: Sequence[str]) -> list[str]:
        result: RankResult = rank(
            self.extensions.values(),
            terms,
            self.config.search,
            self.prefix_table,
        )
        self.list_all = result.list_all
        return result.ids

    def filter_results(self, results: Sequence[str], max_results: int | None = None) -> list[str]:
        """Cap results unless the last query was prefixed."""
        if self.list_all:
            return list(results)
        if max_results is None:
            max_results = self.config.results.max_results
        return list(results[:max_results])

    def get_result_meta(self, result_id: str) -> ResultMeta:
        candidate = self.extensions[result_id]
        return ResultMeta(
            id=result_id,
            name=candidate.name,
            version=format_version(candidate),
            status=format_status(candidate),
            description=candidate.description,
            has_prefs=candidate.has_prefs,
        )

    def get_result_metas(self, result_ids: Sequence[str]) -> list[ResultMeta]:
        return [self.get_result_meta(result_id) for result_id in result_ids]

    def launch_search_query(self, terms: Sequence[str]) -> str | None:
        """
        Query text that shows every match for terms.

        Returns None when the current results are already the complete
        list; the host then opens the extensions manager instead.
        """
        if self.list_all:
            return None
        query = f"{DEFAULT_PREFIX} {' '.join(terms)}"
        logger.debug(f"Relaunching search as {query!r}")
        return query
