"""Shared test fixtures for extsearch."""

import json
from pathlib import Path

import pytest

from extsearch.config import ResultsOrder, SearchConfig, ShowIncompatible
from extsearch.models import Candidate, ExtensionState


def make_candidate(
    id_: str,
    name: str,
    state: ExtensionState = ExtensionState.DISABLED,
    order: int | None = None,
    **kwargs,
) -> Candidate:
    return Candidate(id=id_, name=name, state=state, enabled_order_index=order, **kwargs)


@pytest.fixture
def candidates() -> dict[str, Candidate]:
    """Enabled, disabled and incompatible extensions."""
    return {
        "A": make_candidate("A", "Blur my Shell", ExtensionState.ENABLED, order=0),
        "B": make_candidate("B", "Vitals", ExtensionState.DISABLED),
        "C": make_candidate("C", "Weather O Clock", ExtensionState.INCOMPATIBLE),
    }


@pytest.fixture
def show_all() -> SearchConfig:
    """Strict matching, incompatible shown, plain alphabetical order."""
    return SearchConfig(
        show_incompatible=ShowIncompatible.SHOW,
        results_order=ResultsOrder.ALPHABETICAL,
    )


@pytest.fixture
def snapshot_file(tmp_path: Path) -> Path:
    """JSON registry snapshot in the shell's record layout."""
    data = {
        "blur-my-shell@aunetx": {
            "metadata": {"name": "Blur my Shell", "version": 67, "version-name": "v67"},
            "state": 1,
            "hasPrefs": True,
            "activationOrderIndex": 0,
        },
        "Vitals@CoreCoding.com": {
            "metadata": {"name": "Vitals", "description": "System monitor"},
            "state": 2,
        },
        "weatheroclock@CleoMenezesJr.github.io": {
            "metadata": {"name": "Weather O Clock", "version": 12},
            "state": 4,
            "hasUpdate": True,
        },
    }
    path = tmp_path / "snapshot.json"
    path.write_text(json.dumps(data))
    return path
