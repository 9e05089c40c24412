"""Shared fixtures: the rank table is generated once per test session."""

import pytest

from plo_equity.models.card import parse_cards
from plo_equity.ranking import RankCache, write_rank_table


@pytest.fixture(scope="session")
def rank_cache():
    return RankCache.generate()


@pytest.fixture(scope="session")
def rank_table_file(rank_cache, tmp_path_factory):
    path = tmp_path_factory.mktemp("tables") / "ranked_hands.csv"
    write_rank_table(path, rank_cache.entries)
    return path


@pytest.fixture
def cards():
    """Parse a card string such as 'AsKh' into Card objects."""
    return parse_cards
