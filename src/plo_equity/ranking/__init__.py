"""Five-card hand classification, rank table and rank cache."""

from plo_equity.ranking.classifier import HandCategory, hand_label, hand_value
from plo_equity.ranking.table import (
    RankEntry, generate_rank_table, read_rank_table, table_key, write_rank_table
)
from plo_equity.ranking.cache import RankCache

__all__ = [
    "HandCategory", "hand_label", "hand_value",
    "RankEntry", "generate_rank_table", "read_rank_table", "table_key", "write_rank_table",
    "RankCache",
]
