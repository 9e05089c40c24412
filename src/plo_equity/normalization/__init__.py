"""Suit canonicalization."""

from plo_equity.normalization.normalizer import (
    SuitMapping, SuitVariable, canonical_cards, normalize, normalize_dependent, resolve_dependent
)

__all__ = [
    "SuitMapping", "SuitVariable",
    "canonical_cards", "normalize", "normalize_dependent", "resolve_dependent",
]
