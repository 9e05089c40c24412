"""Tests for suit canonicalization."""

import random
from itertools import combinations, permutations

import pytest

from plo_equity.exceptions import InvalidHandError
from plo_equity.models.card import (
    Card, Suit, CANONICAL_SUITS, canonical_sort_key, format_cards, full_deck,
)
from plo_equity.normalization import (
    SuitMapping, SuitVariable, canonical_cards, normalize, normalize_dependent, resolve_dependent,
)

S, H, D, C = Suit.SPADES, Suit.HEARTS, Suit.DIAMONDS, Suit.CLUBS

NORMALIZE_CASES = [
    ("AhKsKhJd", "AsKsKhJd"),
    ("2c3d4h5s", "5s4h3d2c"),
    ("QsJsTs9c", "QsJsTs9h"),
    ("AdKdQdJd", "AsKsQsJs"),
    ("KdKh5h3d", "KsKh5s3h"),
    ("KdKh5h3h", "KsKh5s3s"),
    ("AcAdAsAh", "AsAhAdAc"),
    ("QhKh2h4d5s", "KsQs5h4d2s"),
]

SAMPLE_HANDS = [
    "AhKsKhJd",
    "KdKh5h3d",
    "AcAdKdQh",
    "QhKh2h4d5s",
    "9c9d9h2s2c",
    "Tc9c8h7h6s",
    "KdQc5h5s3h",
    "AsAhAdKsKh",
]


def _relabel(cards, permutation):
    table = dict(zip(CANONICAL_SUITS, permutation))
    return [Card(c.rank, table[c.suit]) for c in cards]


def _assert_one_to_one(mapping):
    assert mapping.is_consistent()
    resolved = [mapping[raw].resolved for raw in mapping if mapping[raw].is_resolved]
    assert len(resolved) == len(set(resolved))


class TestNormalize:
    """Tests for normalize()."""

    @pytest.mark.parametrize("raw,expected", NORMALIZE_CASES)
    def test_known_hands(self, cards, raw, expected):
        normalized, _ = normalize(cards(raw))
        assert format_cards(normalized) == expected

    @pytest.mark.parametrize("raw,expected", NORMALIZE_CASES)
    def test_idempotent(self, cards, raw, expected):
        normalized, _ = normalize(cards(expected))
        assert format_cards(normalized) == expected

    def test_mixed_group_is_fixed_point(self, cards):
        normalized, _ = normalize(cards("AsKhKdQc"))
        assert format_cards(normalized) == "AsKsKhQd"
        assert format_cards(normalize(normalized)[0]) == "AsKsKhQd"

    @pytest.mark.parametrize("size", [4, 5])
    def test_idempotent_on_random_hands(self, size):
        rng = random.Random(size)
        deck = full_deck()
        for _ in range(5_000):
            normalized = canonical_cards(rng.sample(deck, size))
            assert canonical_cards(normalized) == normalized

    @pytest.mark.slow
    def test_idempotent_on_every_four_card_hand(self):
        for hand in combinations(full_deck(), 4):
            normalized = canonical_cards(hand)
            assert canonical_cards(normalized) == normalized

    def test_random_hands_invariant_under_suit_permutation(self):
        rng = random.Random(11)
        deck = full_deck()
        all_permutations = list(permutations(CANONICAL_SUITS))
        for _ in range(500):
            hand = rng.sample(deck, rng.choice([4, 5]))
            permuted = _relabel(hand, rng.choice(all_permutations))
            rng.shuffle(permuted)
            assert canonical_cards(permuted) == canonical_cards(hand)

    def test_canonical_cards_matches_normalize(self, cards):
        for raw in SAMPLE_HANDS:
            assert canonical_cards(cards(raw)) == normalize(cards(raw))[0]

    @pytest.mark.parametrize("raw", SAMPLE_HANDS)
    def test_invariant_under_suit_permutation(self, cards, raw):
        hand = cards(raw)
        reference = format_cards(normalize(hand)[0])
        for permutation in permutations(CANONICAL_SUITS):
            permuted = _relabel(hand, permutation)
            assert format_cards(normalize(permuted)[0]) == reference

    @pytest.mark.parametrize("raw", SAMPLE_HANDS)
    def test_input_order_irrelevant(self, cards, raw):
        hand = cards(raw)
        assert normalize(hand)[0] == normalize(list(reversed(hand)))[0]

    @pytest.mark.parametrize("raw", SAMPLE_HANDS)
    def test_output_sorted(self, cards, raw):
        normalized, _ = normalize(cards(raw))
        assert normalized == sorted(normalized, key=canonical_sort_key)
        assert len(normalized) == len(raw) // 2

    def test_rank_multiset_preserved(self, cards):
        hand = cards("9c9d9h2s2c")
        normalized, _ = normalize(hand)
        assert sorted(c.value for c in normalized) == sorted(c.value for c in hand)

    def test_empty(self):
        normalized, mapping = normalize([])
        assert normalized == []
        assert len(mapping) == 0

    def test_repeated_card(self, cards):
        with pytest.raises(InvalidHandError):
            normalize(cards("AsAsKd"))

    def test_four_suits_resolve_to_singletons(self, cards):
        _, mapping = normalize(cards("2c3d4h5s"))
        assert mapping.as_dict() == {S: {S}, H: {H}, D: {D}, C: {C}}

    def test_mapping_narrows_group_suits(self, cards):
        # Ah alone fixes hearts to spades, so the K group leaves spades -> hearts
        _, mapping = normalize(cards("AhKsKhJd"))
        assert mapping.as_dict() == {H: {S}, S: {H}, D: {D}}

    def test_mapping_keeps_ambiguous_group(self, cards):
        _, mapping = normalize(cards("AsAh"))
        assert mapping.as_dict() == {S: {S, H}, H: {S, H}}
        assert not mapping[S].is_resolved

    def test_conflicting_group_widens_to_free_labels(self, cards):
        # the K group would put hearts and diamonds both on hearts
        _, mapping = normalize(cards("AsKhKdQc"))
        assert mapping.as_dict() == {S: {S}, H: {H, C}, D: {H, C}, C: {D}}
        _assert_one_to_one(mapping)

    def test_mapping_keeps_normalized_cards(self, cards):
        normalized, mapping = normalize(cards("AhKsKhJd"))
        assert list(mapping.cards) == normalized

    def test_random_mappings_are_one_to_one(self):
        rng = random.Random(3)
        deck = full_deck()
        for _ in range(2_000):
            _, mapping = normalize(rng.sample(deck, rng.randint(1, 5)))
            _assert_one_to_one(mapping)


class TestNormalizeDependent:
    """Tests for normalize_dependent()."""

    @pytest.mark.parametrize("community,hole,expected_community,expected_hole", [
        ("AhKsKhJd", "5h5dTs", "AsKsKhJd", "Th5s5d"),
        ("2c3d4h5s", "6c7d8d9h", "5s4h3d2c", "9h8d7d6c"),
        ("QhKh2h4d5s", "3hAhAdAs", "KsQs5h4d2s", "AsAhAd3s"),
    ])
    def test_consistent_with_reference(self, cards, community, hole,
                                       expected_community, expected_hole):
        normalized, mapping = normalize(cards(community))
        assert format_cards(normalized) == expected_community
        assert format_cards(normalize_dependent(mapping, cards(hole))) == expected_hole

    def test_ambiguous_suit_locks_first_candidate(self, cards):
        _, mapping = normalize(cards("AsAh"))
        # hearts locks to spades, which leaves hearts for spades; clubs is fresh
        result = normalize_dependent(mapping, cards("QhJsTc"))
        assert format_cards(result) == "QsJhTd"

    def test_does_not_modify_mapping(self, cards):
        _, mapping = normalize(cards("AsAh"))
        before = mapping.as_dict()
        normalize_dependent(mapping, cards("QhJs"))
        assert mapping.as_dict() == before

    def test_board_with_paired_suits(self, cards):
        normalized, mapping = normalize(cards("5sJh2d2c3h"))
        assert format_cards(normalized) == "Js5h3s2s2h"
        assert format_cards(normalize_dependent(mapping, cards("TdAdAh7c"))) == "AsAdTd7c"

    def test_taken_card_falls_back_to_free_label(self, cards):
        # hearts stands for spades, but Ks is already on the board
        normalized, mapping = normalize(cards("AhKsKd"))
        assert format_cards(normalized) == "AsKsKh"
        result, working = resolve_dependent(mapping, cards("Kh"))
        assert format_cards(result) == "Kd"
        assert working == mapping

    def test_repeated_card(self, cards):
        _, mapping = normalize(cards("AsAh"))
        with pytest.raises(InvalidHandError):
            normalize_dependent(mapping, cards("KdKd"))

    def test_random_deals_stay_distinct(self):
        rng = random.Random(17)
        deck = full_deck()
        for _ in range(2_000):
            dealt = rng.sample(deck, 9)
            board, hole = dealt[:5], dealt[5:]
            normalized, mapping = normalize(board)
            result, working = resolve_dependent(mapping, hole)
            assert len(result) == 4
            assert len(set(result)) == 4
            assert not set(result) & set(normalized)
            _assert_one_to_one(mapping)
            _assert_one_to_one(working)

    def test_empty_mapping_assigns_in_order(self, cards):
        result = normalize_dependent(SuitMapping(), cards("2c9d"))
        assert format_cards(result) == "9h2s"

    def test_output_sorted(self, cards):
        _, mapping = normalize(cards("AhKsKhJd"))
        result = normalize_dependent(mapping, cards("2h5dTs9c"))
        assert result == sorted(result, key=canonical_sort_key)


class TestSuitVariable:
    """Tests for the suit constraint primitives."""

    def test_resolved(self):
        assert SuitVariable([H]).resolved == H
        assert SuitVariable([S, H]).resolved is None

    def test_first_candidate(self):
        assert SuitVariable([C, D, H]).first_candidate() == H

    def test_discard_never_empties(self):
        variable = SuitVariable([D])
        assert variable.discard(D) is False
        assert variable.candidates == {D}

    def test_constrain_intersects(self):
        variable = SuitVariable([S, H])
        variable.constrain(frozenset([H, D]))
        assert variable.candidates == {H}

    def test_lock_propagates(self):
        mapping = SuitMapping.from_dict({S: [S, H], H: [S, H], D: [D]})
        mapping.lock(H, S)
        assert mapping.as_dict() == {S: {H}, H: {S}, D: {D}}

    def test_disjoint_constrain_leaves_domain(self):
        variable = SuitVariable([S, H])
        assert variable.constrain(frozenset([D])) is False
        assert variable.candidates == {S, H}

    def test_mapping_constrain_widens_to_unused(self):
        mapping = SuitMapping.from_dict({S: [H], D: [S]})
        mapping.constrain(S, [D])
        assert mapping[S].candidates == {H, D, C}

    def test_can_lock(self):
        mapping = SuitMapping.from_dict({S: [S, H], H: [S, H]})
        assert mapping.can_lock(D, S) is False
        assert mapping.can_lock(D, D) is True
        assert D not in mapping

    def test_empty_candidates_rejected(self):
        with pytest.raises(ValueError):
            SuitVariable([])
