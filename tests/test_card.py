"""Tests for card parsing and ordering."""

import pytest

from plo_equity.exceptions import InvalidHandError
from plo_equity.models.card import (
    Card, Rank, Suit, CANONICAL_SUITS,
    canonical_sort_key, format_cards, full_deck, parse_cards, parse_hand,
)


class TestCard:
    """Tests for the Card model."""

    def test_parse(self):
        card = Card.parse("Ah")
        assert card.rank == Rank.ACE
        assert card.suit == Suit.HEARTS
        assert card.value == 14

    def test_parse_lowercase_rank(self):
        assert Card.parse("th") == Card(Rank.TEN, Suit.HEARTS)

    def test_parse_invalid(self):
        with pytest.raises(InvalidHandError):
            Card.parse("Xh")
        with pytest.raises(InvalidHandError):
            Card.parse("Ax")
        with pytest.raises(InvalidHandError):
            Card.parse("10h")

    def test_invalid_card_is_value_error(self):
        with pytest.raises(ValueError):
            Card.parse("Zz")

    def test_equality_and_hash(self):
        assert Card.parse("Ks") == Card(Rank.KING, Suit.SPADES)
        assert len({Card.parse("Ks"), Card.parse("Ks"), Card.parse("Kh")}) == 2

    def test_short_form(self):
        assert Card.parse("9d").to_short() == "9d"
        assert repr(Card.parse("9d")) == "9d"
        assert str(Card.parse("9d")) == "9♦"


class TestSuitOrder:
    """Canonical suit order is spades > hearts > diamonds > clubs."""

    def test_canonical_order(self):
        assert CANONICAL_SUITS == (Suit.SPADES, Suit.HEARTS, Suit.DIAMONDS, Suit.CLUBS)
        assert [s.order for s in CANONICAL_SUITS] == [0, 1, 2, 3]

    def test_sort_key(self):
        hand = parse_cards("2cAhAsKd")
        assert format_cards(sorted(hand, key=canonical_sort_key)) == "AsAhKd2c"


class TestParsing:
    """Tests for hand parsing helpers."""

    def test_parse_concatenated(self):
        assert format_cards(parse_cards("KsKh8d7c")) == "KsKh8d7c"

    def test_parse_with_spaces(self):
        assert format_cards(parse_cards("Ks Kh 8d 7c")) == "KsKh8d7c"

    def test_parse_sequence(self):
        mixed = ["Ks", Card.parse("Kh")]
        assert format_cards(parse_cards(mixed)) == "KsKh"

    def test_odd_length(self):
        with pytest.raises(InvalidHandError):
            parse_cards("KsK")

    def test_parse_hand_length(self):
        with pytest.raises(InvalidHandError, match="exactly 4"):
            parse_hand("KsKh8d", 4, "Hero")

    def test_parse_hand_repeated_card(self):
        with pytest.raises(InvalidHandError, match="repeated"):
            parse_hand("KsKsKd7c", 4, "Hero")

    def test_full_deck(self):
        deck = full_deck()
        assert len(deck) == 52
        assert len(set(deck)) == 52
