"""Card, Rank, and Suit models."""

from enum import Enum
from typing import Iterable, List, Sequence, Tuple, Union

from plo_equity.exceptions import InvalidHandError


class Suit(str, Enum):
    """Suits in canonical order: spades > hearts > diamonds > clubs."""
    SPADES = "s"
    HEARTS = "h"
    DIAMONDS = "d"
    CLUBS = "c"

    @classmethod
    def from_symbol(cls, s: str) -> "Suit":
        mapping = {
            "s": cls.SPADES, "♠": cls.SPADES,
            "h": cls.HEARTS, "♥": cls.HEARTS,
            "d": cls.DIAMONDS, "♦": cls.DIAMONDS,
            "c": cls.CLUBS, "♣": cls.CLUBS,
        }
        if s in mapping:
            return mapping[s]
        raise InvalidHandError(f"Unknown suit: {s}")

    @property
    def symbol(self) -> str:
        return {"h": "♥", "d": "♦", "c": "♣", "s": "♠"}[self.value]

    @property
    def order(self) -> int:
        """Position in canonical order, 0 for spades."""
        return _SUIT_ORDER[self]


class Rank(str, Enum):
    TWO = "2"
    THREE = "3"
    FOUR = "4"
    FIVE = "5"
    SIX = "6"
    SEVEN = "7"
    EIGHT = "8"
    NINE = "9"
    TEN = "T"
    JACK = "J"
    QUEEN = "Q"
    KING = "K"
    ACE = "A"

    @property
    def numeric_value(self) -> int:
        return _RANK_VALUES[self.value]

    @classmethod
    def from_char(cls, c: str) -> "Rank":
        for r in cls:
            if r.value == c.upper():
                return r
        raise InvalidHandError(f"Unknown rank: {c}")

    @classmethod
    def from_value(cls, value: int) -> "Rank":
        return _RANKS_BY_VALUE[value]


_SUIT_ORDER = {suit: i for i, suit in enumerate(Suit)}
_RANK_VALUES = {
    "2": 2, "3": 3, "4": 4, "5": 5, "6": 6, "7": 7, "8": 8,
    "9": 9, "T": 10, "J": 11, "Q": 12, "K": 13, "A": 14,
}
_RANKS_BY_VALUE = {_RANK_VALUES[r.value]: r for r in Rank}

CANONICAL_SUITS: Tuple[Suit, ...] = tuple(Suit)


class Card:
    """A single playing card."""

    __slots__ = ("rank", "suit", "value")

    def __init__(self, rank: Rank, suit: Suit):
        self.rank = rank
        self.suit = suit
        self.value = rank.numeric_value

    @classmethod
    def parse(cls, s: str) -> "Card":
        """Parse a card string like 'Ah', 'Ts', '2c'."""
        s = s.strip()
        if len(s) == 2:
            return cls(Rank.from_char(s[0]), Suit.from_symbol(s[1]))
        raise InvalidHandError(f"Cannot parse card: {s!r}")

    def __repr__(self) -> str:
        return f"{self.rank.value}{self.suit.value}"

    def __str__(self) -> str:
        return f"{self.rank.value}{self.suit.symbol}"

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Card):
            return NotImplemented
        return self.rank == other.rank and self.suit == other.suit

    def __hash__(self) -> int:
        return hash((self.rank, self.suit))

    def to_short(self) -> str:
        """Return short string like 'Ah'."""
        return f"{self.rank.value}{self.suit.value}"


CardsLike = Union[str, Iterable[Union[Card, str]]]


def canonical_sort_key(card: Card) -> Tuple[int, int]:
    """Sort key for rank descending, then canonical suit order."""
    return -card.value, card.suit.order


def parse_cards(cards: CardsLike) -> List[Card]:
    """Parse a run of cards.

    Accepts a concatenated string ("KsKh8d7c", spaces allowed), or any
    iterable of Card objects and two-character card strings.
    """
    if isinstance(cards, str):
        text = "".join(cards.split())
        if len(text) % 2:
            raise InvalidHandError(f"Cannot split {cards!r} into two-character cards")
        return [Card.parse(text[i:i + 2]) for i in range(0, len(text), 2)]
    parsed = []
    for card in cards:
        parsed.append(card if isinstance(card, Card) else Card.parse(card))
    return parsed


def parse_hand(cards: CardsLike, size: int, owner: str = "Hand") -> List[Card]:
    """Parse exactly ``size`` distinct cards.

    Raises:
        InvalidHandError: on a bad token, wrong length or a repeated card.
    """
    hand = parse_cards(cards)
    if len(hand) != size:
        raise InvalidHandError(f"{owner} must have exactly {size} cards, got {len(hand)}")
    if len(set(hand)) != len(hand):
        raise InvalidHandError(f"{owner} contains a repeated card: {format_cards(hand)}")
    return hand


def format_cards(cards: Sequence[Card]) -> str:
    return "".join(card.to_short() for card in cards)


def full_deck() -> List[Card]:
    """All 52 cards, ranks high to low within each suit."""
    return [Card(rank, suit) for suit in Suit for rank in reversed(Rank)]
