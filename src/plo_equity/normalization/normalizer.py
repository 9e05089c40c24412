"""Suit canonicalization of card sets.

``normalize`` relabels the suits of a hand so that hands which differ only
by a renaming of suits share one representative. ``normalize_dependent``
relabels a second card set (an opponent's hole cards, say) consistently
with a hand that was already normalized, using the suit mapping that
``normalize`` returned.
"""

import logging
from itertools import groupby, permutations
from typing import Dict, FrozenSet, Iterable, Iterator, List, Optional, Sequence, Tuple

from plo_equity.exceptions import InvalidHandError
from plo_equity.models.card import CANONICAL_SUITS, Card, Suit, canonical_sort_key

logger = logging.getLogger(__name__)

ALL_SUITS: FrozenSet[Suit] = frozenset(CANONICAL_SUITS)


class SuitVariable:
    """The canonical suits one raw suit may still be relabeled to.

    Resolved once exactly one candidate remains.
    """

    __slots__ = ("candidates",)

    def __init__(self, candidates: Iterable[Suit]):
        self.candidates: FrozenSet[Suit] = frozenset(candidates)
        if not self.candidates:
            raise ValueError("A suit variable needs at least one candidate")

    @property
    def is_resolved(self) -> bool:
        return len(self.candidates) == 1

    @property
    def resolved(self) -> Optional[Suit]:
        if self.is_resolved:
            return next(iter(self.candidates))
        return None

    def first_candidate(self) -> Suit:
        """Highest candidate in canonical order."""
        return min(self.candidates, key=lambda s: s.order)

    def constrain(self, candidates: FrozenSet[Suit]) -> bool:
        """Intersect with another domain. Returns False, leaving the domain
        untouched, when the two are disjoint."""
        narrowed = self.candidates & candidates
        if not narrowed:
            return False
        self.candidates = narrowed
        return True

    def discard(self, suit: Suit) -> bool:
        """Drop ``suit`` from an unresolved domain. Returns True on change."""
        if suit in self.candidates and len(self.candidates) > 1:
            self.candidates = self.candidates - {suit}
            return True
        return False

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, SuitVariable):
            return NotImplemented
        return self.candidates == other.candidates

    def __repr__(self) -> str:
        labels = "".join(s.value for s in sorted(self.candidates, key=lambda s: s.order))
        return f"SuitVariable({labels})"


class SuitMapping:
    """Raw suit -> SuitVariable, an all-different constraint over four suits.

    ``cards`` holds the normalized hand the mapping was built from, so that
    dependent cards can be kept clear of it.
    """

    def __init__(self, variables: Optional[Dict[Suit, SuitVariable]] = None,
                 cards: Iterable[Card] = ()):
        self._variables: Dict[Suit, SuitVariable] = dict(variables or {})
        self.cards: Tuple[Card, ...] = tuple(cards)

    @classmethod
    def from_dict(cls, mapping: Dict[Suit, Iterable[Suit]],
                  cards: Iterable[Card] = ()) -> "SuitMapping":
        return cls({raw: SuitVariable(labels) for raw, labels in mapping.items()}, cards)

    def unused(self, raw: Optional[Suit] = None) -> FrozenSet[Suit]:
        """Labels no raw suit other than ``raw`` is resolved to."""
        taken = {
            variable.resolved for other, variable in self._variables.items()
            if other != raw and variable.is_resolved
        }
        return ALL_SUITS - taken

    def constrain(self, raw: Suit, candidates: Iterable[Suit]) -> None:
        """Narrow ``raw`` to ``candidates``; disjoint domains widen to the
        labels still unused."""
        candidates = frozenset(candidates)
        variable = self._variables.get(raw)
        if variable is None:
            self._variables[raw] = SuitVariable(candidates)
        elif not variable.constrain(candidates):
            self.relax(raw, self.unused(raw))

    def relax(self, raw: Suit, candidates: Iterable[Suit]) -> None:
        """Replace the domain of ``raw``."""
        self._variables[raw] = SuitVariable(candidates)

    def lock(self, raw: Suit, canonical: Suit) -> None:
        """Fix ``raw`` to ``canonical`` and remove that label from every other
        suit."""
        self._variables[raw] = SuitVariable((canonical,))
        for other, variable in self._variables.items():
            if other != raw:
                variable.discard(canonical)
        self.propagate()

    def can_lock(self, raw: Suit, canonical: Suit) -> bool:
        """True if fixing ``raw`` to ``canonical`` still leaves every raw suit
        a label of its own."""
        trial = self.copy()
        trial._variables[raw] = SuitVariable((canonical,))
        return trial.is_consistent()

    def is_consistent(self) -> bool:
        """True if some assignment gives each raw suit a distinct candidate."""
        raws = list(self._variables)
        for labels in permutations(CANONICAL_SUITS, len(raws)):
            if all(label in self._variables[raw].candidates for raw, label in zip(raws, labels)):
                return True
        return False

    def propagate(self) -> None:
        """Remove resolved labels from the other domains until nothing changes."""
        changed = True
        while changed:
            changed = False
            for raw, variable in self._variables.items():
                label = variable.resolved
                if label is None:
                    continue
                for other, other_variable in self._variables.items():
                    if other != raw and other_variable.discard(label):
                        changed = True

    def reserved(self) -> FrozenSet[Suit]:
        """Every canonical suit some raw suit may still map to."""
        labels: FrozenSet[Suit] = frozenset()
        for variable in self._variables.values():
            labels |= variable.candidates
        return labels

    def copy(self) -> "SuitMapping":
        variables = {raw: SuitVariable(v.candidates) for raw, v in self._variables.items()}
        return SuitMapping(variables, self.cards)

    def as_dict(self) -> Dict[Suit, FrozenSet[Suit]]:
        return {raw: variable.candidates for raw, variable in self._variables.items()}

    def get(self, raw: Suit) -> Optional[SuitVariable]:
        return self._variables.get(raw)

    def __getitem__(self, raw: Suit) -> SuitVariable:
        return self._variables[raw]

    def __contains__(self, raw: object) -> bool:
        return raw in self._variables

    def __iter__(self) -> Iterator[Suit]:
        return iter(self._variables)

    def __len__(self) -> int:
        return len(self._variables)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, SuitMapping):
            return NotImplemented
        return self.as_dict() == other.as_dict() and set(self.cards) == set(other.cards)

    def __repr__(self) -> str:
        inner = ", ".join(f"{raw.value}: {var!r}" for raw, var in self._variables.items())
        return f"SuitMapping({{{inner}}})"


def _later_singles(groups: Sequence[List[Card]], suit: Suit, width: int) -> Tuple[int, ...]:
    """Negated ranks of the single cards of ``suit`` in ``groups``, zero padded.

    Distinct suits never hold the same single card rank, so two of these
    tuples only tie when both suits have no single card left.
    """
    values = [-group[0].value for group in groups if len(group) == 1 and group[0].suit == suit]
    return tuple(values) + (0,) * (width - len(values))


def _canonicalize(cards: List[Card]) -> Tuple[List[Card], List[List[Card]], Dict[Suit, Suit]]:
    if len(set(cards)) != len(cards):
        raise InvalidHandError(f"Cannot normalize repeated cards: {cards!r}")

    ordered = sorted(cards, key=lambda c: (-c.value, c.suit.order))
    groups = [list(group) for _, group in groupby(ordered, key=lambda c: c.value)]
    width = len(ordered)

    # held labels always form a prefix of CANONICAL_SUITS
    held: Dict[Suit, Suit] = {}
    normalized: List[Card] = []
    for index, group in enumerate(groups):
        if len(group) == 1:
            card = group[0]
            if card.suit not in held:
                held[card.suit] = CANONICAL_SUITS[len(held)]
            normalized.append(Card(card.rank, held[card.suit]))
            continue

        labels = CANONICAL_SUITS[:len(group)]
        normalized.extend(Card(card.rank, label) for card, label in zip(group, labels))
        later = groups[index + 1:]
        waiting = sorted(
            (card.suit for card in group if card.suit not in held),
            key=lambda s: (_later_singles(later, s, width), s.order),
        )
        for suit, label in zip(waiting, labels[len(held):]):
            held[suit] = label

    normalized.sort(key=canonical_sort_key)
    return normalized, groups, held


def canonical_cards(cards: Iterable[Card]) -> List[Card]:
    """The normalized cards of ``normalize`` without the suit mapping."""
    cards = list(cards)
    if not cards:
        return cards
    return _canonicalize(cards)[0]


def normalize(cards: Iterable[Card]) -> Tuple[List[Card], SuitMapping]:
    """Relabel suits so that suit-isomorphic hands normalize identically.

    Cards are ordered by rank, high first. A card alone at its rank takes
    its suit's label; a suit without one takes the next unused label when
    its first single card is reached. Cards sharing a rank take the first k
    canonical suits, and their not yet labeled suits claim whichever of
    those k labels are still unused, suits with higher single cards later
    in the hand first. Every label handed out is therefore visible in the
    output, which makes normalizing a normalized hand return it unchanged.

    Args:
        cards: Distinct cards, any number.

    Returns:
        Tuple of (normalized cards sorted by rank then canonical suit,
        mapping from raw suits to the canonical suits they may stand for).
        The mapping always admits a one-to-one assignment.

    Raises:
        InvalidHandError: if a card is repeated.
    """
    cards = list(cards)
    if not cards:
        return cards, SuitMapping()
    normalized, groups, held = _canonicalize(cards)

    singles = {group[0].suit for group in groups if len(group) == 1}
    taken = frozenset(held[suit] for suit in singles)
    free = ALL_SUITS - taken

    mapping = SuitMapping(cards=normalized)
    for group in groups:
        if len(group) == 1:
            mapping.constrain(group[0].suit, (held[group[0].suit],))
            continue
        labels = frozenset(CANONICAL_SUITS[:len(group)]) - taken
        for card in group:
            if card.suit not in singles:
                mapping.constrain(card.suit, labels or free)

    if not mapping.is_consistent():
        # the group labels overlap single-card labels; any free label will do
        for raw in mapping:
            if raw not in singles:
                mapping.relax(raw, free)
    mapping.propagate()
    return normalized, mapping


def _dependent_label(working: SuitMapping, card: Card, occupied: set) -> Optional[Suit]:
    variable = working.get(card.suit)
    if variable is None:
        reserved = working.reserved()
        options = sorted(working.unused(), key=lambda s: (s in reserved, s.order))
    else:
        options = sorted(variable.candidates, key=lambda s: s.order)
    for label in options:
        if Card(card.rank, label) not in occupied and working.can_lock(card.suit, label):
            return label
    return None


def resolve_dependent(suit_mapping: SuitMapping,
                      other_cards: Iterable[Card]) -> Tuple[List[Card], SuitMapping]:
    """Normalize ``other_cards`` against ``suit_mapping``.

    Returns:
        Tuple of (normalized cards, the mapping after every lock). The
        caller's mapping is not modified.
    """
    other_cards = list(other_cards)
    if len(set(other_cards)) != len(other_cards):
        raise InvalidHandError(f"Cannot normalize repeated cards: {other_cards!r}")

    working = suit_mapping.copy()
    occupied = set(suit_mapping.cards)
    normalized: List[Card] = []
    for card in other_cards:
        label = _dependent_label(working, card, occupied)
        if label is not None:
            working.lock(card.suit, label)
        else:
            free = [s for s in CANONICAL_SUITS if Card(card.rank, s) not in occupied]
            if not free:
                raise InvalidHandError(f"{card!r} repeats a card of the normalized hand")
            label = free[0]
            logger.debug("No consistent suit for %r, using free label %s", card, label.value)
        result = Card(card.rank, label)
        occupied.add(result)
        normalized.append(result)

    normalized.sort(key=canonical_sort_key)
    return normalized, working


def normalize_dependent(suit_mapping: SuitMapping, other_cards: Iterable[Card]) -> List[Card]:
    """Normalize ``other_cards`` consistently with an already normalized hand.

    Cards are processed in input order. A suit the mapping resolves keeps
    its label; an ambiguous suit is locked to its first candidate that
    keeps the mapping one-to-one; an unseen suit takes the first label no
    raw suit is resolved to, preferring labels no candidate set reserves.
    A label is skipped when it would repeat a card of the normalized hand
    or an earlier output card. When no consistent label is left the card
    takes the first free label at its rank and the mapping is not locked.

    The output never repeats a card and never shares a card with the
    normalized hand the mapping came from.
    """
    return resolve_dependent(suit_mapping, other_cards)[0]
