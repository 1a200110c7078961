"""Card and deck primitives - immutable card representations."""

from dataclasses import dataclass
from enum import Enum
from random import Random

from core.errors import DeckExhausted


class Suit(Enum):
    """Card suits."""

    CLUBS = "♣"
    SPADES = "♠"
    HEARTS = "♡"
    DIAMONDS = "♢"

    def __str__(self) -> str:
        return self.value

    @property
    def is_red(self) -> bool:
        """Check if this suit is printed in red."""
        return self in (Suit.HEARTS, Suit.DIAMONDS)


class Rank(Enum):
    """Card ranks, valued by their printed label."""

    ACE = "A"
    TWO = "2"
    THREE = "3"
    FOUR = "4"
    FIVE = "5"
    SIX = "6"
    SEVEN = "7"
    EIGHT = "8"
    NINE = "9"
    TEN = "10"
    JACK = "J"
    QUEEN = "Q"
    KING = "K"

    def __str__(self) -> str:
        return self.value

    @property
    def blackjack_value(self) -> int:
        """Return the blackjack point value (Ace = 11, face cards = 10)."""
        if self == Rank.ACE:
            return 11
        if self in (Rank.JACK, Rank.QUEEN, Rank.KING):
            return 10
        return int(self.value)

    @property
    def is_ace(self) -> bool:
        """Check if this rank is an Ace."""
        return self == Rank.ACE


@dataclass(frozen=True, slots=True)
class Card:
    """Immutable playing card."""

    rank: Rank
    suit: Suit

    def __str__(self) -> str:
        return f"{self.rank}{self.suit}"

    def __repr__(self) -> str:
        return f"Card({self.rank.name}, {self.suit.name})"

    @property
    def value(self) -> int:
        """Return the blackjack point value."""
        return self.rank.blackjack_value

    @property
    def is_ace(self) -> bool:
        """Check if this card is an Ace."""
        return self.rank.is_ace

    @classmethod
    def from_string(cls, s: str) -> "Card":
        """Create a card from a string like '2♣', 'AS', 'Kh', '10♡'."""
        s = s.strip().upper()
        if len(s) < 2:
            raise ValueError(f"Invalid card string: {s}")

        rank_str = s[:-1]
        suit_str = s[-1]

        if rank_str == "T":
            rank_str = "10"

        suit_map = {
            "C": Suit.CLUBS,
            "♣": Suit.CLUBS,
            "S": Suit.SPADES,
            "♠": Suit.SPADES,
            "H": Suit.HEARTS,
            "♡": Suit.HEARTS,
            "♥": Suit.HEARTS,
            "D": Suit.DIAMONDS,
            "♢": Suit.DIAMONDS,
            "♦": Suit.DIAMONDS,
        }

        try:
            rank = Rank(rank_str)
        except ValueError:
            raise ValueError(f"Invalid rank: {rank_str}") from None
        if suit_str not in suit_map:
            raise ValueError(f"Invalid suit: {suit_str}")

        return cls(rank, suit_map[suit_str])


# A deck is consumed from the front and never replenished mid-round.
Deck = tuple[Card, ...]

DECK_SIZE = len(Suit) * len(Rank)


def create_deck(rng: Random | None = None) -> Deck:
    """
    Build all 52 suit/rank combinations and shuffle them uniformly.

    Args:
        rng: Random number generator for reproducible decks

    Returns:
        A new deck; the caller owns it
    """
    rng = rng or Random()
    cards = [Card(rank, suit) for suit in Suit for rank in Rank]
    # Random.shuffle is a Fisher-Yates shuffle: every ordering is reachable.
    rng.shuffle(cards)
    return tuple(cards)


def draw(deck: Deck) -> tuple[Card, Deck]:
    """
    Take the front card of a deck.

    Returns:
        The drawn card and the remaining deck

    Raises:
        DeckExhausted: if the deck is empty
    """
    if not deck:
        raise DeckExhausted("Cannot draw from empty deck")
    return deck[0], deck[1:]


def deck_from_strings(*cards: str) -> Deck:
    """Build a pre-ordered deck, e.g. deck_from_strings("KS", "9H", "AD")."""
    return tuple(Card.from_string(c) for c in cards)
