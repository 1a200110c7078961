"""Blackjack game engine with state machine."""

import logging
from random import Random
from typing import Callable, Iterator

from transitions import Machine

from core.cards import Deck, create_deck
from core.errors import InvalidAction
from core.game import rules
from core.game.events import EventEmitter, EventType, GameEvent
from core.game.state import GameState, Outcome, Phase, is_valid_transition
from core.hand import Hand, calculate_score, format_hand

logger = logging.getLogger(__name__)


class BlackjackGame:
    """
    Blackjack game engine using a state machine.

    The engine owns the current GameState and replaces it with the result of
    a pure transition from core.game.rules on every action. The state
    machine's state always mirrors ``state.phase``.

    This is the core game logic, completely UI-agnostic.
    Communication happens through events and return values only.
    """

    # State machine states
    STATES = [p.name.lower() for p in Phase]

    # State machine transitions
    TRANSITIONS = [
        {"trigger": "cards_dealt", "source": "dealing", "dest": "player_turn"},
        {"trigger": "player_busts", "source": "player_turn", "dest": "resolved"},
        {"trigger": "player_stands", "source": "player_turn", "dest": "dealer_turn"},
        {"trigger": "dealer_done", "source": "dealer_turn", "dest": "resolved"},
        {"trigger": "new_round", "source": ["player_turn", "resolved"], "dest": "dealing"},
    ]

    def __init__(
        self,
        rng: Random | None = None,
        deck_factory: Callable[[], Deck] | None = None,
    ) -> None:
        """
        Initialize a new game and deal the first round.

        Args:
            rng: Random number generator for reproducible games
            deck_factory: Supplies the deck for each round (a shuffled
                52-card deck if omitted)
        """
        self._rng = rng or Random()
        self._deck_factory = deck_factory
        self._state = GameState()
        self.events = EventEmitter()

        # Initialize state machine
        self.machine = Machine(
            model=self,
            states=self.STATES,
            transitions=self.TRANSITIONS,
            initial="dealing",
            auto_transitions=False,
            model_attribute="_machine_state",
        )

        self._deal()

    @property
    def phase(self) -> Phase:
        """Get current phase as enum."""
        return Phase[self._machine_state.upper()]  # type: ignore

    @property
    def state(self) -> GameState:
        """Get the current round state."""
        return self._state

    def subscribe(
        self,
        handler: Callable[[GameEvent], None],
        event_type: EventType | None = None,
    ) -> None:
        """Subscribe to game events."""
        self.events.subscribe(handler, event_type)

    def restart(self) -> bool:
        """
        Throw away the current round and deal a new one.

        Rejected while the dealer is playing.
        """
        if self.phase == Phase.DEALER_TURN:
            return self._reject("restart")

        if self.phase != Phase.DEALING:
            self.new_round()  # Trigger state transition
        return self._deal()

    def _deal(self) -> bool:
        """Deal the initial cards, starting a fresh event history."""
        self.events.clear_history()
        deck = self._deck_factory() if self._deck_factory else create_deck(self._rng)
        self._state = rules.start_round(deck)

        # Deal order: player, dealer, player, dealer
        player, dealer = self._state.player_hand, self._state.dealer_hand
        for hand_name, hand, count in (
            ("player", player, 1),
            ("dealer", dealer, 1),
            ("player", player, 2),
            ("dealer", dealer, 2),
        ):
            self._emit_card(hand_name, hand[:count])

        self.events.emit_new(
            EventType.ROUND_STARTED,
            player_score=self._state.player_score,
            cards_remaining=len(self._state.deck),
        )
        self.cards_dealt()
        return True

    def _emit_card(self, hand_name: str, hand: Hand) -> None:
        """Announce the last card of a hand."""
        self.events.emit_new(
            EventType.CARD_DEALT,
            card=str(hand[-1]),
            hand=hand_name,
            hand_value=calculate_score(hand),
        )

    def _reject(self, action: str | InvalidAction) -> bool:
        """Turn an invalid action into a no-op."""
        if not isinstance(action, InvalidAction):
            action = InvalidAction(action, self.phase)
        logger.debug("Rejected action: %s", action)
        self.events.emit_new(
            EventType.INVALID_ACTION,
            message=str(action),
            action=action.action,
            state=self.phase.name,
        )
        return False

    def hit(self) -> bool:
        """Player hits (takes another card)."""
        try:
            new_state = rules.hit(self._state)
        except InvalidAction as exc:
            return self._reject(exc)

        if new_state is self._state:
            self.events.emit_new(EventType.DECK_EXHAUSTED, hand="player")
            return False

        self._adopt(new_state)
        self._emit_card("player", new_state.player_hand)
        self.events.emit_new(EventType.PLAYER_HIT, hand_value=new_state.player_score)

        if new_state.outcome == Outcome.PLAYER_BUST:
            self.events.emit_new(EventType.PLAYER_BUSTS, hand_value=new_state.player_score)
            self.player_busts()
            self._round_resolved()
        return True

    def stand(self) -> bool:
        """Player stands; the dealer plays out their hand at once."""
        if self.phase != Phase.PLAYER_TURN:
            return self._reject("stand")

        for _ in self.stand_steps():
            pass
        return True

    def stand_steps(self) -> Iterator[GameState]:
        """
        Player stands; the dealer's hand is revealed one step at a time.

        Yields the state after the hole card is revealed, after each card the
        dealer draws, and finally the resolved state. The presentation layer
        decides how long to pause between steps. Until the generator is
        exhausted the engine stays in DEALER_TURN and rejects every action.
        Closing the generator early still plays the round to completion.

        Yields nothing if standing is not allowed.
        """
        if self.phase != Phase.PLAYER_TURN:
            self._reject("stand")
            return

        steps = rules.dealer_steps(self._state)
        try:
            for step in steps:
                self._apply_dealer_step(step)
                yield step
        finally:
            for step in steps:
                self._apply_dealer_step(step)

    def _adopt(self, new_state: GameState) -> GameState:
        """Replace the current state, returning the one it replaced."""
        previous = self._state
        if not is_valid_transition(previous.phase, new_state.phase):
            raise RuntimeError(f"Illegal phase change: {previous.phase} -> {new_state.phase}")
        self._state = new_state
        return previous

    def _apply_dealer_step(self, step: GameState) -> None:
        """Adopt one intermediate state of the dealer's turn."""
        previous = self._adopt(step)

        if previous.phase == Phase.PLAYER_TURN:
            self.events.emit_new(EventType.PLAYER_STAND, hand_value=step.player_score)
            self.player_stands()
            self.events.emit_new(
                EventType.DEALER_REVEALS,
                card=str(step.dealer_hand[-1]),
                hand_value=step.dealer_score,
            )
            return

        if len(step.dealer_hand) > len(previous.dealer_hand):
            self._emit_card("dealer", step.dealer_hand)
            self.events.emit_new(EventType.DEALER_HITS, hand_value=step.dealer_score)

        if step.phase != Phase.RESOLVED:
            return

        if rules.dealer_should_draw(step):
            self.events.emit_new(EventType.DECK_EXHAUSTED, hand="dealer")
        if step.outcome == Outcome.DEALER_BUST:
            self.events.emit_new(EventType.DEALER_BUSTS, hand_value=step.dealer_score)
        else:
            self.events.emit_new(EventType.DEALER_STANDS, hand_value=step.dealer_score)
        self.dealer_done()
        self._round_resolved()

    def _round_resolved(self) -> None:
        """Announce the outcome of the round."""
        state = self._state
        logger.info(
            "Round resolved: %s (player %s, dealer %s)",
            state.outcome,
            format_hand(state.player_hand),
            format_hand(state.dealer_hand),
        )
        self.events.emit_new(
            EventType.ROUND_RESOLVED,
            outcome=state.outcome.name if state.outcome else None,
            player_score=state.player_score,
            dealer_score=state.dealer_score,
            player_won=state.outcome.player_won if state.outcome else False,
        )

    @property
    def player_hand(self) -> Hand:
        """Return the player's cards."""
        return self._state.player_hand

    @property
    def dealer_hand(self) -> Hand:
        """Return the dealer's cards, hole card included."""
        return self._state.dealer_hand

    @property
    def player_score(self) -> int:
        return self._state.player_score

    @property
    def dealer_score(self) -> int:
        return self._state.dealer_score

    @property
    def outcome(self) -> Outcome | None:
        return self._state.outcome

    @property
    def cards_remaining(self) -> int:
        return len(self._state.deck)

    def visible_dealer_hand(self, hide_hole_card: bool = False) -> Hand:
        """
        Return the dealer's cards as the player may see them.

        The hole card is only ever hidden during the player's turn.
        """
        if hide_hole_card and self.phase == Phase.PLAYER_TURN:
            return self._state.dealer_hand[:1]
        return self._state.dealer_hand

    @property
    def can_hit(self) -> bool:
        """Check if hitting is allowed."""
        return self.phase == Phase.PLAYER_TURN and bool(self._state.deck)

    @property
    def can_stand(self) -> bool:
        """Check if standing is allowed."""
        return self.phase == Phase.PLAYER_TURN

    @property
    def can_restart(self) -> bool:
        """Check if a new round may be dealt."""
        return self.phase != Phase.DEALER_TURN
