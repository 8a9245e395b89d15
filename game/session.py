"""BarSession: the stateful wrapper a front-end drives.

Holds the current :class:`RoundState`, forwards player actions and frame
ticks to the pure functions in :mod:`game.simulation`, and persists the best
score when a round ends.
"""
from __future__ import annotations

import logging
from typing import List, Optional

from config import DRINK_LABELS, MAX_FRAME_DT
from game.entities import CustomerStatus, GamePhase, RoundState
from game.simulation import (
    advance,
    clamp,
    create_initial_state,
    end_game,
    select_drink,
    serve_seat,
    start_game,
)
from highscore_store import HighScoreStore, MemoryHighScoreStore

logger = logging.getLogger(__name__)

EVENT_LOG_SIZE = 12


class BarSession:
    def __init__(self, store: Optional[HighScoreStore] = None, seed: Optional[int] = None) -> None:
        self.store: HighScoreStore = store if store is not None else MemoryHighScoreStore()
        self.state: RoundState = create_initial_state(self.store.load(), seed)
        self.event_log: List[str] = []
        logger.debug("Session ready, high score %d", self.state.high_score)

    def _log_event(self, message: str) -> None:
        self.event_log.append(message)
        self.event_log = self.event_log[-EVENT_LOG_SIZE:]
        logger.debug(message)

    def _commit(self, next_state: RoundState) -> RoundState:
        previous = self.state
        self.state = next_state
        if next_state is previous:
            return next_state

        self._record_outcomes(previous, next_state)
        if previous.phase == GamePhase.PLAYING and next_state.phase == GamePhase.GAME_OVER:
            self._log_event(f"Round over: score {next_state.score}, best {next_state.high_score}")
            self.store.save(next_state.high_score)
        return next_state

    def _record_outcomes(self, previous: RoundState, current: RoundState) -> None:
        before = {c.id: c.status for c in previous.customers}
        for customer in current.customers:
            old = before.get(customer.id)
            if old != CustomerStatus.SEATED or customer.status == old:
                continue
            label = DRINK_LABELS.get(customer.drink_order, customer.drink_order)
            if customer.status == CustomerStatus.SERVED_HAPPY:
                self._log_event(f"Seat {customer.seat_id} served {label}")
            elif customer.status == CustomerStatus.SERVED_WRONG:
                self._log_event(f"Seat {customer.seat_id} got the wrong drink (wanted {label})")
            elif customer.status == CustomerStatus.LEAVING_ANGRY:
                self._log_event(f"Seat {customer.seat_id} gave up waiting for {label}")

    # ------------------------------------------------------------------
    # Player actions
    # ------------------------------------------------------------------

    def start(self) -> RoundState:
        self.event_log = []
        self._log_event("Round started")
        return self._commit(start_game(self.state))

    def select_drink(self, drink: str) -> RoundState:
        return self._commit(select_drink(self.state, drink))

    def serve_seat(self, seat_id: int) -> RoundState:
        return self._commit(serve_seat(self.state, seat_id))

    def quit(self) -> RoundState:
        return self._commit(end_game(self.state))

    def tick(self, dt: float) -> RoundState:
        """Advance one frame; ``dt`` is clamped to ``[0, MAX_FRAME_DT]``."""
        return self._commit(advance(self.state, clamp(dt, 0.0, MAX_FRAME_DT)))

    @property
    def is_playing(self) -> bool:
        return self.state.phase == GamePhase.PLAYING
