"""Core dataclasses for the Minibar simulation.

Every record is frozen: the simulation produces a fresh :class:`RoundState`
per call instead of mutating the previous one.
"""
from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Optional, Tuple


class SeatSide(str, Enum):
    LEFT = "left"
    FRONT = "front"
    RIGHT = "right"


class CustomerStatus(str, Enum):
    WALKING_IN = "walking_in"
    SEATED = "seated"
    SERVED_HAPPY = "served_happy"
    SERVED_WRONG = "served_wrong"
    LEAVING_ANGRY = "leaving_angry"
    WALKING_OUT = "walking_out"
    GONE = "gone"


class WorkerPhase(str, Enum):
    IDLE = "idle"
    TO_BARREL = "to_barrel"
    AT_BARREL = "at_barrel"
    TO_BAR = "to_bar"
    AT_BAR = "at_bar"
    RETURNING = "returning"

    @property
    def is_moving(self) -> bool:
        return self in (WorkerPhase.TO_BARREL, WorkerPhase.TO_BAR, WorkerPhase.RETURNING)


class GamePhase(str, Enum):
    TITLE = "title"
    PLAYING = "playing"
    GAME_OVER = "game_over"


@dataclass(frozen=True)
class Seat:
    """A fixed slot at the bar where one customer may sit."""

    id: int
    side: SeatSide
    x: float
    y: float
    entry_x: float
    entry_y: float


@dataclass(frozen=True)
class Customer:
    """A patron walking in, waiting for a drink, or on the way out.

    ``walk_progress`` is a 0..1 fraction. While walking it drives the
    displayed position; in the feedback states it times how long the
    served/angry icon stays up.
    """

    id: int
    seat_id: int
    drink_order: str
    status: CustomerStatus = CustomerStatus.WALKING_IN
    color: str = "#ffffff"
    wait_timer: float = 0.0
    max_wait_time: float = 0.0
    walk_progress: float = 0.0

    @property
    def wait_ratio(self) -> float:
        if self.max_wait_time <= 0:
            return 0.0
        return self.wait_timer / self.max_wait_time


@dataclass(frozen=True)
class Worker:
    """A bar worker cycling barrel -> bar -> barrel.

    ``assigned_seat_id`` and ``drink_carried`` are only set between
    ``TO_BARREL`` and ``AT_BAR``.
    """

    id: int
    x: float
    y: float
    target_x: float
    target_y: float
    phase: WorkerPhase = WorkerPhase.IDLE
    pause_timer: float = 0.0
    assigned_seat_id: Optional[int] = None
    drink_carried: Optional[str] = None


@dataclass(frozen=True)
class RoundState:
    """Immutable snapshot of one round.

    ``rng_seed`` seeds the next random draw so that every transition is a
    pure function of its inputs.
    """

    phase: GamePhase
    score: int
    rating: float
    high_score: int
    selected_drink: Optional[str]
    customers: Tuple[Customer, ...]
    workers: Tuple[Worker, ...]
    time_since_last_spawn: float
    spawn_interval: float
    elapsed_time: float
    next_customer_id: int
    rng_seed: int = 0

    def customer_at(self, seat_id: int) -> Optional[Customer]:
        for customer in self.customers:
            if customer.seat_id == seat_id and customer.status != CustomerStatus.GONE:
                return customer
        return None

    def worker_for_seat(self, seat_id: int) -> Optional[Worker]:
        for worker in self.workers:
            if worker.assigned_seat_id == seat_id:
                return worker
        return None
