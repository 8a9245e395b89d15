"""Minibar round simulation.

Every public function takes a :class:`RoundState` snapshot and returns a new
one; nothing is mutated in place.  All gameplay constants are imported from
``config``.  The module has no pygame or file-system dependency and is safe
to import in headless / test contexts.

Randomness (spawn seat, drink, colour, worker pauses) is drawn from a
``random.Random`` seeded with ``state.rng_seed``; the seed for the following
call is stored back into the returned snapshot.
"""
from __future__ import annotations

import math
import random
from dataclasses import replace
from typing import Dict, List, Optional, Tuple

from config import (
    BAR_SERVICE_POSITIONS,
    BARREL_POSITIONS,
    CUSTOMER_COLORS,
    CUSTOMER_MAX_WAIT,
    DIFFICULTY_RAMP_RATE,
    DRINK_KINDS,
    FAST_SERVE_MULTIPLIER,
    FAST_SERVE_THRESHOLD,
    FEEDBACK_DURATION,
    INITIAL_RATING,
    INITIAL_SPAWN_INTERVAL,
    MAX_RATING,
    MIN_SPAWN_INTERVAL,
    RATING_CORRECT,
    RATING_TIMEOUT,
    RATING_WRONG,
    SCORE_PER_SERVE,
    SEAT_LAYOUT,
    WALK_DURATION,
    WORKER_COUNT,
    WORKER_PAUSE_MAX,
    WORKER_PAUSE_MIN,
    WORKER_SPEED,
)
from game.entities import (
    Customer,
    CustomerStatus,
    GamePhase,
    RoundState,
    Seat,
    SeatSide,
    Worker,
    WorkerPhase,
)

SEATS: Tuple[Seat, ...] = tuple(
    Seat(
        id=int(entry["id"]),
        side=SeatSide(entry["side"]),
        x=float(entry["x"]),
        y=float(entry["y"]),
        entry_x=float(entry["entry_x"]),
        entry_y=float(entry["entry_y"]),
    )
    for entry in SEAT_LAYOUT
)

FEEDBACK_STATUSES = (
    CustomerStatus.SERVED_HAPPY,
    CustomerStatus.SERVED_WRONG,
    CustomerStatus.LEAVING_ANGRY,
)

_ARRIVALS: Dict[WorkerPhase, WorkerPhase] = {
    WorkerPhase.TO_BARREL: WorkerPhase.AT_BARREL,
    WorkerPhase.TO_BAR: WorkerPhase.AT_BAR,
    WorkerPhase.RETURNING: WorkerPhase.IDLE,
}


def clamp(v: float, lo: float, hi: float) -> float:
    return max(lo, min(hi, v))


def spawn_interval_at(elapsed: float) -> float:
    return max(MIN_SPAWN_INTERVAL, INITIAL_SPAWN_INTERVAL - elapsed * DIFFICULTY_RAMP_RATE)


def nearest_barrel(x: float, y: float) -> Tuple[float, float]:
    return min(BARREL_POSITIONS.values(), key=lambda pos: math.hypot(pos[0] - x, pos[1] - y))


def _random_pause(rng: random.Random) -> float:
    return WORKER_PAUSE_MIN + rng.random() * (WORKER_PAUSE_MAX - WORKER_PAUSE_MIN)


# ---------------------------------------------------------------------------
# Round setup
# ---------------------------------------------------------------------------

def create_workers() -> Tuple[Worker, ...]:
    barrels = list(BARREL_POSITIONS.values())
    workers: List[Worker] = []
    for i in range(WORKER_COUNT):
        x, y = barrels[i % len(barrels)]
        workers.append(Worker(id=i, x=x, y=y, target_x=x, target_y=y))
    return tuple(workers)


def create_initial_state(high_score: int = 0, seed: Optional[int] = None) -> RoundState:
    """Title-screen snapshot carrying the persisted best score."""
    if seed is None:
        seed = random.getrandbits(32)
    return RoundState(
        phase=GamePhase.TITLE,
        score=0,
        rating=INITIAL_RATING,
        high_score=max(0, int(high_score)),
        selected_drink=None,
        customers=(),
        workers=(),
        time_since_last_spawn=0.0,
        spawn_interval=INITIAL_SPAWN_INTERVAL,
        elapsed_time=0.0,
        next_customer_id=1,
        rng_seed=seed,
    )


# ---------------------------------------------------------------------------
# Discrete actions
# ---------------------------------------------------------------------------

def start_game(state: RoundState) -> RoundState:
    fresh = create_initial_state(state.high_score, state.rng_seed)
    return replace(fresh, phase=GamePhase.PLAYING, workers=create_workers())


def end_game(state: RoundState) -> RoundState:
    if state.phase != GamePhase.PLAYING:
        return state
    return _finish_round(state)


def select_drink(state: RoundState, drink: str) -> RoundState:
    if state.phase != GamePhase.PLAYING or not isinstance(drink, str) or drink not in BARREL_POSITIONS:
        return state
    return replace(state, selected_drink=None if state.selected_drink == drink else drink)


def serve_seat(state: RoundState, seat_id: int) -> RoundState:
    """Dispatch the first idle worker to fetch the selected drink for a seat.

    Returns ``state`` itself when there is no selection, the round is not
    running, the seat has no seated customer, another worker already claimed
    the seat, or every worker is busy.
    """
    drink = state.selected_drink
    if state.phase != GamePhase.PLAYING or drink is None or drink not in BARREL_POSITIONS:
        return state
    customer = state.customer_at(seat_id)
    if customer is None or customer.status != CustomerStatus.SEATED:
        return state
    if state.worker_for_seat(seat_id) is not None:
        return state

    idx = next((i for i, w in enumerate(state.workers) if w.phase == WorkerPhase.IDLE), None)
    if idx is None:
        return state

    bx, by = BARREL_POSITIONS[drink]
    worker = replace(
        state.workers[idx],
        phase=WorkerPhase.TO_BARREL,
        target_x=bx,
        target_y=by,
        pause_timer=0.0,
        assigned_seat_id=seat_id,
        drink_carried=drink,
    )
    workers = state.workers[:idx] + (worker,) + state.workers[idx + 1:]
    return replace(state, workers=workers, selected_drink=None)


def _finish_round(state: RoundState) -> RoundState:
    return replace(
        state,
        phase=GamePhase.GAME_OVER,
        selected_drink=None,
        high_score=max(state.score, state.high_score),
    )


# ---------------------------------------------------------------------------
# Customers
# ---------------------------------------------------------------------------

def _advance_customer(customer: Customer, dt: float) -> Tuple[Customer, float]:
    """Step one customer; the float is the rating change it caused."""
    status = customer.status

    if status == CustomerStatus.WALKING_IN:
        progress = min(1.0, customer.walk_progress + dt / WALK_DURATION)
        if progress >= 1.0:
            return replace(customer, walk_progress=1.0, status=CustomerStatus.SEATED), 0.0
        return replace(customer, walk_progress=progress), 0.0

    if status == CustomerStatus.SEATED:
        wait = customer.wait_timer - dt
        if wait <= 0:
            angry = replace(
                customer,
                wait_timer=0.0,
                status=CustomerStatus.LEAVING_ANGRY,
                walk_progress=0.0,
            )
            return angry, RATING_TIMEOUT
        return replace(customer, wait_timer=wait), 0.0

    if status in FEEDBACK_STATUSES:
        progress = customer.walk_progress + dt / FEEDBACK_DURATION
        if progress >= 1.0:
            return replace(customer, walk_progress=0.0, status=CustomerStatus.WALKING_OUT), 0.0
        return replace(customer, walk_progress=progress), 0.0

    if status == CustomerStatus.WALKING_OUT:
        progress = min(1.0, customer.walk_progress + dt / WALK_DURATION)
        if progress >= 1.0:
            return replace(customer, walk_progress=1.0, status=CustomerStatus.GONE), 0.0
        return replace(customer, walk_progress=progress), 0.0

    return customer, 0.0


def _spawn_customer(state: RoundState, rng: random.Random) -> RoundState:
    occupied = {c.seat_id for c in state.customers if c.status != CustomerStatus.GONE}
    empty_seats = [seat for seat in SEATS if seat.id not in occupied]
    if not empty_seats:
        return state

    seat = rng.choice(empty_seats)
    customer = Customer(
        id=state.next_customer_id,
        seat_id=seat.id,
        drink_order=rng.choice(DRINK_KINDS),
        status=CustomerStatus.WALKING_IN,
        color=rng.choice(CUSTOMER_COLORS),
        wait_timer=CUSTOMER_MAX_WAIT,
        max_wait_time=CUSTOMER_MAX_WAIT,
        walk_progress=0.0,
    )
    return replace(
        state,
        customers=state.customers + (customer,),
        next_customer_id=state.next_customer_id + 1,
        time_since_last_spawn=0.0,
    )


# ---------------------------------------------------------------------------
# Workers
# ---------------------------------------------------------------------------

def _release(worker: Worker, phase: WorkerPhase, target: Tuple[float, float]) -> Worker:
    return replace(
        worker,
        phase=phase,
        target_x=target[0],
        target_y=target[1],
        pause_timer=0.0,
        assigned_seat_id=None,
        drink_carried=None,
    )


def _recover_orphan(worker: Worker, by_seat: Dict[int, Customer]) -> Worker:
    """Drop an assignment whose seat no longer holds a seated customer."""
    if worker.assigned_seat_id is None:
        return worker
    customer = by_seat.get(worker.assigned_seat_id)
    if customer is not None and customer.status == CustomerStatus.SEATED:
        return worker
    if worker.phase in (WorkerPhase.TO_BARREL, WorkerPhase.AT_BARREL, WorkerPhase.IDLE):
        return _release(worker, WorkerPhase.IDLE, (worker.x, worker.y))
    return _release(worker, WorkerPhase.RETURNING, nearest_barrel(worker.x, worker.y))


def _move_worker(worker: Worker, dt: float, rng: random.Random) -> Worker:
    dx = worker.target_x - worker.x
    dy = worker.target_y - worker.y
    dist = math.hypot(dx, dy)
    step = WORKER_SPEED * dt
    if dist <= step:
        phase = _ARRIVALS[worker.phase]
        pause = _random_pause(rng) if phase in (WorkerPhase.AT_BARREL, WorkerPhase.AT_BAR) else 0.0
        return replace(worker, x=worker.target_x, y=worker.target_y, phase=phase, pause_timer=pause)
    return replace(worker, x=worker.x + dx / dist * step, y=worker.y + dy / dist * step)


def _resolve_delivery(worker: Worker, by_seat: Dict[int, Customer]) -> Tuple[int, float]:
    """Hand over the carried drink; updates ``by_seat`` and returns (score, rating) deltas."""
    seat_id = worker.assigned_seat_id
    drink = worker.drink_carried
    if seat_id is None or drink is None:
        return 0, 0.0
    customer = by_seat.get(seat_id)
    if customer is None or customer.status != CustomerStatus.SEATED:
        return 0, 0.0

    if drink == customer.drink_order:
        points = SCORE_PER_SERVE
        if customer.wait_ratio > FAST_SERVE_THRESHOLD:
            points *= FAST_SERVE_MULTIPLIER
        by_seat[seat_id] = replace(customer, status=CustomerStatus.SERVED_HAPPY, walk_progress=0.0)
        return points, RATING_CORRECT

    by_seat[seat_id] = replace(customer, status=CustomerStatus.SERVED_WRONG, walk_progress=0.0)
    return 0, RATING_WRONG


def _update_worker(
    worker: Worker,
    by_seat: Dict[int, Customer],
    dt: float,
    rng: random.Random,
) -> Tuple[Worker, int, float]:
    worker = _recover_orphan(worker, by_seat)

    if worker.phase.is_moving:
        return _move_worker(worker, dt, rng), 0, 0.0

    if worker.phase not in (WorkerPhase.AT_BARREL, WorkerPhase.AT_BAR):
        return worker, 0, 0.0

    timer = worker.pause_timer - dt
    if timer > 0:
        return replace(worker, pause_timer=timer), 0, 0.0

    if worker.phase == WorkerPhase.AT_BARREL:
        if worker.assigned_seat_id is None:
            return _release(worker, WorkerPhase.IDLE, (worker.x, worker.y)), 0, 0.0
        sx, sy = BAR_SERVICE_POSITIONS[worker.assigned_seat_id]
        return replace(worker, phase=WorkerPhase.TO_BAR, target_x=sx, target_y=sy, pause_timer=0.0), 0, 0.0

    score, rating = _resolve_delivery(worker, by_seat)
    return _release(worker, WorkerPhase.RETURNING, nearest_barrel(worker.x, worker.y)), score, rating


def _update_workers(
    workers: Tuple[Worker, ...],
    customers: Tuple[Customer, ...],
    dt: float,
    rng: random.Random,
) -> Tuple[Tuple[Worker, ...], Tuple[Customer, ...], int, float]:
    by_seat = {c.seat_id: c for c in customers}
    next_workers: List[Worker] = []
    score_delta = 0
    rating_delta = 0.0
    for worker in workers:
        worker, score, rating = _update_worker(worker, by_seat, dt, rng)
        next_workers.append(worker)
        score_delta += score
        rating_delta += rating
    next_customers = tuple(by_seat[c.seat_id] for c in customers)
    return tuple(next_workers), next_customers, score_delta, rating_delta


# ---------------------------------------------------------------------------
# Main tick
# ---------------------------------------------------------------------------

def advance(state: RoundState, dt: float) -> RoundState:
    """Advance a running round by ``dt`` seconds.

    Order of work: difficulty ramp, customer lifecycles, removal of departed
    customers, worker dispatch and deliveries, rating clamp, game-over check,
    then spawning.  Outside ``PLAYING`` and for a zero, negative or
    non-finite ``dt`` the snapshot is returned unchanged.
    """
    if state.phase != GamePhase.PLAYING:
        return state
    if not math.isfinite(dt) or dt <= 0:
        return state

    rng = random.Random(state.rng_seed)
    elapsed = state.elapsed_time + dt

    rating_delta = 0.0
    customers: List[Customer] = []
    for customer in state.customers:
        customer, delta = _advance_customer(customer, dt)
        rating_delta += delta
        if customer.status != CustomerStatus.GONE:
            customers.append(customer)

    workers, next_customers, score_delta, delivery_delta = _update_workers(
        state.workers, tuple(customers), dt, rng
    )
    rating = clamp(state.rating + rating_delta + delivery_delta, 0.0, MAX_RATING)

    next_state = replace(
        state,
        score=state.score + score_delta,
        rating=rating,
        customers=next_customers,
        workers=workers,
        elapsed_time=elapsed,
        spawn_interval=spawn_interval_at(elapsed),
    )

    if rating <= 0:
        return replace(_finish_round(next_state), rating=0.0, rng_seed=rng.getrandbits(32))

    next_state = replace(next_state, time_since_last_spawn=state.time_since_last_spawn + dt)
    if next_state.time_since_last_spawn >= next_state.spawn_interval:
        next_state = _spawn_customer(next_state, rng)

    return replace(next_state, rng_seed=rng.getrandbits(32))
