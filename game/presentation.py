"""Render-side helpers derived from a snapshot.

Front-ends only need positions and indicator states; they are computed here
so the pygame UI and any other renderer agree on them.
"""
from __future__ import annotations

import math
from enum import Enum
from typing import Iterable, Optional, Tuple

from config import DRINK_LABELS, MAX_RATING, URGENCY_THRESHOLDS
from game.entities import Customer, CustomerStatus
from game.simulation import SEATS

SEATS_BY_ID = {seat.id: seat for seat in SEATS}


class Urgency(str, Enum):
    OK = "ok"
    WARN = "warn"
    ORANGE = "orange"
    RED = "red"
    CRITICAL = "critical"
    TIMEOUT = "timeout"


def lerp(a: float, b: float, t: float) -> float:
    return a + (b - a) * t


def customer_position(customer: Customer) -> Tuple[float, float]:
    seat = SEATS_BY_ID[customer.seat_id]
    t = customer.walk_progress
    if customer.status == CustomerStatus.WALKING_IN:
        return lerp(seat.entry_x, seat.x, t), lerp(seat.entry_y, seat.y, t)
    if customer.status in (CustomerStatus.WALKING_OUT, CustomerStatus.GONE):
        return lerp(seat.x, seat.entry_x, t), lerp(seat.y, seat.entry_y, t)
    return seat.x, seat.y


def customer_urgency(customer: Customer) -> Urgency:
    if customer.status == CustomerStatus.LEAVING_ANGRY:
        return Urgency.TIMEOUT
    if customer.status == CustomerStatus.SERVED_HAPPY:
        return Urgency.OK
    if customer.status == CustomerStatus.SERVED_WRONG:
        return Urgency.RED

    elapsed = 1.0 - customer.wait_ratio
    if elapsed > URGENCY_THRESHOLDS["critical"]:
        return Urgency.CRITICAL
    if elapsed > URGENCY_THRESHOLDS["red"]:
        return Urgency.RED
    if elapsed > URGENCY_THRESHOLDS["orange"]:
        return Urgency.ORANGE
    if elapsed > URGENCY_THRESHOLDS["warn"]:
        return Urgency.WARN
    return Urgency.OK


def bubble_text(customer: Customer) -> Optional[str]:
    """Speech bubble contents, or ``None`` while the customer is walking."""
    if customer.status in (CustomerStatus.LEAVING_ANGRY, CustomerStatus.SERVED_WRONG):
        return "✖"
    if customer.status == CustomerStatus.SERVED_HAPPY:
        return "✔"
    if customer.status == CustomerStatus.SEATED:
        return DRINK_LABELS.get(customer.drink_order, "?")
    return None


def rating_stars(rating: float) -> Tuple[str, ...]:
    stars = []
    for i in range(1, MAX_RATING + 1):
        if rating >= i:
            stars.append("full")
        elif rating >= i - 0.5:
            stars.append("half")
        else:
            stars.append("empty")
    return tuple(stars)


def customer_at_point(
    x: float,
    y: float,
    customers: Iterable[Customer],
    radius: float = 5.0,
) -> Optional[Customer]:
    """Closest customer within ``radius`` board units of a click."""
    best: Optional[Customer] = None
    best_dist = radius
    for customer in customers:
        cx, cy = customer_position(customer)
        dist = math.hypot(cx - x, cy - y)
        if dist <= best_dist:
            best, best_dist = customer, dist
    return best
