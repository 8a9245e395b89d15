"""Tests for the render-side helpers."""
from __future__ import annotations

import unittest
from dataclasses import replace

from config import CUSTOMER_MAX_WAIT, MAX_RATING
from game import Customer, CustomerStatus
from game.presentation import (
    SEATS_BY_ID,
    Urgency,
    bubble_text,
    customer_at_point,
    customer_position,
    customer_urgency,
    rating_stars,
)


def _customer(status: CustomerStatus, progress: float = 0.0, wait: float = CUSTOMER_MAX_WAIT) -> Customer:
    return Customer(
        id=1,
        seat_id=3,
        drink_order="stout",
        status=status,
        color="#70c070",
        wait_timer=wait,
        max_wait_time=CUSTOMER_MAX_WAIT,
        walk_progress=progress,
    )


class TestCustomerPosition(unittest.TestCase):
    def setUp(self):
        self.seat = SEATS_BY_ID[3]

    def test_walking_in_interpolates_from_entry(self):
        start = customer_position(_customer(CustomerStatus.WALKING_IN, 0.0))
        half = customer_position(_customer(CustomerStatus.WALKING_IN, 0.5))
        self.assertEqual(start, (self.seat.entry_x, self.seat.entry_y))
        self.assertAlmostEqual(half[1], (self.seat.entry_y + self.seat.y) / 2)

    def test_walking_out_interpolates_to_entry(self):
        end = customer_position(_customer(CustomerStatus.WALKING_OUT, 1.0))
        self.assertEqual(end, (self.seat.entry_x, self.seat.entry_y))

    def test_other_states_sit_on_the_seat(self):
        for status in (CustomerStatus.SEATED, CustomerStatus.SERVED_HAPPY, CustomerStatus.LEAVING_ANGRY):
            self.assertEqual(customer_position(_customer(status, 0.3)), (self.seat.x, self.seat.y))


class TestIndicators(unittest.TestCase):
    def test_urgency_bands(self):
        cases = [
            (12.0, Urgency.OK),
            (8.0, Urgency.WARN),
            (5.0, Urgency.ORANGE),
            (2.0, Urgency.RED),
            (0.5, Urgency.CRITICAL),
        ]
        for wait, expected in cases:
            self.assertEqual(customer_urgency(_customer(CustomerStatus.SEATED, 1.0, wait)), expected)

    def test_feedback_urgency(self):
        self.assertEqual(customer_urgency(_customer(CustomerStatus.LEAVING_ANGRY)), Urgency.TIMEOUT)
        self.assertEqual(customer_urgency(_customer(CustomerStatus.SERVED_HAPPY)), Urgency.OK)
        self.assertEqual(customer_urgency(_customer(CustomerStatus.SERVED_WRONG)), Urgency.RED)

    def test_bubble_text(self):
        self.assertEqual(bubble_text(_customer(CustomerStatus.SEATED)), "Stout")
        self.assertEqual(bubble_text(_customer(CustomerStatus.SERVED_HAPPY)), "✔")
        self.assertEqual(bubble_text(_customer(CustomerStatus.SERVED_WRONG)), "✖")
        self.assertEqual(bubble_text(_customer(CustomerStatus.LEAVING_ANGRY)), "✖")
        self.assertIsNone(bubble_text(_customer(CustomerStatus.WALKING_IN)))
        self.assertEqual(bubble_text(replace(_customer(CustomerStatus.SEATED), drink_order="mystery")), "?")

    def test_rating_stars(self):
        self.assertEqual(rating_stars(2.5), ("full", "full", "half", "empty", "empty"))
        self.assertEqual(rating_stars(0.0), ("empty",) * MAX_RATING)
        self.assertEqual(rating_stars(MAX_RATING), ("full",) * MAX_RATING)

    def test_customer_at_point(self):
        seated = _customer(CustomerStatus.SEATED)
        seat = SEATS_BY_ID[3]
        self.assertIs(customer_at_point(seat.x + 1, seat.y, [seated]), seated)
        self.assertIsNone(customer_at_point(seat.x + 20, seat.y, [seated]))


if __name__ == "__main__":
    unittest.main()
