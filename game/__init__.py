"""Minibar game package.

Public API:
    from game import BarSession, RoundState, advance, serve_seat, ...
"""
from game.entities import Customer, CustomerStatus, GamePhase, RoundState, Seat, Worker, WorkerPhase
from game.session import BarSession
from game.simulation import (
    SEATS,
    advance,
    create_initial_state,
    end_game,
    select_drink,
    serve_seat,
    start_game,
)

__all__ = [
    "BarSession",
    "Customer",
    "CustomerStatus",
    "GamePhase",
    "RoundState",
    "SEATS",
    "Seat",
    "Worker",
    "WorkerPhase",
    "advance",
    "create_initial_state",
    "end_game",
    "select_drink",
    "serve_seat",
    "start_game",
]
