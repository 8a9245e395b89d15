from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path
from typing import Dict, Optional, Tuple

try:
    import pygame  # type: ignore
except Exception:
    pygame = None

from config import (
    BARREL_POSITIONS,
    BOARD_H,
    BOARD_W,
    DRINK_COLORS,
    DRINK_KINDS,
    DRINK_LABELS,
    FPS,
    HIGH_SCORE_FILE,
    WORKER_COLOR,
)
from game import BarSession, CustomerStatus, GamePhase, RoundState
from game.presentation import (
    Urgency,
    bubble_text,
    customer_at_point,
    customer_position,
    customer_urgency,
    rating_stars,
)
from highscore_store import JsonHighScoreStore

BARREL_RADIUS = 4.5  # board percent
LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")

URGENCY_COLORS: Dict[Urgency, Tuple[int, int, int]] = {
    Urgency.OK: (106, 212, 148),
    Urgency.WARN: (242, 214, 88),
    Urgency.ORANGE: (242, 156, 64),
    Urgency.RED: (232, 82, 72),
    Urgency.CRITICAL: (255, 40, 40),
    Urgency.TIMEOUT: (150, 40, 40),
}


def autoplay_step(session: BarSession) -> None:
    """Serve the most impatient unclaimed seated customer, if a worker is free."""
    state = session.state
    waiting = [
        c
        for c in state.customers
        if c.status == CustomerStatus.SEATED and state.worker_for_seat(c.seat_id) is None
    ]
    if not waiting:
        return
    customer = min(waiting, key=lambda c: c.wait_timer)
    if state.selected_drink != customer.drink_order:
        session.select_drink(customer.drink_order)
    session.serve_seat(customer.seat_id)


def run_headless(ticks: int, dt: float, seed: Optional[int], high_score_file: Path) -> RoundState:
    session = BarSession(JsonHighScoreStore(high_score_file), seed=seed)
    session.start()
    elapsed_ticks = 0
    for _ in range(ticks):
        if not session.is_playing:
            break
        autoplay_step(session)
        session.tick(dt)
        elapsed_ticks += 1

    if session.is_playing:
        session.quit()

    state = session.state
    print(
        f"headless_done ticks={elapsed_ticks} t={state.elapsed_time:.1f} "
        f"score={state.score} best={state.high_score} rating={state.rating:.2f} "
        f"customers={len(state.customers)} spawn_interval={state.spawn_interval:.2f}"
    )
    return state


def to_screen(x: float, y: float) -> Tuple[int, int]:
    return int(x / 100.0 * BOARD_W), int(y / 100.0 * BOARD_H)


def to_board(px: int, py: int) -> Tuple[float, float]:
    return px * 100.0 / BOARD_W, py * 100.0 / BOARD_H


class GameUI:
    def __init__(self, session: BarSession):
        if pygame is None:
            raise RuntimeError("pygame is required for graphical mode. Relaunch with --headless.")
        try:
            pygame.init()
            pygame.display.init()
        except pygame.error as exc:
            raise RuntimeError(f"Display subsystem is unavailable ({exc}). Relaunch with --headless.") from exc
        if not pygame.display.get_init():
            raise RuntimeError("Display subsystem is unavailable. Relaunch with --headless.")

        self.session = session
        self.screen = pygame.display.set_mode((BOARD_W, BOARD_H))
        pygame.display.set_caption("Minibar")
        self.clock = pygame.time.Clock()
        self.font = pygame.font.SysFont("arial", 22)
        self.small = pygame.font.SysFont("arial", 16)
        self.running = True

        self.palette = {
            "bg": (32, 22, 18),
            "bar": (92, 58, 34),
            "bar_edge": (140, 96, 60),
            "text": (240, 232, 220),
            "muted": (176, 160, 140),
            "star": (255, 206, 84),
        }

    # ------------------------------------------------------------------
    # Input
    # ------------------------------------------------------------------

    def _drink_at(self, x: float, y: float) -> Optional[str]:
        for drink, (bx, by) in BARREL_POSITIONS.items():
            if (bx - x) ** 2 + (by - y) ** 2 <= BARREL_RADIUS ** 2:
                return drink
        return None

    def handle_input(self) -> None:
        for ev in pygame.event.get():
            if ev.type == pygame.QUIT:
                self.running = False
            elif ev.type == pygame.KEYDOWN:
                if ev.key == pygame.K_ESCAPE:
                    if self.session.is_playing:
                        self.session.quit()
                    else:
                        self.running = False
                elif ev.key in (pygame.K_SPACE, pygame.K_RETURN) and not self.session.is_playing:
                    self.session.start()
                elif pygame.K_1 <= ev.key <= pygame.K_9:
                    idx = ev.key - pygame.K_1
                    if idx < len(DRINK_KINDS):
                        self.session.select_drink(DRINK_KINDS[idx])
            elif ev.type == pygame.MOUSEBUTTONDOWN and ev.button == 1:
                self._handle_click(*to_board(*ev.pos))

    def _handle_click(self, x: float, y: float) -> None:
        if not self.session.is_playing:
            self.session.start()
            return
        drink = self._drink_at(x, y)
        if drink is not None:
            self.session.select_drink(drink)
            return
        customer = customer_at_point(x, y, self.session.state.customers)
        if customer is not None:
            self.session.serve_seat(customer.seat_id)

    # ------------------------------------------------------------------
    # Drawing
    # ------------------------------------------------------------------

    def _text(self, text: str, pos: Tuple[int, int], color=None, font=None, center: bool = False) -> None:
        surface = (font or self.font).render(text, True, color or self.palette["text"])
        rect = surface.get_rect()
        if center:
            rect.center = pos
        else:
            rect.topleft = pos
        self.screen.blit(surface, rect)

    def draw_bar(self, state: RoundState) -> None:
        left, top = to_screen(20, 15)
        right, bottom = to_screen(80, 66)
        bar = pygame.Rect(left, top, right - left, bottom - top)
        pygame.draw.rect(self.screen, self.palette["bar"], bar, border_radius=14)
        pygame.draw.rect(self.screen, self.palette["bar_edge"], bar, width=3, border_radius=14)

        radius = int(BARREL_RADIUS / 100.0 * BOARD_W)
        for drink, (bx, by) in BARREL_POSITIONS.items():
            cx, cy = to_screen(bx, by)
            pygame.draw.circle(self.screen, pygame.Color(DRINK_COLORS[drink]), (cx, cy), radius)
            if state.selected_drink == drink:
                pygame.draw.circle(self.screen, self.palette["text"], (cx, cy), radius + 4, width=3)
            self._text(DRINK_LABELS[drink], (cx, cy - radius - 12), font=self.small, center=True)

    def draw_customers(self, state: RoundState) -> None:
        for customer in state.customers:
            cx, cy = to_screen(*customer_position(customer))
            pygame.draw.circle(self.screen, (20, 14, 10), (cx, cy), 17)
            pygame.draw.circle(self.screen, pygame.Color(customer.color), (cx, cy), 14)
            text = bubble_text(customer)
            if text is None:
                continue
            bubble = pygame.Rect(0, 0, 64, 24)
            bubble.midbottom = (cx, cy - 18)
            pygame.draw.rect(self.screen, URGENCY_COLORS[customer_urgency(customer)], bubble, border_radius=8)
            self._text(text, bubble.center, color=(20, 14, 10), font=self.small, center=True)

    def draw_workers(self, state: RoundState) -> None:
        for worker in state.workers:
            cx, cy = to_screen(worker.x, worker.y)
            pygame.draw.circle(self.screen, pygame.Color(WORKER_COLOR), (cx, cy), 11)
            if worker.drink_carried is not None:
                pygame.draw.circle(self.screen, pygame.Color(DRINK_COLORS[worker.drink_carried]), (cx + 9, cy - 9), 5)

    def draw_hud(self, state: RoundState) -> None:
        self._text(f"Score {state.score}", (16, 12))
        for i, star in enumerate(rating_stars(state.rating)):
            color = self.palette["star"] if star != "empty" else self.palette["muted"]
            center = (BOARD_W // 2 - 60 + i * 30, 24)
            pygame.draw.circle(self.screen, color, center, 11 if star == "full" else 7)
        drink = DRINK_LABELS.get(state.selected_drink or "", "No drink")
        self._text(drink, (BOARD_W - 160, 12))
        for i, message in enumerate(self.session.event_log[-4:]):
            self._text(message, (16, BOARD_H - 90 + i * 20), color=self.palette["muted"], font=self.small)

    def draw_overlay(self, state: RoundState) -> None:
        middle = (BOARD_W // 2, BOARD_H // 2)
        if state.phase == GamePhase.TITLE:
            self._text("MINIBAR", (middle[0], middle[1] - 40), center=True)
        else:
            self._text(f"Game over: {state.score}", (middle[0], middle[1] - 40), center=True)
        self._text(f"Best {state.high_score}", middle, color=self.palette["muted"], center=True)
        self._text("Click or press SPACE to start", (middle[0], middle[1] + 40), center=True)

    def draw(self) -> None:
        state = self.session.state
        self.screen.fill(self.palette["bg"])
        if state.phase == GamePhase.PLAYING:
            self.draw_bar(state)
            self.draw_workers(state)
            self.draw_customers(state)
            self.draw_hud(state)
        else:
            self.draw_overlay(state)
        pygame.display.flip()

    def run(self) -> None:
        while self.running:
            dt = self.clock.tick(FPS) / 1000.0
            self.handle_input()
            if self.session.is_playing:
                self.session.tick(dt)
            self.draw()
        pygame.quit()


def main() -> None:
    parser = argparse.ArgumentParser(description="Minibar arcade bar game")
    parser.add_argument("--headless", action="store_true", help="run an autoplay round without graphics")
    parser.add_argument("--ticks", type=int, default=1800, help="headless ticks to run")
    parser.add_argument("--dt", type=float, default=1.0 / FPS, help="headless timestep")
    parser.add_argument("--seed", type=int, default=None, help="random seed for the round")
    parser.add_argument("--high-score-file", type=Path, default=HIGH_SCORE_FILE, help="where the best score is kept")
    parser.add_argument("--reset-high-score", action="store_true", help="forget the stored best score and exit")
    parser.add_argument(
        "--log-level",
        default="WARNING",
        type=str.upper,
        choices=LOG_LEVELS,
        help="logging level",
    )
    args = parser.parse_args()

    logging.basicConfig(level=args.log_level, format="%(levelname)s %(name)s: %(message)s")

    if args.reset_high_score:
        JsonHighScoreStore(args.high_score_file).clear()
        print("high score cleared")
        return

    if args.headless:
        run_headless(args.ticks, args.dt, args.seed, args.high_score_file)
        return

    session = BarSession(JsonHighScoreStore(args.high_score_file), seed=args.seed)
    try:
        ui = GameUI(session)
    except RuntimeError as exc:
        print(f"Startup error: {exc}", file=sys.stderr)
        sys.exit(1)
    ui.run()


if __name__ == "__main__":
    main()
