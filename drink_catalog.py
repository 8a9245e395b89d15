from __future__ import annotations

import json
import math
import re
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, Iterable, Tuple

DRINKS_FILE = Path("data/drinks.json")
DRINK_ID_RE = re.compile(r"^[a-z][a-z0-9_]*$")
COLOR_RE = re.compile(r"^#[0-9a-fA-F]{6}$")


@dataclass(frozen=True)
class DrinkDefinition:
    key: str
    label: str
    color: str
    barrel_x: float
    barrel_y: float

    @property
    def barrel(self) -> Tuple[float, float]:
        return (self.barrel_x, self.barrel_y)


# Barrel pickup positions sit inside the bar, below the barrel labels.
DEFAULT_DRINKS: Dict[str, DrinkDefinition] = {
    "ale": DrinkDefinition("ale", "Ale", "#c87533", 38.0, 30.0),
    "stout": DrinkDefinition("stout", "Stout", "#3b2314", 50.0, 30.0),
    "lager": DrinkDefinition("lager", "Lager", "#f0c040", 62.0, 30.0),
}


def _is_board_coordinate(value: Any) -> bool:
    if isinstance(value, bool):
        return False
    return isinstance(value, (int, float)) and math.isfinite(value) and 0 <= value <= 100


def _is_valid_drink_id(value: Any) -> bool:
    return isinstance(value, str) and bool(DRINK_ID_RE.fullmatch(value))


def _parse_drink_entry(key: str, entry: Dict[str, Any]) -> DrinkDefinition | None:
    if not _is_valid_drink_id(key):
        return None

    label = entry.get("label")
    color = entry.get("color")
    barrel = entry.get("barrel")

    if not isinstance(label, str) or not label.strip():
        return None
    if not isinstance(color, str) or not COLOR_RE.fullmatch(color):
        return None
    if not isinstance(barrel, list) or len(barrel) != 2:
        return None
    if not all(_is_board_coordinate(coord) for coord in barrel):
        return None

    return DrinkDefinition(
        key=key,
        label=label.strip(),
        color=color.lower(),
        barrel_x=float(barrel[0]),
        barrel_y=float(barrel[1]),
    )


def _has_shared_barrels(drinks: Iterable[DrinkDefinition]) -> bool:
    positions = [drink.barrel for drink in drinks]
    return len(set(positions)) != len(positions)


def load_drink_catalog(path: Path = DRINKS_FILE) -> Dict[str, DrinkDefinition]:
    """Load the drink table, keeping file order as barrel order.

    Falls back to :data:`DEFAULT_DRINKS` when the file is missing or
    unreadable, or when it contains no usable entries.
    """
    if not path.exists():
        return dict(DEFAULT_DRINKS)

    try:
        raw = json.loads(path.read_text())
    except (OSError, ValueError, RecursionError):
        return dict(DEFAULT_DRINKS)

    if not isinstance(raw, dict):
        return dict(DEFAULT_DRINKS)

    parsed: Dict[str, DrinkDefinition] = {}
    for key, entry in raw.items():
        if not isinstance(entry, dict):
            continue
        drink = _parse_drink_entry(key, entry)
        if drink is None:
            continue
        parsed[key] = drink

    if not parsed or _has_shared_barrels(parsed.values()):
        return dict(DEFAULT_DRINKS)

    return parsed
