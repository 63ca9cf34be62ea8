from __future__ import annotations

from typing import Dict, Optional

import pytest


def circle_line(index: int, diameter: Optional[float], tag: str = "CIRCLE") -> str:
    d = "" if diameter is None else str(diameter)
    return f"{index};{tag};0;0;0;0;0;0;c{index};{d};0.05"


def make_text(
    overrides: Optional[Dict[str, Optional[float]]] = None,
    *,
    k_y: float = -83.0,
) -> str:
    """
    Synthetic export where every measured checkpoint of the default profile is in
    tolerance. ``overrides`` replaces circle diameters by label ("G2": 9.0) or drops
    the line with None.
    """
    diam = {
        "B": (9, 37.5),
        "E": (8, 11.3),
        "F2": (2, 3.1),
        "F4": (4, 3.3),
        "F5": (5, 3.2),
        "F6": (6, 3.2),
        "G1": (10, 8.0),
        "G2": (11, 8.1),
        "G3": (12, 7.9),
        "G4": (13, 8.05),
        "I": (15, 30.0),
        "J": (7, 155.4),
        "L": (14, 122.3),
    }
    overrides = overrides or {}
    lines = [
        "1;PT-COMP;-8.2;1.0;0.0",
        f"2;PT-COMP;83.1;{k_y};0.0",
        "4;PT-COMP;-24.1;0.5;0.0",
        "1;DISTANCE;-15.9;0.0;0.0",
        "2;DISTANCE;5.0;0.0;0.0",
    ]
    for label, (idx, d) in diam.items():
        if label in overrides:
            d = overrides[label]
            if d is None:
                continue
        lines.append(circle_line(idx, d))
    return "\n".join(lines) + "\n"


@pytest.fixture
def passing_text() -> str:
    return make_text()


@pytest.fixture
def make_export():
    return make_text
