from __future__ import annotations

import logging
import math
from collections import Counter
from dataclasses import dataclass, field
from typing import Iterable, List, Optional, Tuple

logger = logging.getLogger(__name__)

# Internally we compute in thousandths of an inch so sums of sizes like 0.031 stay exact.
BASE = 1000  # 1 inch = 1000 units


def to_units(inches: float, scale: int = BASE) -> int:
    """Convert inches to internal integer units, halves rounding up (0.3125 -> 313)."""
    return int(math.floor(float(inches) * scale + 0.5))


def units_to_in(u: int, scale: int = BASE) -> float:
    return u / scale


def u_to_in_str(u: int, scale: int = BASE) -> str:
    # Shop readouts are always three decimals: 1 -> "1.000"
    return f"{u / scale:.3f}"


@dataclass(frozen=True)
class CatalogEntry:
    size_in: float
    units: int


@dataclass(frozen=True)
class Catalog:
    """An ordered set of piece sizes (inches), unlimited supply of each.

    Declared order matters only for which of several equally short stacks
    gets reported.
    """

    sizes: Tuple[float, ...]
    name: str = "Steel"
    unit_scale: int = BASE

    def __post_init__(self) -> None:
        object.__setattr__(self, "sizes", tuple(float(s) for s in self.sizes))
        if self.unit_scale <= 0:
            raise ValueError("unit_scale must be > 0")
        if not self.sizes:
            raise ValueError(f"Catalog {self.name!r} has no sizes")
        seen = set()
        for s in self.sizes:
            if not math.isfinite(s) or s <= 0:
                raise ValueError(f"Catalog size must be > 0: {s!r}")
            if to_units(s, self.unit_scale) <= 0:
                raise ValueError(f"Catalog size {s!r} is below one unit (1/{self.unit_scale} in)")
            if s in seen:
                raise ValueError(f"Duplicate catalog size: {s!r}")
            seen.add(s)

    def entries(self) -> List[CatalogEntry]:
        return [CatalogEntry(size_in=s, units=to_units(s, self.unit_scale)) for s in self.sizes]


# Steel tooling on hand, largest first.
STEEL_TOOLING = Catalog(
    sizes=(
        3, 2, 1, 0.875, 0.75, 0.625, 0.5, 0.4, 0.375,
        0.3, 0.26, 0.257, 0.255, 0.253, 0.252, 0.251, 0.25,
        0.24, 0.2, 0.125, 0.1, 0.062, 0.05, 0.031,
    ),
    name="Steel",
)


@dataclass
class StackResult:
    width_u: int
    target_u: int
    stack: List[CatalogEntry] = field(default_factory=list)
    unit_scale: int = BASE

    @property
    def width_in(self) -> float:
        return units_to_in(self.width_u, self.unit_scale)

    @property
    def target_in(self) -> float:
        return units_to_in(self.target_u, self.unit_scale)

    @property
    def under_u(self) -> int:
        return self.target_u - self.width_u

    @property
    def exact(self) -> bool:
        return self.under_u == 0

    @property
    def piece_count(self) -> int:
        return len(self.stack)


@dataclass(frozen=True)
class SummaryLine:
    size_in: float
    count: int


@dataclass
class SetupReport:
    target_in: float
    width_in: float
    under_in: float
    lines: List[SummaryLine]
    piece_count: int
    result: StackResult


def solve_stack(target_u: int, catalog: Catalog) -> StackResult:
    """Fewest pieces reaching the largest width <= target_u (unbounded supply).

    Exact DP over every unit value 0..target_u. Per value we keep only the
    piece count, the predecessor value and the piece used, then walk back once.
    Values are visited in ascending order and pieces are positive, so a value's
    record is final by the time it is expanded.
    """
    if target_u < 0:
        raise ValueError("target_u must be >= 0")

    entries = catalog.entries()

    count = [-1] * (target_u + 1)
    count[0] = 0
    prev_u = [-1] * (target_u + 1)
    prev_piece = [-1] * (target_u + 1)

    for i in range(target_u + 1):
        c = count[i]
        if c == -1:
            continue
        for idx, e in enumerate(entries):
            nxt = i + e.units
            if nxt > target_u:
                continue
            # Strict '<' keeps the first stack found for ties.
            if count[nxt] == -1 or c + 1 < count[nxt]:
                count[nxt] = c + 1
                prev_u[nxt] = i
                prev_piece[nxt] = idx

    best_u = target_u
    while count[best_u] == -1:
        best_u -= 1

    stack: List[CatalogEntry] = []
    u = best_u
    while u > 0:
        stack.append(entries[prev_piece[u]])
        u = prev_u[u]
    stack.reverse()

    logger.debug(
        "solve_stack catalog=%s target_u=%d -> width_u=%d pieces=%d",
        catalog.name,
        target_u,
        best_u,
        len(stack),
    )
    return StackResult(width_u=best_u, target_u=target_u, stack=stack, unit_scale=catalog.unit_scale)


def find_best_setup(target_in: float, catalog: Catalog = STEEL_TOOLING) -> StackResult:
    return solve_stack(to_units(target_in, catalog.unit_scale), catalog)


def summarize_stack(stack: Iterable[CatalogEntry]) -> List[SummaryLine]:
    """Group a stack by piece size, largest size first."""
    counts: Counter[float] = Counter(e.size_in for e in stack)
    return [SummaryLine(size_in=size, count=n) for size, n in sorted(counts.items(), key=lambda kv: kv[0], reverse=True)]


def parse_target(text: object) -> Optional[float]:
    """Parse a target width typed by the operator; None when it should not be solved."""
    if text is None:
        return None
    try:
        value = float(str(text).strip())
    except ValueError:
        return None
    if not math.isfinite(value) or value <= 0:
        return None
    return value


def build_report(result: StackResult) -> SetupReport:
    scale = result.unit_scale
    return SetupReport(
        target_in=result.target_in,
        width_in=round(result.width_in, 3),
        under_in=round(units_to_in(result.under_u, scale), 3),
        lines=summarize_stack(result.stack),
        piece_count=result.piece_count,
        result=result,
    )


def calculate(text: object, catalog: Catalog = STEEL_TOOLING) -> Optional[SetupReport]:
    target_in = parse_target(text)
    if target_in is None:
        return None
    return build_report(find_best_setup(target_in, catalog))
