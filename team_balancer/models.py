"""Roster and result models for Team Balancer."""

import math
from dataclasses import dataclass, field, replace
from typing import Dict, Iterable, List, Optional, Tuple

from .exceptions import ConfigurationError

SIDE_A = True
SIDE_B = False

# Flat amount taken off each displayed entry when showing a team's score.
SCORE_OFFSET = 5.0


def normalize_tags(tags: Optional[Iterable[str]]) -> Optional[Tuple[str, ...]]:
    """Lowercase tags, dropping blanks and repeats while keeping first-seen order."""
    if tags is None:
        return None
    seen: List[str] = []
    for tag in tags:
        tag = tag.strip().lower()
        if tag and tag not in seen:
            seen.append(tag)
    return tuple(seen)


@dataclass(frozen=True)
class Player:
    """A rated roster entry.

    ``fixed_side`` pins the player to side A (``True``) or side B
    (``False``); ``None`` leaves them free for the shuffle. ``female`` is
    carried for display only and never takes part in balancing.
    """

    name: str
    rating: float
    female: bool = False
    fixed_side: Optional[bool] = None
    position_tags: Optional[Tuple[str, ...]] = None

    def __post_init__(self):
        object.__setattr__(self, "position_tags", normalize_tags(self.position_tags))

    def has_tag(self, tag: str) -> bool:
        return bool(self.position_tags) and tag.lower() in self.position_tags

    def half(self, label: str) -> "Player":
        """Return a renamed copy used when this player is split across both sides."""
        return replace(self, name=f"{self.name} ({label} half)")


@dataclass
class Constraints:
    """Acceptance thresholds for a split.

    Args:
        max_rating_delta: Rating totals must differ by strictly less than this
        min_position_counts: Minimum players per side carrying each tag
    """

    max_rating_delta: float
    min_position_counts: Dict[str, int] = field(default_factory=dict)

    def __post_init__(self):
        self.min_position_counts = {
            tag.strip().lower(): count for tag, count in self.min_position_counts.items()
        }

    def validate(self) -> None:
        """Check the thresholds are usable.

        Raises:
            ConfigurationError: If the delta is negative or not finite, or a
                minimum count is not a non-negative integer
        """
        if not isinstance(self.max_rating_delta, (int, float)) or isinstance(self.max_rating_delta, bool):
            raise ConfigurationError("max rating delta must be a number")
        if not math.isfinite(self.max_rating_delta) or self.max_rating_delta < 0:
            raise ConfigurationError(
                f"max rating delta must be a non-negative number, got {self.max_rating_delta}"
            )

        for tag, count in self.min_position_counts.items():
            if not tag:
                raise ConfigurationError("position minimums cannot use an empty tag")
            if not isinstance(count, int) or isinstance(count, bool) or count < 0:
                raise ConfigurationError(
                    f"minimum count for '{tag}' must be a non-negative integer, got {count!r}"
                )


@dataclass(frozen=True)
class Partition:
    """A candidate split holding roster indices rather than players.

    ``half`` is the leftover index of an odd roster; it belongs to neither
    side's member list but its rating counts toward both.
    """

    side_a: Tuple[int, ...]
    side_b: Tuple[int, ...]
    half: Optional[int] = None


@dataclass
class TeamResult:
    """Two independent team lists produced from an accepted partition."""

    side_a: List[Player]
    side_b: List[Player]
    trials: int = 0

    @property
    def rating_a(self) -> float:
        return sum(p.rating for p in self.side_a)

    @property
    def rating_b(self) -> float:
        return sum(p.rating for p in self.side_b)

    @property
    def delta(self) -> float:
        return abs(self.rating_a - self.rating_b)

    @property
    def score_a(self) -> float:
        return sum(p.rating - SCORE_OFFSET for p in self.side_a)

    @property
    def score_b(self) -> float:
        return sum(p.rating - SCORE_OFFSET for p in self.side_b)

    def sorted(self) -> "TeamResult":
        """Return a copy with both sides in alphabetical order."""
        return TeamResult(
            side_a=sorted(self.side_a, key=lambda p: p.name.lower()),
            side_b=sorted(self.side_b, key=lambda p: p.name.lower()),
            trials=self.trials,
        )
