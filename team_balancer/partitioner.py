"""Random two-way partitioning of a roster."""

import random
from typing import List, Optional, Sequence

from .exceptions import ConfigurationError
from .models import SIDE_A, SIDE_B, Partition, Player


def check_fixed_sides(roster: Sequence[Player]) -> None:
    """Validate that fixed-side assignments fit into two equal sides.

    Each side holds ``len(roster) // 2`` members, so neither side can have
    more players pinned to it than that.

    Args:
        roster: Players to be split

    Raises:
        ConfigurationError: If too many players are fixed to one side
    """
    target = len(roster) // 2
    for side, label in ((SIDE_A, "A"), (SIDE_B, "B")):
        fixed = sum(1 for p in roster if p.fixed_side is side)
        if fixed > target:
            raise ConfigurationError(
                f"{fixed} players are fixed to team {label} but each team only "
                f"holds {target} of the {len(roster)} players"
            )


class Partitioner:
    """Draws random candidate splits for one roster.

    The roster is validated and grouped by fixed side once; every call to
    :meth:`draw` then only shuffles the free players.
    """

    def __init__(self, roster: Sequence[Player], rng=None):
        """Initialize the partitioner.

        Args:
            roster: Players to be split
            rng: Object with a ``shuffle`` method, usually a seeded
                ``random.Random``; defaults to the module-level generator

        Raises:
            ConfigurationError: If the fixed-side assignments cannot fit
        """
        check_fixed_sides(roster)
        self.roster = roster
        self.rng = rng if rng is not None else random
        self.target = len(roster) // 2
        self.fixed_a = [i for i, p in enumerate(roster) if p.fixed_side is SIDE_A]
        self.fixed_b = [i for i, p in enumerate(roster) if p.fixed_side is SIDE_B]
        self.free = [i for i, p in enumerate(roster) if p.fixed_side is None]

    def draw(self) -> Partition:
        """Produce one random candidate split."""
        free = self.free.copy()
        self.rng.shuffle(free)

        side_a = self._fill(self.fixed_a, free)
        side_b = self._fill(self.fixed_b, free)

        half: Optional[int] = None
        if len(free) == 1:
            half = free.pop()
        elif free:
            raise ConfigurationError(
                f"{len(free)} players left over after filling both teams"
            )

        return Partition(side_a=tuple(side_a), side_b=tuple(side_b), half=half)

    def _fill(self, fixed: List[int], free: List[int]) -> List[int]:
        side = fixed.copy()
        while len(side) < self.target:
            if not free:
                raise ConfigurationError("ran out of free players while filling a team")
            side.append(free.pop())
        return side


def random_partition(roster: Sequence[Player], rng=None) -> Partition:
    """Draw a single candidate split of ``roster``."""
    return Partitioner(roster, rng).draw()
