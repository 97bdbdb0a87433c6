"""Core team balancing logic for Team Balancer."""

import logging
from collections import Counter
from pathlib import Path
from typing import Dict, Mapping, Optional, Sequence

import pandas as pd
import yaml

from .exceptions import ConfigurationError, ConstraintUnsatisfiable
from .models import Constraints, Partition, Player, TeamResult
from .partitioner import Partitioner

logger = logging.getLogger(__name__)

DEFAULT_MAX_TRIALS = 100_000


def side_rating(roster: Sequence[Player], side: Sequence[int], half: Optional[int]) -> float:
    """Sum a side's ratings, counting the half member in full."""
    total = sum(roster[i].rating for i in side)
    if half is not None:
        total += roster[half].rating
    return total


def meets_quorum(
    roster: Sequence[Player],
    side: Sequence[int],
    min_position_counts: Mapping[str, int],
) -> bool:
    """Check every tag minimum over a side's members.

    The half member is never part of ``side`` and so never counts here.
    """
    for tag, minimum in min_position_counts.items():
        count = sum(1 for i in side if roster[i].has_tag(tag))
        if count < minimum:
            return False
    return True


def is_acceptable(
    roster: Sequence[Player],
    candidate: Partition,
    constraints: Constraints,
) -> bool:
    """Apply the rating and quorum conditions to a candidate split."""
    rating_a = side_rating(roster, candidate.side_a, candidate.half)
    rating_b = side_rating(roster, candidate.side_b, candidate.half)
    if not abs(rating_a - rating_b) < constraints.max_rating_delta:
        return False

    return (
        meets_quorum(roster, candidate.side_a, constraints.min_position_counts)
        and meets_quorum(roster, candidate.side_b, constraints.min_position_counts)
    )


def materialize(roster: Sequence[Player], candidate: Partition, trials: int = 0) -> TeamResult:
    """Turn an accepted candidate into two independent player lists.

    A half member is copied onto both sides as "(1st half)" on side A and
    "(2nd half)" on side B.
    """
    side_a = [roster[i] for i in candidate.side_a]
    side_b = [roster[i] for i in candidate.side_b]

    if candidate.half is not None:
        shared = roster[candidate.half]
        side_a.append(shared.half("1st"))
        side_b.append(shared.half("2nd"))

    return TeamResult(side_a=side_a, side_b=side_b, trials=trials)


class TeamBalancer:
    """Splits a roster into two balanced teams by rejection sampling."""

    def __init__(self, constraints: Constraints, max_trials: int = DEFAULT_MAX_TRIALS, rng=None):
        """Initialize the team balancer.

        Args:
            constraints: Rating and position thresholds a split must meet
            max_trials: Number of random splits to try before giving up
            rng: Randomness source with a ``shuffle`` method; pass a seeded
                ``random.Random`` for repeatable results

        Raises:
            ConfigurationError: If the constraints or trial budget are invalid
        """
        constraints.validate()
        if not isinstance(max_trials, int) or isinstance(max_trials, bool) or max_trials < 1:
            raise ConfigurationError(f"max trials must be a positive integer, got {max_trials!r}")

        self.constraints = constraints
        self.max_trials = max_trials
        self.rng = rng

    def search(self, roster: Sequence[Player]) -> TeamResult:
        """Find the first random split that satisfies the constraints.

        Args:
            roster: Players to split

        Returns:
            The accepted split, materialized into two team lists

        Raises:
            ConfigurationError: If fixed-side assignments cannot fit
            ConstraintUnsatisfiable: If no split passes within the trial budget
        """
        roster = list(roster)
        partitioner = Partitioner(roster, self.rng)
        logger.debug(
            "Balancing %d players, delta < %s, minimums %s, up to %d trials",
            len(roster),
            self.constraints.max_rating_delta,
            self.constraints.min_position_counts,
            self.max_trials,
        )

        for trial in range(1, self.max_trials + 1):
            candidate = partitioner.draw()
            if is_acceptable(roster, candidate, self.constraints):
                logger.debug("Accepted split on trial %d", trial)
                return materialize(roster, candidate, trials=trial)

        logger.warning("No acceptable split found in %d trials", self.max_trials)
        raise ConstraintUnsatisfiable(self.max_trials)

    def save_teams_csv(self, result: TeamResult, output_path: Path) -> None:
        """Save teams to CSV with one row per displayed entry.

        Args:
            result: Generated teams
            output_path: Path where to save the CSV
        """
        rows = []
        for team, players in (("A", result.side_a), ("B", result.side_b)):
            for player in players:
                rows.append({
                    'team': team,
                    'name': player.name,
                    'rating': player.rating,
                    'gender': 'F' if player.female else 'M',
                    'positions': '/'.join(player.position_tags or ()),
                })

        teams_df = pd.DataFrame(rows, columns=['team', 'name', 'rating', 'gender', 'positions'])
        teams_df.to_csv(output_path, index=False)

    def save_teams_yaml(self, result: TeamResult, output_path: Path) -> None:
        """Save teams to YAML with player names grouped by team.

        Args:
            result: Generated teams
            output_path: Path where to save the YAML
        """
        yaml_data = {
            'teams': {
                'A': [p.name for p in result.side_a],
                'B': [p.name for p in result.side_b],
            },
            'rating': {
                'A': round(result.rating_a, 2),
                'B': round(result.rating_b, 2),
            },
        }

        with open(output_path, 'w', encoding='utf-8') as f:
            yaml.dump(yaml_data, f, default_flow_style=False, sort_keys=True)

    def get_team_summary(self, result: TeamResult) -> Dict[str, object]:
        """Get a summary of a generated split.

        Args:
            result: Generated teams

        Returns:
            Dictionary with team sizes, ratings, scores and position counts
        """
        def position_counts(players):
            counts = Counter()
            for player in players:
                if player.position_tags:
                    counts.update(player.position_tags)
            return dict(counts)

        return {
            'team_sizes': {'A': len(result.side_a), 'B': len(result.side_b)},
            'ratings': {'A': round(result.rating_a, 2), 'B': round(result.rating_b, 2)},
            'scores': {'A': round(result.score_a, 2), 'B': round(result.score_b, 2)},
            'delta': round(result.delta, 2),
            'positions': {
                'A': position_counts(result.side_a),
                'B': position_counts(result.side_b),
            },
            'trials': result.trials,
        }


def generate_teams(
    roster: Sequence[Player],
    max_rating_delta: float,
    min_position_counts: Optional[Mapping[str, int]] = None,
    max_trials: int = DEFAULT_MAX_TRIALS,
    rng=None,
) -> TeamResult:
    """Split ``roster`` into two teams whose ratings differ by less than ``max_rating_delta``.

    Raises:
        ConfigurationError: If the inputs make a split impossible by construction
        ConstraintUnsatisfiable: If the trial budget is exhausted
    """
    constraints = Constraints(max_rating_delta, dict(min_position_counts or {}))
    return TeamBalancer(constraints, max_trials=max_trials, rng=rng).search(roster)
