"""Configuration management for Team Balancer."""

from pathlib import Path
from typing import Dict, Optional

import yaml

from .balancer import DEFAULT_MAX_TRIALS
from .models import Constraints

DEFAULT_MAX_DELTA = 1.0


class Config:
    """Configuration class for team generation settings."""

    def __init__(self):
        """Initialize configuration with default values."""
        self.roster_source: Optional[str] = None
        self.max_delta: float = DEFAULT_MAX_DELTA
        self.max_trials: int = DEFAULT_MAX_TRIALS
        self.min_positions: Dict[str, int] = {}

    def load_from_file(self, config_path: Path) -> None:
        """Load configuration from a YAML file.

        Args:
            config_path: Path to the YAML configuration file

        Raises:
            FileNotFoundError: If the config file doesn't exist
            yaml.YAMLError: If the YAML file is invalid
            ValueError: If the configuration structure is invalid
        """
        if not config_path.exists():
            raise FileNotFoundError(f"Configuration file not found: {config_path}")

        with open(config_path, 'r', encoding='utf-8') as f:
            config_data = yaml.safe_load(f)

        if not isinstance(config_data, dict):
            raise ValueError("Configuration file must contain a YAML dictionary")

        roster_config = config_data.get('roster') or {}
        team_config = config_data.get('teams') or {}
        if not isinstance(roster_config, dict) or not isinstance(team_config, dict):
            raise ValueError("roster and teams sections must be YAML dictionaries")

        if 'source' in roster_config:
            source = roster_config['source']
            if not isinstance(source, str) or not source.strip():
                raise ValueError("roster.source must be a non-empty string")
            self.roster_source = source.strip()

        if 'max_delta' in team_config:
            max_delta = team_config['max_delta']
            if isinstance(max_delta, bool) or not isinstance(max_delta, (int, float)) or max_delta < 0:
                raise ValueError("teams.max_delta must be a non-negative number")
            self.max_delta = float(max_delta)

        if 'max_trials' in team_config:
            max_trials = team_config['max_trials']
            if isinstance(max_trials, bool) or not isinstance(max_trials, int) or max_trials < 1:
                raise ValueError("teams.max_trials must be a positive integer")
            self.max_trials = max_trials

        if 'min_positions' in team_config:
            min_positions = team_config['min_positions'] or {}
            if not isinstance(min_positions, dict):
                raise ValueError("teams.min_positions must be a mapping of tag to count")

            self.min_positions = {}
            for tag, count in min_positions.items():
                if isinstance(count, bool) or not isinstance(count, int) or count < 0:
                    raise ValueError(
                        f"teams.min_positions.{tag} must be a non-negative integer"
                    )
                self.min_positions[str(tag).strip().lower()] = count

    def constraints(self) -> Constraints:
        """Build the balancing constraints described by this configuration."""
        return Constraints(self.max_delta, dict(self.min_positions))

    def to_dict(self) -> dict:
        """Convert configuration to dictionary format.

        Returns:
            Dictionary representation of the configuration
        """
        config_dict = {
            'teams': {
                'max_delta': self.max_delta,
                'max_trials': self.max_trials,
            }
        }

        if self.roster_source:
            config_dict['roster'] = {'source': self.roster_source}

        if self.min_positions:
            config_dict['teams']['min_positions'] = dict(self.min_positions)

        return config_dict

    def save_to_file(self, config_path: Path) -> None:
        """Save configuration to a YAML file.

        Args:
            config_path: Path where to save the configuration
        """
        config_dict = self.to_dict()

        with open(config_path, 'w', encoding='utf-8') as f:
            yaml.dump(config_dict, f, default_flow_style=False, sort_keys=True)
