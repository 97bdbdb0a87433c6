"""Team Balancer - A tool to split a rated roster into two balanced teams."""

__version__ = "0.1.0"

from .balancer import TeamBalancer, generate_teams
from .config import Config
from .exceptions import BalanceError, ConfigurationError, ConstraintUnsatisfiable
from .models import Constraints, Player, TeamResult

__all__ = [
    "TeamBalancer",
    "generate_teams",
    "Config",
    "BalanceError",
    "ConfigurationError",
    "ConstraintUnsatisfiable",
    "Constraints",
    "Player",
    "TeamResult",
]
