from vakio import db  # noqa: F401 - imported for model imports

from .bet_row import BetRow
from .bet_set import BetSet, bet_set_matches
from .match import MATCH_COUNT, Match
from .pool_import import PoolImport
from .score import Score

__all__ = [
    "Match",
    "BetSet",
    "BetRow",
    "Score",
    "PoolImport",
    "bet_set_matches",
    "MATCH_COUNT",
]
