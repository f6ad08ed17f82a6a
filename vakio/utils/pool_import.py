"""
Import of scraped Veikkaus pool descriptions

The scraper writes JSON like:

    {
        "scraped_at": "...", "url": "...", "game_name": "Vakio 1",
        "sport": "Jalkapallo", "closing_time": "...", "pool_size": "...",
        "matches": [
            {"match_number": "1", "home_team": "...", "away_team": "...",
             "percentage_1": 45, "percentage_x": 28, "percentage_2": 27,
             "total": 100},
            ...
        ]
    }

The public betting percentages are used as generator weights as-is.
"""

import logging
from dataclasses import dataclass, field

from vakio.models.match import MATCH_COUNT

logger = logging.getLogger(__name__)

PLACEHOLDER_WEIGHTS = (33, 34, 33)
DEFAULT_WEIGHTS = (50, 20, 30)


class PoolImportError(ValueError):
    """Raised when a pool description cannot be turned into matches"""


@dataclass
class Pool:
    game_name: str
    sport: str
    closing_time: str = None
    pool_size: str = None
    url: str = None
    scraped_at: str = None
    raw_matches: list = field(default_factory=list)
    matches: list = field(default_factory=list)
    warnings: list = field(default_factory=list)


def placeholder_match(index, weights=PLACEHOLDER_WEIGHTS):
    """Match `index` (0-based) with generic team names"""
    weight_home, weight_draw, weight_away = weights
    return {
        "match_number": index + 1,
        "home_team": f"Joukkue {index * 2 + 1}",
        "away_team": f"Joukkue {index * 2 + 2}",
        "weight_home": weight_home,
        "weight_draw": weight_draw,
        "weight_away": weight_away,
    }


def default_matches():
    """Starting point before any pool has been imported"""
    return [placeholder_match(i, DEFAULT_WEIGHTS) for i in range(MATCH_COUNT)]


def _percentage(entry, key):
    value = entry.get(key)
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise PoolImportError(f"Match {entry.get('match_number')} has no {key}")
    if value < 0:
        raise PoolImportError(f"Match {entry.get('match_number')} has negative {key}")
    return value


def _convert_match(entry):
    if not isinstance(entry, dict):
        raise PoolImportError("Match entries must be objects")

    try:
        match_number = int(str(entry.get("match_number")).strip())
    except ValueError:
        raise PoolImportError(
            f"Invalid match number: {entry.get('match_number')!r}"
        ) from None

    return {
        "match_number": match_number,
        "home_team": str(entry.get("home_team") or "").strip(),
        "away_team": str(entry.get("away_team") or "").strip(),
        "weight_home": _percentage(entry, "percentage_1"),
        "weight_draw": _percentage(entry, "percentage_x"),
        "weight_away": _percentage(entry, "percentage_2"),
    }


def parse_pool(data):
    """
    Turn a pool description into generator-ready matches.

    A match count other than 13 is tolerated: the result carries a warning,
    missing matches are filled with placeholders and extra ones dropped.

    Args:
        data: decoded JSON object

    Returns:
        Pool

    Raises:
        PoolImportError: when the description is malformed
    """
    if not isinstance(data, dict):
        raise PoolImportError("Pool description must be a JSON object")

    raw_matches = data.get("matches")
    if not isinstance(raw_matches, list):
        raise PoolImportError("Pool description has no matches list")

    pool = Pool(
        game_name=str(data.get("game_name") or "Vakio"),
        sport=data.get("sport") or "Jalkapallo",
        closing_time=data.get("closing_time"),
        pool_size=data.get("pool_size"),
        url=data.get("url"),
        scraped_at=data.get("scraped_at"),
        raw_matches=raw_matches,
    )

    matches = [_convert_match(entry) for entry in raw_matches]

    if len(matches) != MATCH_COUNT:
        message = f"Found {len(matches)} matches, expected {MATCH_COUNT}"
        logger.warning(f"Pool '{pool.game_name}': {message}")
        pool.warnings.append(message)

    matches = matches[:MATCH_COUNT]
    for index in range(len(matches), MATCH_COUNT):
        matches.append(placeholder_match(index))

    pool.matches = matches
    return pool
