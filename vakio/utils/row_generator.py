"""
Weighted row generator for Vakioveikkaus

A row is one guess over all 13 matches: one outcome symbol per match,
drawn from that match's own (home, draw, away) weights. Rows are kept
unique while that is feasible; after the attempt budget runs out the
remainder is filled without the uniqueness check.
"""

import logging
import math
import random

from vakio.models.match import MATCH_COUNT

logger = logging.getLogger(__name__)

HOME = "1"
DRAW = "X"
AWAY = "2"
OUTCOMES = (HOME, DRAW, AWAY)

WEIGHT_FIELDS = ("weight_home", "weight_draw", "weight_away")

# Attempts allowed per requested row before giving up on uniqueness
ATTEMPTS_PER_ROW = 100


def weighted_pick(weight_home, weight_draw, weight_away, rng=random):
    """
    Pick one outcome symbol according to the three weights.

    Args:
        weight_home, weight_draw, weight_away: non-negative weights, sum > 0
        rng: random source (module `random` unless a seeded Random is given)

    Returns:
        "1", "X" or "2"
    """
    total = weight_home + weight_draw + weight_away
    value = rng.random() * total

    if value < weight_home:
        return HOME
    if value < weight_home + weight_draw:
        return DRAW
    return AWAY


def generate_row(matches, rng=random):
    """Draw one row; `matches` holds dicts with the three weight fields"""
    return [
        weighted_pick(
            match["weight_home"], match["weight_draw"], match["weight_away"], rng
        )
        for match in matches
    ]


def generate_unique_rows(matches, target_count, rng=random):
    """
    Generate `target_count` rows, unique as long as the budget allows.

    Up to ATTEMPTS_PER_ROW * target_count draws are spent collecting
    distinct rows. If that is not enough (too few distinct combinations
    carry weight), the rest is filled with plain draws and the result may
    contain duplicates.

    Returns:
        list of rows, each a list of outcome symbols
    """
    seen = set()
    rows = []

    attempts = 0
    max_attempts = target_count * ATTEMPTS_PER_ROW

    while len(rows) < target_count and attempts < max_attempts:
        row = generate_row(matches, rng)
        key = ",".join(row)

        if key not in seen:
            seen.add(key)
            rows.append(row)

        attempts += 1

    if len(rows) < target_count:
        logger.warning(
            f"Only {len(rows)} unique rows after {attempts} attempts, "
            f"filling {target_count - len(rows)} rows without uniqueness"
        )

    while len(rows) < target_count:
        rows.append(generate_row(matches, rng))

    return rows


def validate_matches(matches):
    """
    Check generator input before any rows are drawn.

    Returns:
        tuple: (is_valid, message)
    """
    if not isinstance(matches, list) or len(matches) != MATCH_COUNT:
        return False, f"Exactly {MATCH_COUNT} matches are required"

    for index, match in enumerate(matches, start=1):
        label = index
        if isinstance(match, dict) and match.get("match_number") is not None:
            label = match["match_number"]

        if not isinstance(match, dict):
            return False, f"Match {label} has invalid weights"

        weights = [match.get(field) for field in WEIGHT_FIELDS]
        if not all(_is_weight(weight) for weight in weights):
            return False, f"Match {label} has invalid weights"

        if sum(weights) <= 0:
            return False, f"Match {label} has invalid weights"

    return True, "Valid matches"


def normalize_weights(weight_home, weight_draw, weight_away):
    """
    Scale a weight triple to integer percentages summing to 100.

    Home and draw are rounded, away takes the remainder. A triple summing
    to zero is returned unchanged.
    """
    total = weight_home + weight_draw + weight_away
    if total <= 0:
        return weight_home, weight_draw, weight_away

    home = round_half_up(weight_home / total * 100)
    draw = round_half_up(weight_draw / total * 100)
    return home, draw, 100 - home - draw


def round_half_up(value):
    """Round to the nearest integer, halves upwards (12.5 -> 13)"""
    if isinstance(value, int):
        return value
    return math.floor(value + 0.5)


def format_rows(rows):
    """Number rows from 1 for API responses"""
    return [
        {"row_number": index, "picks": picks}
        for index, picks in enumerate(rows, start=1)
    ]


def _is_weight(value):
    return (
        isinstance(value, (int, float))
        and not isinstance(value, bool)
        and value >= 0
        and value == value  # NaN
        and value != float("inf")
    )
