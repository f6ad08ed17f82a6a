"""
Scoring of generated rows against actual pool results
"""

from vakio.models.match import MATCH_COUNT
from vakio.utils.row_generator import OUTCOMES, round_half_up


def calculate_percentage(correct_count, total_possible):
    """Share of correct picks as a whole percentage"""
    if not total_possible:
        return 0
    return round_half_up(correct_count / total_possible * 100)


def parse_results(results):
    """
    Accept results as a list of symbols or a "1,X,2,..." string.

    Returns:
        list of 13 symbols, or None when the count is wrong or any symbol
        is not an outcome
    """
    if isinstance(results, str):
        results = [symbol.strip() for symbol in results.split(",")]
    if not isinstance(results, list):
        return None

    symbols = [str(symbol).strip().upper() for symbol in results]
    if len(symbols) != MATCH_COUNT or any(symbol not in OUTCOMES for symbol in symbols):
        return None
    return symbols


def count_correct(picks, results):
    """Number of positions where the row matches the results"""
    return sum(1 for pick, result in zip(picks, results) if pick == result)


def score_rows(rows, results):
    """
    Score every row against the results.

    Returns:
        dict with best_correct, best_rows (rows reaching best_correct) and
        distribution {correct_count: number_of_rows}
    """
    distribution = {}
    for picks in rows:
        correct = count_correct(picks, results)
        distribution[correct] = distribution.get(correct, 0) + 1

    best_correct = max(distribution) if distribution else 0
    return {
        "best_correct": best_correct,
        "best_rows": distribution.get(best_correct, 0),
        "distribution": dict(sorted(distribution.items())),
    }
