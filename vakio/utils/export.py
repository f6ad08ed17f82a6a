"""
Row statistics and export formats
"""

import csv
import io

from vakio.models.match import MATCH_COUNT
from vakio.utils.row_generator import OUTCOMES

# Excel only detects UTF-8 with a byte order mark
UTF8_BOM = "\ufeff"


def pick_statistics(rows):
    """
    Count how often each outcome was picked per match.

    Args:
        rows: iterable of pick lists

    Returns:
        dict {match_number: {"1": n, "X": n, "2": n}}
    """
    stats = {
        number: {outcome: 0 for outcome in OUTCOMES}
        for number in range(1, MATCH_COUNT + 1)
    }

    for picks in rows:
        for index, pick in enumerate(picks, start=1):
            if index in stats and pick in stats[index]:
                stats[index][pick] += 1

    return stats


def rows_to_csv(rows):
    """Semicolon separated CSV with a header line, as European Excel expects"""
    output = io.StringIO()
    writer = csv.writer(output, delimiter=";", lineterminator="\n")

    writer.writerow(["Rivi"] + [f"Peli {i}" for i in range(1, MATCH_COUNT + 1)])
    for row_number, picks in enumerate(rows, start=1):
        writer.writerow([str(row_number)] + list(picks))

    return UTF8_BOM + output.getvalue()


def rows_to_text(rows):
    return "\n".join(
        f"Rivi {row_number}: {'-'.join(picks)}"
        for row_number, picks in enumerate(rows, start=1)
    )
