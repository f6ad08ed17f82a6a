import logging
import math
from datetime import datetime

from flask import Response, current_app, jsonify, request

from vakio import db, limiter
from vakio.models import MATCH_COUNT, BetRow, BetSet, Match, PoolImport, Score
from vakio.routes.api import bp
from vakio.utils.cache_utils import cached_query, invalidate_model_cache
from vakio.utils.export import pick_statistics, rows_to_csv
from vakio.utils.performance import PerformanceMonitor
from vakio.utils.pool_import import PoolImportError, parse_pool
from vakio.utils.row_generator import (
    OUTCOMES,
    format_rows,
    generate_unique_rows,
    round_half_up,
    validate_matches,
)
from vakio.utils.scoring import calculate_percentage, parse_results, score_rows

logger = logging.getLogger(__name__)


def _json_body():
    """Request body as a dict; anything else counts as empty"""
    data = request.get_json(silent=True)
    return data if isinstance(data, dict) else {}


def _is_int(value):
    return isinstance(value, int) and not isinstance(value, bool)


def _is_number(value):
    return (
        isinstance(value, (int, float))
        and not isinstance(value, bool)
        and (isinstance(value, int) or math.isfinite(value))
    )


def _pagination_args():
    """Read page and limit query parameters within configured bounds"""
    limit = request.args.get("limit", current_app.config["ITEMS_PER_PAGE"], type=int)
    page = request.args.get("page", 1, type=int)
    limit = max(1, min(limit, current_app.config["MAX_ITEMS_PER_PAGE"]))
    return max(page, 1), limit


def _paginated_response(query, serialize):
    page, limit = _pagination_args()
    result = query.paginate(page=page, per_page=limit, error_out=False)
    return jsonify(
        {
            "success": True,
            "data": [serialize(item) for item in result.items],
            "pagination": {
                "page": page,
                "limit": limit,
                "total": result.total,
                "pages": result.pages,
            },
        }
    )


def _validate_match_entries(entries):
    """Returns an error message, or None when every entry can be stored"""
    if not isinstance(entries, list):
        return "Invalid matches data"

    for entry in entries:
        is_valid, message = Match.validate_data(entry)
        if not is_valid:
            return f"Invalid matches data: {message}"
    return None


def _validate_row_entries(rows):
    """Returns an error message, or None when every row can be stored"""
    if not isinstance(rows, list):
        return "Invalid rows data"

    for index, row in enumerate(rows, start=1):
        if not isinstance(row, dict) or not _is_int(row.get("row_number")):
            return f"Invalid rows data: row {index} has no row_number"

        picks = row.get("picks")
        if (
            not isinstance(picks, list)
            or len(picks) != MATCH_COUNT
            or any(pick not in OUTCOMES for pick in picks)
        ):
            return f"Invalid rows data: row {row['row_number']} has invalid picks"
    return None


# Row generation


@bp.route("/generate", methods=["POST"])
@limiter.limit(lambda: current_app.config["GENERATE_RATE_LIMIT"])
def generate():
    """Generate weighted rows for 13 matches"""
    data = _json_body()
    matches = data.get("matches")

    is_valid, message = validate_matches(matches)
    if not is_valid:
        return jsonify({"error": message}), 400

    row_count = data.get("row_count", current_app.config["ROW_COUNT"])
    max_rows = current_app.config["MAX_ROW_COUNT"]
    if not _is_int(row_count) or not 1 <= row_count <= max_rows:
        return jsonify({"error": f"row_count must be between 1 and {max_rows}"}), 400

    try:
        with PerformanceMonitor("generate_rows"):
            rows = generate_unique_rows(matches, row_count)
    except Exception:
        logger.exception("Error generating rows")
        return jsonify({"error": "Internal server error"}), 500

    cost_per_row = current_app.config["COST_PER_ROW"]
    return jsonify(
        {
            "rows": format_rows(rows),
            "total": len(rows),
            "cost_per_row": cost_per_row,
            "total_cost": round(len(rows) * cost_per_row, 2),
        }
    )


# Matches


@cached_query("matches", timeout=300)
def _stored_matches():
    return [match.to_dict() for match in Match.get_all_ordered()]


@bp.route("/matches", methods=["GET"])
def list_matches():
    """Get all matches ordered by match number"""
    try:
        matches = _stored_matches()
    except Exception:
        logger.exception("Error fetching matches")
        return jsonify({"error": "Failed to fetch matches"}), 500

    return jsonify({"success": True, "data": matches})


@bp.route("/matches", methods=["POST"])
def save_matches():
    """Replace all stored matches with the given list"""
    entries = _json_body().get("matches")

    error = _validate_match_entries(entries)
    if error:
        return jsonify({"error": error}), 400

    try:
        matches = Match.replace_all(entries)
        db.session.commit()
    except Exception:
        db.session.rollback()
        logger.exception("Error saving matches")
        return jsonify({"error": "Failed to save matches"}), 500

    invalidate_model_cache("matches")
    logger.info(f"Replaced stored matches with {len(matches)} matches")

    return jsonify(
        {
            "success": True,
            "data": [match.to_dict() for match in matches],
            "message": f"Saved {len(matches)} matches",
        }
    )


# Bet sets


@bp.route("/betsets", methods=["POST"])
def save_bet_set():
    """Save matches, a bet set and its rows"""
    data = _json_body()
    entries = data.get("matches")
    rows = data.get("rows")

    error = _validate_match_entries(entries) or _validate_row_entries(rows)
    if error:
        return jsonify({"error": error}), 400

    total_cost = data.get("total_cost", current_app.config["DEFAULT_TOTAL_COST"])
    if not _is_number(total_cost) or total_cost < 0:
        return jsonify({"error": "Invalid total_cost"}), 400

    # Each step commits on its own: a failure in a later step leaves the
    # earlier ones stored.
    try:
        with PerformanceMonitor("save_bet_set"):
            matches = Match.replace_all(entries)
            db.session.commit()
            invalidate_model_cache("matches")

            bet_set = BetSet.create_bet_set(
                matches,
                name=data.get("name") or "Vakioveikkaus",
                game_name=data.get("game_name"),
                sport=data.get("sport"),
                pool_size=data.get("pool_size"),
                total_cost=total_cost,
                rows_count=len(rows),
            )
            db.session.commit()

            BetRow.create_rows(bet_set, rows)
            db.session.commit()
    except Exception:
        db.session.rollback()
        logger.exception("Error saving bet set")
        return jsonify({"error": "Failed to save bet set"}), 500

    logger.info(f"Saved bet set {bet_set.id} with {len(rows)} rows")

    return jsonify(
        {
            "success": True,
            "data": {
                "bet_set_id": bet_set.id,
                "matches_count": len(matches),
                "rows_count": len(rows),
                "total_cost": total_cost,
            },
            "message": f"Saved bet set with {len(rows)} rows",
        }
    )


@bp.route("/betsets", methods=["GET"])
def list_bet_sets():
    """Get bet sets, newest first"""
    try:
        return _paginated_response(BetSet.newest_first(), BetSet.to_dict)
    except Exception:
        logger.exception("Error fetching bet sets")
        return jsonify({"error": "Failed to fetch bet sets"}), 500


@bp.route("/betsets/<int:bet_set_id>")
def bet_set_detail(bet_set_id):
    """Get one bet set with its matches and rows"""
    bet_set = BetSet.query.get_or_404(bet_set_id)
    return jsonify({"success": True, "data": bet_set.to_dict()})


@bp.route("/betsets/<int:bet_set_id>/statistics")
def bet_set_statistics(bet_set_id):
    """Per-match outcome counts over the bet set's rows"""
    bet_set = BetSet.query.get_or_404(bet_set_id)
    rows = [row.pick_list for row in bet_set.get_rows()]
    return jsonify(
        {
            "success": True,
            "data": {
                "bet_set_id": bet_set.id,
                "rows_count": len(rows),
                "statistics": pick_statistics(rows),
            },
        }
    )


@bp.route("/betsets/<int:bet_set_id>/export.csv")
def bet_set_csv(bet_set_id):
    """Download the bet set's rows as Excel-compatible CSV"""
    bet_set = BetSet.query.get_or_404(bet_set_id)
    rows = [row.pick_list for row in bet_set.get_rows()]
    return Response(
        rows_to_csv(rows),
        mimetype="text/csv",
        headers={
            "Content-Disposition": "attachment; filename=vakioveikkaus-rivit.csv"
        },
    )


# Scores


def _scores_text(scores):
    """Stored form of the scored rows: rows joined by ';', picks by ','"""
    if isinstance(scores, str):
        return scores.strip()
    if isinstance(scores, list):
        return ";".join(
            ",".join(row) if isinstance(row, list) else str(row) for row in scores
        )
    return None


def _parse_date(value):
    if not isinstance(value, str):
        return None
    try:
        return datetime.fromisoformat(value.replace("Z", "+00:00"))
    except ValueError:
        return None


@bp.route("/scores", methods=["POST"])
def save_score():
    """Save a score record for a pool"""
    data = _json_body()
    game_name = data.get("game_name")
    scores = data.get("scores")
    date_value = data.get("date")

    if not game_name or not scores or not date_value:
        return (
            jsonify({"error": "Missing required fields: game_name, scores, date"}),
            400,
        )

    scores_text = _scores_text(scores)
    if not scores_text:
        return jsonify({"error": "Invalid scores data"}), 400

    date = _parse_date(date_value)
    if date is None:
        return jsonify({"error": "Invalid date"}), 400

    total_possible = data.get("total_possible", MATCH_COUNT)
    correct_count = data.get("correct_count", 0)
    hit_count = data.get("hit_count", 0)
    percentage = data.get("percentage", 0)

    if not _is_int(total_possible) or total_possible <= 0:
        return jsonify({"error": "Invalid total_possible"}), 400
    if not all(_is_int(value) and value >= 0 for value in (correct_count, hit_count)):
        return jsonify({"error": "Invalid hit or correct count"}), 400
    if not _is_number(percentage):
        return jsonify({"error": "Invalid percentage"}), 400

    summary = None
    if data.get("results") is not None:
        results = parse_results(data["results"])
        if results is None:
            return jsonify({"error": "Invalid results"}), 400

        rows = [
            [pick.strip().upper() for pick in row.split(",")]
            for row in scores_text.split(";")
        ]
        if any(
            len(row) != MATCH_COUNT or any(pick not in OUTCOMES for pick in row)
            for row in rows
        ):
            return jsonify({"error": "Invalid scores data"}), 400

        summary = score_rows(rows, results)
        correct_count = summary["best_correct"]
        hit_count = summary["best_rows"]

    percentage = round_half_up(percentage) or calculate_percentage(
        correct_count, total_possible
    )
    if not 0 <= percentage <= 100:
        return jsonify({"error": "Percentage must be between 0 and 100"}), 400

    try:
        score = Score(
            game_name=game_name,
            pool_size=data.get("pool_size"),
            date=date,
            scores=scores_text,
            hit_count=hit_count,
            total_possible=total_possible,
            correct_count=correct_count,
            percentage=percentage,
        )
        db.session.add(score)
        db.session.commit()
    except Exception:
        db.session.rollback()
        logger.exception("Error saving score")
        return jsonify({"error": "Failed to save score"}), 500

    response = {
        "success": True,
        "data": score.to_dict(),
        "message": f"Score saved: {correct_count}/{total_possible} hits ({percentage}%)",
    }
    if summary:
        response["summary"] = summary
    return jsonify(response)


@bp.route("/scores", methods=["GET"])
def list_scores():
    """Get score records, newest first"""
    try:
        return _paginated_response(Score.newest_first(), Score.to_dict)
    except Exception:
        logger.exception("Error fetching scores")
        return jsonify({"error": "Failed to fetch scores"}), 500


@bp.route("/scores/latest")
def latest_score():
    """Get the most recent score record"""
    try:
        score = Score.get_latest()
    except Exception:
        logger.exception("Error fetching latest score")
        return jsonify({"error": "Failed to fetch latest score"}), 500

    if not score:
        return jsonify({"error": "No scores found"}), 404

    return jsonify({"success": True, "data": score.to_dict()})


# Pool imports


@bp.route("/imports", methods=["POST"])
def import_pool():
    """Turn a scraped pool description into generator input and keep it"""
    try:
        pool = parse_pool(request.get_json(silent=True))
    except PoolImportError as e:
        return jsonify({"error": str(e)}), 400

    try:
        record = PoolImport.from_pool(pool)
        db.session.add(record)
        db.session.commit()
    except Exception:
        db.session.rollback()
        logger.exception("Error saving pool import")
        return jsonify({"error": "Failed to save import"}), 500

    return jsonify(
        {
            "success": True,
            "data": {
                "import_id": record.id,
                "game_name": pool.game_name,
                "sport": pool.sport,
                "pool_size": pool.pool_size,
                "matches": pool.matches,
                "warnings": pool.warnings,
            },
            "message": f"Imported {pool.game_name} - {len(pool.raw_matches)} matches",
        }
    )


@bp.route("/imports", methods=["GET"])
def list_imports():
    """Get stored pool imports, newest first"""
    query = PoolImport.query.order_by(
        PoolImport.created_at.desc(), PoolImport.id.desc()
    )
    try:
        return _paginated_response(query, PoolImport.to_dict)
    except Exception:
        logger.exception("Error fetching pool imports")
        return jsonify({"error": "Failed to fetch imports"}), 500
