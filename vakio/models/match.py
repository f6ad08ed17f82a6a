from datetime import datetime, timezone

from vakio import db

MATCH_COUNT = 13


class Match(db.Model):
    __tablename__ = "matches"

    id = db.Column(db.Integer, primary_key=True)

    # Position on the coupon (1-13)
    match_number = db.Column(db.Integer, nullable=False)

    # Teams
    home_team = db.Column(db.String(100), nullable=False)
    away_team = db.Column(db.String(100), nullable=False)

    # Outcome weights, percentages by convention
    weight_home = db.Column(db.Integer, nullable=False, default=33)
    weight_draw = db.Column(db.Integer, nullable=False, default=34)
    weight_away = db.Column(db.Integer, nullable=False, default=33)

    # Timestamps
    created_at = db.Column(db.DateTime, default=lambda: datetime.now(timezone.utc))
    updated_at = db.Column(
        db.DateTime,
        default=lambda: datetime.now(timezone.utc),
        onupdate=lambda: datetime.now(timezone.utc),
    )

    __table_args__ = (
        db.Index("idx_match_number", "match_number"),
        db.CheckConstraint(
            "match_number BETWEEN 1 AND 13", name="match_number_range"
        ),
        db.CheckConstraint(
            "weight_home BETWEEN 0 AND 100 AND weight_draw BETWEEN 0 AND 100 "
            "AND weight_away BETWEEN 0 AND 100",
            name="weight_range",
        ),
    )

    def __repr__(self):
        return f"<Match {self.match_number}: {self.home_team} - {self.away_team}>"

    @staticmethod
    def validate_data(data):
        """Check one match entry against the storage rules

        Returns:
            tuple: (is_valid, message)
        """
        if not isinstance(data, dict):
            return False, "Match entry must be an object"

        number = data.get("match_number")
        if not _is_int(number) or not 1 <= number <= MATCH_COUNT:
            return False, f"Match number must be between 1 and {MATCH_COUNT}"

        for field in ("home_team", "away_team"):
            value = data.get(field)
            if not isinstance(value, str) or not value.strip():
                return False, f"Match {number} is missing {field}"

        for field in ("weight_home", "weight_draw", "weight_away"):
            value = data.get(field)
            if value is None:
                continue
            if not _is_number(value) or not 0 <= value <= 100:
                return False, f"Match {number} has an invalid {field}"

        return True, "Valid match"

    @staticmethod
    def from_dict(data):
        """Build an unsaved match from a validated dictionary

        Missing or null weights fall back to 33/34/33.
        """
        from vakio.utils.row_generator import round_half_up

        def weight(field, default):
            value = data.get(field)
            return default if value is None else round_half_up(value)

        return Match(
            match_number=data["match_number"],
            home_team=data["home_team"].strip(),
            away_team=data["away_team"].strip(),
            weight_home=weight("weight_home", 33),
            weight_draw=weight("weight_draw", 34),
            weight_away=weight("weight_away", 33),
        )

    @staticmethod
    def replace_all(entries):
        """Delete every stored match and insert the given ones

        Bet sets keep no reference to the removed matches afterwards.
        The caller commits.
        """
        from .bet_set import bet_set_matches

        db.session.execute(bet_set_matches.delete())
        Match.query.delete()

        matches = [Match.from_dict(entry) for entry in entries]
        db.session.add_all(matches)
        db.session.flush()
        return matches

    @staticmethod
    def get_all_ordered():
        return Match.query.order_by(Match.match_number, Match.id).all()

    def to_dict(self):
        """Convert match to dictionary for API responses"""
        return {
            "id": self.id,
            "match_number": self.match_number,
            "home_team": self.home_team,
            "away_team": self.away_team,
            "weight_home": self.weight_home,
            "weight_draw": self.weight_draw,
            "weight_away": self.weight_away,
            "created_at": self.created_at.isoformat() if self.created_at else None,
        }


def _is_number(value):
    return isinstance(value, (int, float)) and not isinstance(value, bool)


def _is_int(value):
    return isinstance(value, int) and not isinstance(value, bool)
