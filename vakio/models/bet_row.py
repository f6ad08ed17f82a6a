from datetime import datetime, timezone

from vakio import db


class BetRow(db.Model):
    __tablename__ = "bet_rows"

    id = db.Column(db.Integer, primary_key=True)
    bet_set_id = db.Column(
        db.Integer, db.ForeignKey("bet_sets.id", ondelete="CASCADE"), nullable=False
    )
    row_number = db.Column(db.Integer, nullable=False)

    # Outcome symbols joined with commas, e.g. "1,X,2,..."
    picks = db.Column(db.String(64), nullable=False)

    created_at = db.Column(db.DateTime, default=lambda: datetime.now(timezone.utc))

    __table_args__ = (db.Index("idx_bet_row_set_number", "bet_set_id", "row_number"),)

    def __repr__(self):
        return f"<BetRow {self.row_number} {self.picks}>"

    @property
    def pick_list(self):
        return self.picks.split(",") if self.picks else []

    @staticmethod
    def create_rows(bet_set, rows):
        """Add rows for a bet set; each row is a dict with row_number and picks

        The caller commits.
        """
        bet_rows = [
            BetRow(
                bet_set_id=bet_set.id,
                row_number=row["row_number"],
                picks=",".join(row["picks"]),
            )
            for row in rows
        ]
        db.session.add_all(bet_rows)
        return bet_rows

    def to_dict(self):
        return {
            "id": self.id,
            "row_number": self.row_number,
            "picks": self.pick_list,
        }
