from datetime import datetime, timezone

from vakio import db

# Ordered link between a bet set and the matches it was generated from
bet_set_matches = db.Table(
    "bet_set_matches",
    db.Column(
        "bet_set_id",
        db.Integer,
        db.ForeignKey("bet_sets.id", ondelete="CASCADE"),
        primary_key=True,
    ),
    db.Column(
        "match_id",
        db.Integer,
        db.ForeignKey("matches.id", ondelete="CASCADE"),
        primary_key=True,
    ),
    db.Column("position", db.Integer, nullable=False),
)


class BetSet(db.Model):
    __tablename__ = "bet_sets"

    id = db.Column(db.Integer, primary_key=True)
    name = db.Column(db.String(100), nullable=False, default="Vakioveikkaus")

    # Pool metadata from an import
    game_name = db.Column(db.String(200))
    sport = db.Column(db.String(100))
    pool_size = db.Column(db.String(100))

    rows_count = db.Column(db.Integer, nullable=False, default=0)
    total_cost = db.Column(db.Float, nullable=False, default=32.0)

    # Timestamps
    created_at = db.Column(db.DateTime, default=lambda: datetime.now(timezone.utc))
    updated_at = db.Column(
        db.DateTime,
        default=lambda: datetime.now(timezone.utc),
        onupdate=lambda: datetime.now(timezone.utc),
    )

    # Relationships
    matches = db.relationship(
        "Match",
        secondary=bet_set_matches,
        order_by=bet_set_matches.c.position,
        viewonly=True,
    )
    rows = db.relationship(
        "BetRow",
        backref="bet_set",
        lazy="dynamic",
        cascade="all, delete-orphan",
    )

    __table_args__ = (db.Index("idx_bet_set_created", "created_at"),)

    def __repr__(self):
        return f"<BetSet {self.id} {self.name} rows={self.rows_count}>"

    @staticmethod
    def create_bet_set(matches, **fields):
        """Create a bet set referencing the given matches in order

        The caller commits.
        """
        bet_set = BetSet(**fields)
        db.session.add(bet_set)
        db.session.flush()

        if matches:
            db.session.execute(
                bet_set_matches.insert(),
                [
                    {"bet_set_id": bet_set.id, "match_id": match.id, "position": index}
                    for index, match in enumerate(matches)
                ],
            )
        return bet_set

    @staticmethod
    def newest_first():
        return BetSet.query.order_by(BetSet.created_at.desc(), BetSet.id.desc())

    def get_rows(self):
        from .bet_row import BetRow

        return self.rows.order_by(BetRow.row_number).all()

    def to_dict(self, include_matches=True, include_rows=True):
        """Convert bet set to dictionary for API responses"""
        data = {
            "id": self.id,
            "name": self.name,
            "game_name": self.game_name,
            "sport": self.sport,
            "pool_size": self.pool_size,
            "rows_count": self.rows_count,
            "total_cost": self.total_cost,
            "created_at": self.created_at.isoformat() if self.created_at else None,
            "updated_at": self.updated_at.isoformat() if self.updated_at else None,
        }

        if include_matches:
            data["matches"] = [match.to_dict() for match in self.matches]

        if include_rows:
            data["rows"] = [row.to_dict() for row in self.get_rows()]

        return data
