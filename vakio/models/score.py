from datetime import datetime, timezone

from vakio import db


class Score(db.Model):
    """Actual pool results scored against a set of rows"""

    __tablename__ = "scores"

    id = db.Column(db.Integer, primary_key=True)

    game_name = db.Column(db.String(200), nullable=False)
    pool_size = db.Column(db.String(100))
    date = db.Column(db.DateTime, nullable=False)

    # Scored rows: rows separated by ";", picks by ","
    scores = db.Column(db.Text, nullable=False)

    hit_count = db.Column(db.Integer, nullable=False, default=0)
    total_possible = db.Column(db.Integer, nullable=False, default=13)
    correct_count = db.Column(db.Integer, nullable=False, default=0)
    percentage = db.Column(db.Integer, nullable=False, default=0)

    # Timestamps
    created_at = db.Column(db.DateTime, default=lambda: datetime.now(timezone.utc))
    updated_at = db.Column(
        db.DateTime,
        default=lambda: datetime.now(timezone.utc),
        onupdate=lambda: datetime.now(timezone.utc),
    )

    __table_args__ = (
        db.Index("idx_score_created", "created_at"),
        db.CheckConstraint("percentage BETWEEN 0 AND 100", name="percentage_range"),
    )

    def __repr__(self):
        return f"<Score {self.game_name} {self.correct_count}/{self.total_possible}>"

    @staticmethod
    def newest_first():
        return Score.query.order_by(Score.created_at.desc(), Score.id.desc())

    @staticmethod
    def get_latest():
        return Score.newest_first().first()

    def to_dict(self):
        return {
            "id": self.id,
            "game_name": self.game_name,
            "pool_size": self.pool_size,
            "date": self.date.isoformat() if self.date else None,
            "scores": self.scores,
            "hit_count": self.hit_count,
            "total_possible": self.total_possible,
            "correct_count": self.correct_count,
            "percentage": self.percentage,
            "created_at": self.created_at.isoformat() if self.created_at else None,
        }
