from datetime import datetime, timezone

from vakio import db


class PoolImport(db.Model):
    """A pool description as it was imported, kept for reference"""

    __tablename__ = "pool_imports"

    id = db.Column(db.Integer, primary_key=True)

    game_name = db.Column(db.String(200), nullable=False)
    sport = db.Column(db.String(100), default="Jalkapallo")
    closing_time = db.Column(db.String(100))
    pool_size = db.Column(db.String(100))
    url = db.Column(db.String(500))

    # Imported matches exactly as received (numbers, teams, percentages)
    matches = db.Column(db.JSON, nullable=False, default=list)

    created_at = db.Column(db.DateTime, default=lambda: datetime.now(timezone.utc))

    __table_args__ = (db.Index("idx_pool_import_created", "created_at"),)

    def __repr__(self):
        return f"<PoolImport {self.game_name}>"

    @staticmethod
    def from_pool(pool):
        """Build an unsaved record from a parsed Pool"""
        return PoolImport(
            game_name=pool.game_name,
            sport=pool.sport,
            closing_time=pool.closing_time,
            pool_size=pool.pool_size,
            url=pool.url,
            matches=pool.raw_matches,
        )

    def to_dict(self):
        return {
            "id": self.id,
            "game_name": self.game_name,
            "sport": self.sport,
            "closing_time": self.closing_time,
            "pool_size": self.pool_size,
            "url": self.url,
            "matches": self.matches,
            "created_at": self.created_at.isoformat() if self.created_at else None,
        }
