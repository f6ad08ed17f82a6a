import pytest

from vakio import create_app, db
from vakio.utils.pool_import import default_matches


@pytest.fixture
def app():
    app = create_app("testing")

    with app.app_context():
        yield app
        db.session.remove()
        db.drop_all()


@pytest.fixture
def client(app):
    return app.test_client()


@pytest.fixture
def matches():
    """13 generator-ready matches with 50/20/30 weights"""
    return default_matches()


@pytest.fixture
def pool_data():
    """A well-formed 13-match pool description as the scraper writes it"""
    percentages = [
        (45, 28, 27),
        (60, 25, 15),
        (33, 34, 33),
        (20, 30, 50),
        (70, 20, 10),
        (40, 40, 20),
        (15, 25, 60),
        (55, 30, 15),
        (38, 31, 31),
        (25, 25, 50),
        (80, 15, 5),
        (50, 30, 20),
        (10, 20, 70),
    ]
    return {
        "scraped_at": "2025-03-01T10:00:00",
        "url": "https://www.veikkaus.fi/fi/vedonlyonti/vakio",
        "game_name": "Vakio 1",
        "sport": "Jalkapallo",
        "closing_time": "la 15.00",
        "pool_size": "250 000 €",
        "matches": [
            {
                "match_number": str(i + 1),
                "home_team": f"Koti {i + 1}",
                "away_team": f"Vieras {i + 1}",
                "percentage_1": home,
                "percentage_x": draw,
                "percentage_2": away,
                "total": home + draw + away,
            }
            for i, (home, draw, away) in enumerate(percentages)
        ],
    }
