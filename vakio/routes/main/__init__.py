from flask import Blueprint

bp = Blueprint("main", __name__)

from vakio.routes.main import routes  # noqa: F401, E402
