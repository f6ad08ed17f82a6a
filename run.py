from vakio import create_app, db
from vakio.models import BetRow, BetSet, Match, PoolImport, Score

app = create_app()


@app.shell_context_processor
def make_shell_context():
    return {
        "db": db,
        "Match": Match,
        "BetSet": BetSet,
        "BetRow": BetRow,
        "Score": Score,
        "PoolImport": PoolImport,
    }


if __name__ == "__main__":
    app.run(host="0.0.0.0", port=5000, debug=True)
