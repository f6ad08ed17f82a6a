import importlib

import pytest
from click.testing import CliRunner


@pytest.fixture
def manage(app, monkeypatch):
    monkeypatch.setenv("FLASK_CONFIG", "testing")
    return importlib.import_module("manage")


def test_generate_prints_rows_and_cost(manage):
    result = CliRunner().invoke(manage.cli, ["generate", "--count", "3"])

    assert result.exit_code == 0, result.output
    assert "3 rows, total cost 0.75 €" in result.output


def test_generate_rejects_zero_count(manage):
    result = CliRunner().invoke(manage.cli, ["generate", "--count", "0"])

    assert result.exit_code == 1
    assert "--count must be positive" in result.output
