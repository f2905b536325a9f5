import pytest
from click.testing import CliRunner

from indent_alignment.filesystem import MAX_FILE_SIZE_ENV_VAR, MAX_LINE_LENGTH_ENV_VAR


@pytest.fixture()
def cli_runner() -> CliRunner:
    """Provides a reusable Click CLI runner."""
    return CliRunner()


@pytest.fixture(autouse=True)
def _isolated_limits(monkeypatch):
    """Keep the caller's limit overrides out of the tests."""
    monkeypatch.delenv(MAX_FILE_SIZE_ENV_VAR, raising=False)
    monkeypatch.delenv(MAX_LINE_LENGTH_ENV_VAR, raising=False)
