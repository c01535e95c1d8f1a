import logging
import os
from pathlib import Path
from unittest.mock import patch

import pytest

from utils.env import _find_project_root, env_float, env_int, load_project_dotenv


@pytest.mark.parametrize("depth", [0, 1, 3])
def test_find_project_root_walks_up_to_pyproject(tmp_path: Path, depth):
    """pyproject.toml is found in the start directory or any parent."""
    (tmp_path / "pyproject.toml").touch()
    start_dir = tmp_path.joinpath(*[f"sub{n}" for n in range(depth)])
    start_dir.mkdir(parents=True, exist_ok=True)

    assert _find_project_root(start=start_dir) == tmp_path


@patch("utils.env.load_dotenv")
def test_load_project_dotenv_reads_env_file(mock_load_dotenv, tmp_path: Path):
    (tmp_path / "pyproject.toml").touch()
    env_file = tmp_path / ".env"
    env_file.touch()
    mock_load_dotenv.return_value = True

    assert load_project_dotenv(start=tmp_path) is True
    mock_load_dotenv.assert_called_once_with(dotenv_path=env_file, override=False)


@patch("utils.env.load_dotenv")
def test_load_project_dotenv_without_env_file(mock_load_dotenv, tmp_path: Path):
    (tmp_path / "pyproject.toml").touch()

    assert load_project_dotenv(start=tmp_path) is False
    mock_load_dotenv.assert_not_called()


def test_load_project_dotenv_keeps_existing_variables(tmp_path: Path, monkeypatch):
    """Variables already in the environment win over the .env file."""
    (tmp_path / "pyproject.toml").touch()
    (tmp_path / ".env").write_text("INVENTORY_FORECAST_MODEL=dotenv-model\nINVENTORY_FORECAST_RETRIES=7")
    monkeypatch.setenv("INVENTORY_FORECAST_MODEL", "shell-model")
    monkeypatch.delenv("INVENTORY_FORECAST_RETRIES", raising=False)

    load_project_dotenv(start=tmp_path)

    assert os.environ["INVENTORY_FORECAST_MODEL"] == "shell-model"
    assert os.environ.pop("INVENTORY_FORECAST_RETRIES") == "7"


@pytest.mark.parametrize(
    "raw, expected",
    [(None, 3), ("", 3), ("  ", 3), ("8", 8)],
)
def test_env_int(monkeypatch, raw, expected):
    if raw is None:
        monkeypatch.delenv("TEST_ENV_INT", raising=False)
    else:
        monkeypatch.setenv("TEST_ENV_INT", raw)
    assert env_int("TEST_ENV_INT", 3) == expected


def test_env_int_invalid_value_warns(monkeypatch, caplog):
    monkeypatch.setenv("TEST_ENV_INT", "three")
    with caplog.at_level(logging.WARNING):
        assert env_int("TEST_ENV_INT", 3) == 3
    assert "Ignoring non-integer TEST_ENV_INT='three'" in caplog.text


def test_env_float(monkeypatch, caplog):
    monkeypatch.setenv("TEST_ENV_FLOAT", "0.25")
    assert env_float("TEST_ENV_FLOAT", 1.0) == 0.25

    monkeypatch.setenv("TEST_ENV_FLOAT", "fast")
    with caplog.at_level(logging.WARNING):
        assert env_float("TEST_ENV_FLOAT", 1.0) == 1.0
    assert "Ignoring non-numeric TEST_ENV_FLOAT" in caplog.text
