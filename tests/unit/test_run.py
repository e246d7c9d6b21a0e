"""
Test suite for the run module.

Covers the FLASK_ENV to configuration class mapping, ``.env`` file
handling and the development server startup.
"""

from unittest.mock import MagicMock, patch

import pytest
from run import main


@pytest.fixture
def run_env(monkeypatch):
    """Clean environment for ``run.main``: no Docker markers, default port."""
    monkeypatch.delenv("IN_DOCKER_CONTAINER", raising=False)
    monkeypatch.delenv("APP_MODE", raising=False)
    monkeypatch.setenv("PORT", "5000")
    return monkeypatch


def _run_main(env_file_exists=True, debug=False):
    mocks = {
        "create_app": MagicMock(),
        "logger": MagicMock(),
        "load_dotenv": MagicMock(),
        "exists": (
            MagicMock(side_effect=env_file_exists)
            if callable(env_file_exists)
            else MagicMock(return_value=env_file_exists)
        ),
    }
    mock_app = MagicMock()
    mock_app.config.get.return_value = debug
    mocks["create_app"].return_value = mock_app
    mocks["app"] = mock_app

    with (
        patch("run.create_app", mocks["create_app"]),
        patch("run.logger", mocks["logger"]),
        patch("run.load_dotenv", mocks["load_dotenv"]),
        patch("run.os.path.exists", mocks["exists"]),
    ):
        main()
    return mocks


@pytest.mark.parametrize(
    "env,expected_config,env_file_exists,expected_debug",
    [
        ("production", "app.config.ProductionConfig", True, False),
        ("staging", "app.config.StagingConfig", False, True),
        ("testing", "app.config.TestingConfig", True, False),
        ("development", "app.config.DevelopmentConfig", True, True),
        ("unknown", "app.config.DevelopmentConfig", False, False),
    ],
)
def test_run_config_mapping(
    run_env, env, expected_config, env_file_exists, expected_debug
):
    run_env.setenv("FLASK_ENV", env)

    mocks = _run_main(env_file_exists, expected_debug)

    mocks["create_app"].assert_called_once_with(expected_config)
    expected_env_file = f".env.{env}"

    if env_file_exists:
        mocks["exists"].assert_called_once_with(expected_env_file)
        mocks["load_dotenv"].assert_called_once_with(expected_env_file)
        mocks["logger"].info.assert_any_call(
            "Loaded environment file.", env_file=expected_env_file
        )
    else:
        assert [c.args[0] for c in mocks["exists"].call_args_list] == [
            expected_env_file,
            ".env",
        ]
        mocks["load_dotenv"].assert_not_called()
        mocks["logger"].warning.assert_any_call(
            "Environment file not found.", env_file=expected_env_file
        )

    mocks["logger"].info.assert_any_call(
        "Resolved configuration.", environment=env, config=expected_config
    )
    mocks["app"].config.get.assert_called_with("DEBUG", False)
    mocks["app"].run.assert_called_once_with(
        host="0.0.0.0", port=5000, debug=expected_debug
    )


def test_falls_back_to_plain_env_file(run_env):
    run_env.setenv("FLASK_ENV", "staging")

    mocks = _run_main(lambda path: path == ".env")

    mocks["load_dotenv"].assert_called_once_with(".env")
    mocks["logger"].info.assert_any_call("Loaded environment file.", env_file=".env")
    mocks["logger"].warning.assert_not_called()


def test_main_with_custom_port(run_env):
    run_env.setenv("FLASK_ENV", "development")
    run_env.setenv("PORT", "8080")

    mocks = _run_main(debug=True)

    mocks["app"].run.assert_called_once_with(
        host="0.0.0.0", port=8080, debug=True
    )
    mocks["logger"].info.assert_any_call(
        "Starting Flask development server.", port=8080, debug=True
    )


@pytest.mark.parametrize("marker", ["IN_DOCKER_CONTAINER", "APP_MODE"])
def test_container_environment_skips_env_file(run_env, marker):
    run_env.setenv("FLASK_ENV", "staging")
    run_env.setenv(marker, "true")

    mocks = _run_main()

    mocks["exists"].assert_not_called()
    mocks["load_dotenv"].assert_not_called()
    mocks["logger"].info.assert_any_call(
        "Running in a container, skipping .env file loading."
    )
