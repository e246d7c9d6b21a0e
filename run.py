"""
Development entry point for the catalog API.

Picks the configuration class from ``FLASK_ENV``, loads ``.env.<env>``
(falling back to ``.env``) outside containers, then starts Flask's
built-in server on ``PORT``.
"""

import os
from dotenv import load_dotenv

from app import create_app
from app.logger import logger

CONFIG_CLASSES = {
    "development": "app.config.DevelopmentConfig",
    "testing": "app.config.TestingConfig",
    "staging": "app.config.StagingConfig",
    "production": "app.config.ProductionConfig",
}
DEFAULT_CONFIG = CONFIG_CLASSES["development"]


def in_container():
    """True when started by the container image, which injects its own env."""
    return bool(
        os.environ.get("IN_DOCKER_CONTAINER") or os.environ.get("APP_MODE")
    )


def load_env_file(env):
    """
    Load ``.env.<env>`` or, failing that, ``.env``.

    Returns:
        str or None: the file that was loaded.
    """
    for env_file in (f".env.{env}", ".env"):
        if os.path.exists(env_file):
            load_dotenv(env_file)
            logger.info("Loaded environment file.", env_file=env_file)
            return env_file
    logger.warning("Environment file not found.", env_file=f".env.{env}")
    return None


def main():
    env = os.environ.get("FLASK_ENV", "development")

    if in_container():
        logger.info("Running in a container, skipping .env file loading.")
    else:
        load_env_file(env)

    config_class = CONFIG_CLASSES.get(env, DEFAULT_CONFIG)
    logger.info("Resolved configuration.", environment=env, config=config_class)

    app = create_app(config_class)
    debug = app.config.get("DEBUG", False)
    port = int(os.environ.get("PORT", 5000))

    logger.info("Starting Flask development server.", port=port, debug=debug)
    app.run(host="0.0.0.0", port=port, debug=debug)


if __name__ == "__main__":
    main()
