"""Application entry point."""

from __future__ import annotations

import os

from config import load_config
from core import setup_logger, get_logger
from web import create_app


def main() -> None:
    """Run the web server with settings from the environment."""
    config = load_config()

    # Setup logging
    setup_logger(
        level=config.log_level,
        log_file=os.path.join(config.log_folder, "app.log"),
        colored=True,
    )
    logger = get_logger("app")

    app = create_app(config)
    state = app.config["APP_STATE"]
    logger.info(
        f"Starting HR raffle suite on {config.web_host}:{config.web_port} "
        f"(environment={config.environment}, ai_naming={'on' if config.ai_enabled else 'off'})"
    )
    try:
        app.run(host=config.web_host, port=config.web_port, debug=config.debug, threaded=True)
    finally:
        state.shutdown()


if __name__ == "__main__":
    try:
        main()
    except KeyboardInterrupt:
        get_logger("app").info("Application stopped by user")
