#!/usr/bin/env python3
"""
Simple runner script for the Flask application.
This script ensures the correct Python path is set, starts the daily quota
reset scheduler and runs the app.
"""

import sys
from pathlib import Path

# Add the current directory to Python path
current_dir = Path(__file__).parent
sys.path.insert(0, str(current_dir))

from app.logging_config import setup_logging, stop_logging
from app.main import create_app
from config_manager import ConfigManager


def main():
    config_manager = ConfigManager()
    app_config = config_manager.get_app_config()
    setup_logging(debug=app_config.debug)

    app = create_app(config_manager)

    scheduler = app.extensions["quota_reset_scheduler"]
    if app.extensions["quota_reset_enabled"]:
        scheduler.start()

    print("🚀 Starting Flask application...")
    print(f"📁 Working directory: {current_dir}")

    try:
        # The reloader would start a second scheduler and a second quota state
        app.run(
            host=app_config.host,
            port=app_config.port,
            debug=app_config.debug,
            use_reloader=False,
            threaded=True
        )
    finally:
        scheduler.stop()
        stop_logging()


if __name__ == "__main__":
    main()
