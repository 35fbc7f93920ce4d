#!/usr/bin/env python3
"""
Simple runner script for the Flask application.
This script ensures the correct Python path is set and runs the app.

WSGI servers can point at ``run_app:app``.
"""

import sys
from pathlib import Path

# Add the current directory to Python path
current_dir = Path(__file__).parent
sys.path.insert(0, str(current_dir))

from config_manager import config_manager, get_app_config
from site_app.main import create_app

app = create_app(config_manager)

if __name__ == "__main__":
    app_config = get_app_config()

    # Run the Flask app
    app.run(
        host=app_config.host,
        port=app_config.port,
        debug=app_config.debug,
        threaded=True
    )
