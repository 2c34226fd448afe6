"""Application entry point.

Run the Flask application with environment-based configuration.

Environment Variables:
    FLASK_ENV: Set to 'production' for production mode, 'development' for dev mode
    FLASK_DEBUG: Set to '0' to disable debug mode (alternative to FLASK_ENV)
    HOST: Server host address (default: 0.0.0.0)
    PORT: Server port (default: 3000)

Examples:
    # Development mode
    FLASK_ENV=development python run.py

    # Production mode, reporting metrics every 30 seconds
    METRICS_URL=https://metrics.example.com/api/v1/push \
    METRICS_USER_ID=1234 METRICS_API_KEY=secret python run.py
"""

import logging

from pizza_service import create_app

app = create_app()

if __name__ == "__main__":
    logging.basicConfig(format="%(asctime)s %(levelname)s %(name)s: %(message)s")

    host = app.config.get('HOST', '0.0.0.0')
    port = app.config.get('PORT', 3000)
    debug = app.config.get('DEBUG', False)

    # The reloader would spawn a second metrics reporter thread
    app.run(host=host, port=port, debug=debug, use_reloader=False)
