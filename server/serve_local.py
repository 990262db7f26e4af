#!/usr/bin/env python3
"""Local development server for TradieQuote.

Usage:
    cd server
    source venv/bin/activate
    python serve_local.py

Starts the Flask app on $PORT (default 3001) with:
- POST /api/generate -> generate a quote
- POST /api/save -> save a quote and get a share link
- GET  /api/share/<slug> -> fetch a saved quote
- GET  /api/health -> health check

Without OPENAI_API_KEY every generated quote is the demo quote.
"""

import structlog

from config.settings import settings
from main import create_app
from utils.logging_config import configure_logging

configure_logging(settings.log_level)
settings.validate()

logger = structlog.get_logger()

app = create_app()


def main():
    port = settings.port
    host = '0.0.0.0' if settings.is_production else '127.0.0.1'
    address = f"{host}:{port}"
    mode = "live AI quotes" if settings.openai_api_key else "demo quotes (no OPENAI_API_KEY)"
    print(f"""
╔════════════════════════════════════════════════════════════════╗
║  TradieQuote - Local Development Server                        ║
╠════════════════════════════════════════════════════════════════╣
║                                                                ║
║  Server running on: http://{address:<36}║
║                                                                ║
║  Endpoints:                                                    ║
║  • POST /api/generate                                          ║
║  • POST /api/save                                              ║
║  • GET  /api/share/<slug>                                      ║
║  • GET  /api/health                                            ║
║                                                                ║
╚════════════════════════════════════════════════════════════════╝
""")
    logger.info("server_starting", host=host, port=port, mode=mode, environment=settings.environment)
    app.run(host=host, port=port, debug=not settings.is_production, threaded=True)


if __name__ == '__main__':
    main()
