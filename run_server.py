#!/usr/bin/env python3
"""Run the project management API server."""
import logging

from dotenv import load_dotenv
load_dotenv()

from projectboard.config import get_settings


def main():
    import uvicorn

    settings = get_settings()
    logging.basicConfig(
        level=settings.LOG_LEVEL.upper(),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    host, port = settings.APP_HOST, settings.PORT

    print(f"""
    ╔═══════════════════════════════════════════════════════╗
    ║           PROJECT MANAGEMENT API                      ║
    ╠═══════════════════════════════════════════════════════╣
    ║  URL: http://{host}:{port:<5}                            ║
    ║  API Docs: http://{host}:{port:<5}/docs                  ║
    ║  Hot Reload: {str(settings.SERVER_RELOAD):<5}                              ║
    ╠═══════════════════════════════════════════════════════╣
    ║  Endpoints: auth 5, projects 6, tasks 6,              ║
    ║             members 6, analytics 3, dashboard 3       ║
    ╚═══════════════════════════════════════════════════════╝
    """)

    uvicorn.run(
        "server.app:app",
        host=host,
        port=port,
        reload=settings.SERVER_RELOAD,
        log_level=settings.LOG_LEVEL.lower(),
    )


if __name__ == "__main__":
    main()
