"""``user-service`` console script.

``user-service --server`` runs the API under uvicorn; every other
invocation is handed to the click management CLI.
"""

from __future__ import annotations

import sys


def serve() -> None:
    import uvicorn

    from user_service.core.settings import get_app_settings, get_logging_settings

    app_settings = get_app_settings()
    uvicorn.run(
        "user_service.app.main:create_app",
        factory=True,
        host=app_settings.host,
        port=app_settings.port,
        reload=app_settings.debug,
        access_log=app_settings.debug,
        log_level=get_logging_settings().level.lower(),
    )


def main() -> None:
    if "--server" in sys.argv[1:]:
        sys.argv.remove("--server")
        serve()
        return

    from user_service.cli.main import main as cli_main

    cli_main()


if __name__ == "__main__":
    main()
