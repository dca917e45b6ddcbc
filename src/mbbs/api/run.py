"""Console entry point (``mbbs-api``) serving the forum API with uvicorn."""
import argparse

import uvicorn

from mbbs.core.config import get_settings


def main(argv=None):  # pragma: no cover
    settings = get_settings()
    parser = argparse.ArgumentParser(prog="mbbs-api", description="Run the mbbs forum API")
    parser.add_argument("--host", default=settings.api_host)
    parser.add_argument("--port", type=int, default=settings.api_port)
    parser.add_argument("--reload", action="store_true", help="restart on source changes (development)")
    args = parser.parse_args(argv)
    uvicorn.run(
        "mbbs.api.main:app",
        host=args.host,
        port=args.port,
        log_level=settings.log_level.lower(),
        # the app installs its own JSON handler
        log_config=None,
        reload=args.reload,
    )


if __name__ == "__main__":  # pragma: no cover
    main()
