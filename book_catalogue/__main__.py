"""Entry point for running the application as a module."""

import uvicorn

from .config import get_settings


def main() -> None:
    """Run the application server."""
    settings = get_settings()
    uvicorn.run(
        "book_catalogue.main:app",
        host=settings.api_host,
        port=settings.api_port,
        reload=settings.debug,
        log_level=settings.log_level.lower(),
    )


if __name__ == "__main__":
    main()
