from __future__ import annotations
import uvicorn
from specforge.infrastructure.config import get_settings
from specforge.infrastructure.logging_setup import configure_logging

def main() -> None:
    """Configure logging and start the uvicorn ASGI server."""
    settings = get_settings()
    configure_logging(settings)
    uvicorn.run(
        "specforge.interface.app:create_app",
        factory=True,
        host=settings.host,
        port=settings.port,
        log_level=settings.log_level.lower(),
    )


if __name__ == "__main__":
    main()
