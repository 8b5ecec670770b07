"""Run the service with uvicorn: ``python -m shorturl``."""

import uvicorn

from shorturl.core.config import settings


def main() -> None:
    uvicorn.run(
        "shorturl.main:app",
        host=settings.HOST,
        port=settings.PORT,
        log_config=None,  # loguru owns logging, see shorturl.core.logging
    )


if __name__ == "__main__":
    main()
