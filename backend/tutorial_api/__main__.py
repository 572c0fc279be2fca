"""Run the API with uvicorn on the configured host and port: `python -m tutorial_api`."""

import uvicorn

from tutorial_api.config import settings


def main() -> None:
    uvicorn.run(
        "tutorial_api.main:app",
        host=settings.host,
        port=settings.port,
        log_level=settings.log_level.lower(),
    )


if __name__ == "__main__":
    main()
