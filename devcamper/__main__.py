"""Run the API with uvicorn: ``python -m devcamper``."""

import uvicorn

from devcamper.config import get_settings


def main() -> None:
    settings = get_settings()
    uvicorn.run(
        "devcamper.main:app",
        host="0.0.0.0",
        port=settings.port,
        reload=settings.environment == "development",
    )


if __name__ == "__main__":
    main()
