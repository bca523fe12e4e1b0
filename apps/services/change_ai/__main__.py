"""Run the service: python -m apps.services.change_ai"""

import uvicorn

from libs.core.config import get_settings


def main() -> None:
    settings = get_settings()
    uvicorn.run(
        "apps.services.change_ai.app:app",
        host=settings.host,
        port=settings.port,
        log_level=settings.log_level.lower(),
    )


if __name__ == "__main__":
    main()
