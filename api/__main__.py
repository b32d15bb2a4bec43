"""Run the API with uvicorn: `python -m api`."""

import uvicorn

from api.core.config import get_settings


def main() -> None:
    settings = get_settings()
    uvicorn.run("api.app:app", host="0.0.0.0", port=settings.port, reload=settings.app_env == "dev")


if __name__ == "__main__":
    main()
