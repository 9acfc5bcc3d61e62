# main.py

from uvicorn import run

from postdesk.configs import settings


def main() -> None:
    run(
        "postdesk.main:app",
        host="127.0.0.1",
        port=8000,
        reload=settings.ENVIRONMENT == "development",
        log_level=settings.LOG_LEVEL.lower(),
    )


if __name__ == "__main__":
    main()
