import uvicorn

from summary_server.core.config import settings


def main() -> None:
    uvicorn.run(
        "summary_server.main:app",
        host=settings.HOST,
        port=settings.PORT,
        log_level=settings.LOG_LEVEL.lower(),
    )


if __name__ == "__main__":
    main()
