import uvicorn

from worktime.config import get_settings


def main() -> None:
    settings = get_settings()
    uvicorn.run(
        "worktime.api:create_app",
        factory=True,
        host=settings.HOST,
        port=settings.PORT,
    )


if __name__ == "__main__":
    main()
