import uvicorn

from whoishiring.core.config import get_settings


def main() -> None:
    settings = get_settings()
    # The app runs the startup sync in its lifespan before accepting requests.
    uvicorn.run("whoishiring.main:app", host=settings.host, port=settings.port)


if __name__ == "__main__":
    main()
