import uvicorn

from clinic_insights.config import get_settings


def main() -> None:
    settings = get_settings()
    uvicorn.run("clinic_insights.main:app", host="0.0.0.0", port=settings.port)


if __name__ == "__main__":
    main()
