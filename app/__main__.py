import uvicorn

from app.core.config import settings


def main() -> None:
	uvicorn.run(
		"app.main:app",
		host=settings.host,
		port=settings.port,
		reload=settings.reload,
	)


if __name__ == "__main__":
	main()
