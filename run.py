import os

from pr_size_labeler.logger import get_logger


def main() -> None:
    logger = get_logger()
    host = os.getenv("HOST", "0.0.0.0")
    port = int(os.getenv("PORT", "8080"))

    logger.info(
        "Starting PR Size Labeler on {host}:{port}",
        host=host,
        port=port,
    )

    import uvicorn

    uvicorn.run(
        app="pr_size_labeler.main:app",
        host=host,
        port=port,
        workers=1,
        log_level="info",
    )


if __name__ == "__main__":
    main()
