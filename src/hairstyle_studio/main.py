"""Command-line entrypoint that serves the API with uvicorn."""

import os

import uvicorn


def main() -> None:
    """Run the API server."""
    uvicorn.run(
        "hairstyle_studio.api.asgi:app",
        host=os.getenv("HOST", "0.0.0.0"),  # noqa: S104
        port=int(os.getenv("PORT", "3000")),
    )


if __name__ == "__main__":
    main()
