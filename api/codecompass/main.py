"""
Application entry point.

This module serves as the main entry point for running the
CodeCompass search API server using uvicorn.
"""

import os

from uvicorn import run


def main():
    run(
        "codecompass.api.app:app",
        host=os.getenv("HOST", "localhost"),
        port=int(os.getenv("PORT", "8000")),
    )


if __name__ == "__main__":
    main()
