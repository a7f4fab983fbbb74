#!/usr/bin/env python3
"""Serve the gym backend with uvicorn; PORT and HOST come from the environment."""
import os

import uvicorn

from gym_backend.config import settings


def main():
    uvicorn.run(
        "gym_backend.main:app",
        host=os.environ.get("HOST", "0.0.0.0"),
        port=int(os.environ.get("PORT", "8000")),
        log_config=None,
        log_level=settings.LOG_LEVEL.lower(),
    )


if __name__ == "__main__":
    main()
