"""
FastAPI application entrypoint.

Run locally:  uvicorn patient_api.main:app --reload
         or:  python -m patient_api.main
"""

import logging

import uvicorn

from patient_api.config import settings
from patient_api.factory import create_app

logging.basicConfig(level=settings.LOG_LEVEL, format="%(levelname)s | %(name)s | %(message)s")

app = create_app()


if __name__ == "__main__":
    uvicorn.run(app, host=settings.HOST, port=settings.PORT)
