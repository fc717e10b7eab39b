"""Run the reports API with uvicorn: python -m jobtracker.web"""

import uvicorn

from jobtracker.core.config import settings


def start_server():
    print("--- JOB TRACKER REPORTS API ---")
    print(f"[INFO] Docs available at: http://{settings.api_host}:{settings.api_port}/docs")
    print(f"[INFO] Share links point at: {settings.public_base_url}")

    uvicorn.run(
        "jobtracker.web.app:app",
        host=settings.api_host,
        port=settings.api_port,
        log_level=settings.log_level.lower(),
    )


if __name__ == "__main__":
    start_server()
