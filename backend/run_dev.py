"""run_dev.py — Start the GoRest proxy in development mode.

Equivalent CLI command (run from backend/):
    uvicorn api.main:app --reload --host 127.0.0.1 --port 8000

The --reload flag watches for file changes and restarts automatically.
Set GOREST_TOKEN in the project-root .env before starting.
"""

import os

import uvicorn

if __name__ == "__main__":
    uvicorn.run(
        "api.main:app",
        host=os.getenv("HOST", "127.0.0.1"),
        port=int(os.getenv("PORT", "8000")),
        reload=True,
        log_level="debug",
    )
