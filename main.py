"""Entrypoint: ``uvicorn main:app`` or ``python main.py``."""

import os

from quiz_engine.main import app

if __name__ == "__main__":
    import uvicorn

    uvicorn.run(app, host="0.0.0.0", port=int(os.getenv("PORT", "8000")))
