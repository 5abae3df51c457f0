"""
Entry point: `uvicorn run:app --reload`, or `python run.py`.
"""

from officedesk.app import app
from officedesk.config import settings

if __name__ == "__main__":
    import uvicorn

    uvicorn.run("run:app", host="0.0.0.0", port=8000, reload=settings.debug)
