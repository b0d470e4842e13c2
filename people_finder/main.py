# Run from project root: uvicorn people_finder.main:app --reload

import logging

from fastapi import FastAPI

from people_finder.api.routes import router
from people_finder.core.session_store import SessionStore
from people_finder.services.search_engine import SearchEngine

logging.basicConfig(level=logging.INFO)


def create_app(engine: SearchEngine | None = None) -> FastAPI:
    """Build the app around one engine and one session store, both owned by app.state."""
    application = FastAPI(title="People Finder")
    application.state.engine = engine if engine is not None else SearchEngine()
    application.state.sessions = SessionStore()
    application.include_router(router)
    return application


app = create_app()
