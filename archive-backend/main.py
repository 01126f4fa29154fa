"""
The Archive of Collapse: web backend.

Serves the case file page and streams generated narratives to it.

Run:
  python main.py --host 127.0.0.1 --port 8000
"""
import argparse
import json
import logging
from typing import Optional

from fastapi import Depends, FastAPI, HTTPException, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import HTMLResponse, StreamingResponse

from archive_client import ArchiveClient
from case_state import CaseFile, CaseRegistry
from errors import ArchiveUnavailable, GenerationInProgress, IncompleteCase
from page import ARCHIVE_HTML
from schemas import (
    CATALYST_OPTIONS,
    DEFAULT_LOCATION,
    LANGUAGES,
    CaseParameters,
    CaseResponse,
    FieldUpdate,
    OptionsResponse,
)
from prompts import SECTION_MARKER
from sections import PLACEHOLDER, SECTION_TITLES, render_story
from settings import Settings, settings as default_settings

VERSION = "1.0.0"
SESSION_COOKIE = "archive_session"

logger = logging.getLogger(__name__)


def _sse(payload: dict) -> str:
    return f"data: {json.dumps(payload)}\n\n"


def _fragment_event(fragment: str, case: CaseFile) -> str:
    return _sse({"type": "fragment", "text": fragment, "status": case.status.value})


def _story_event(kind: str, case: CaseFile) -> str:
    story = render_story(case.story, case.status)
    return _sse({"type": kind, "story": story.model_dump(mode="json")})


def create_app(settings: Optional[Settings] = None, archive: Optional[ArchiveClient] = None) -> FastAPI:
    settings = settings or default_settings
    logging.basicConfig(
        level=getattr(logging, settings.LOG_LEVEL.upper(), logging.INFO),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    if archive is None:
        archive = ArchiveClient(
            api_key=settings.GROQ_API_KEY,
            base_url=settings.ARCHIVE_BASE_URL,
            model=settings.ARCHIVE_MODEL,
            temperature=settings.ARCHIVE_TEMPERATURE,
            top_p=settings.ARCHIVE_TOP_P,
            max_output_tokens=settings.ARCHIVE_MAX_OUTPUT_TOKENS,
        )
    registry = CaseRegistry(max_cases=settings.MAX_SESSIONS)

    app = FastAPI(title="The Archive of Collapse", version=VERSION)
    app.state.archive = archive
    app.state.registry = registry

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.CORS_ORIGINS,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    @app.middleware("http")
    async def session_middleware(request: Request, call_next):
        session_id = request.cookies.get(SESSION_COOKIE)
        # Loading the page starts a new case file; state never survives a reload.
        page_load = request.method == "GET" and request.url.path == "/"
        if page_load:
            registry.discard(session_id)
        is_new = page_load or session_id not in registry
        if is_new:
            session_id = registry.issue()
        request.state.session_id = session_id
        request.state.case = registry.get(session_id)
        response = await call_next(request)
        if is_new:
            response.set_cookie(SESSION_COOKIE, session_id, httponly=True, samesite="lax")
        return response

    def current_case(request: Request) -> CaseFile:
        return request.state.case

    @app.get("/", response_class=HTMLResponse)
    async def index():
        return ARCHIVE_HTML

    @app.get("/health")
    async def health():
        return {"status": "ok", "version": VERSION}

    @app.get("/api/options", response_model=OptionsResponse)
    async def options():
        return OptionsResponse(
            location=DEFAULT_LOCATION,
            languages=LANGUAGES,
            catalysts=CATALYST_OPTIONS,
            section_marker=SECTION_MARKER,
            section_titles=SECTION_TITLES,
            placeholder=PLACEHOLDER,
        )

    @app.get("/api/case", response_model=CaseResponse)
    async def get_case(case: CaseFile = Depends(current_case)):
        return CaseResponse(parameters=case.params, story=render_story(case.story, case.status))

    @app.patch("/api/case", response_model=CaseParameters)
    async def update_case(update: FieldUpdate, case: CaseFile = Depends(current_case)):
        try:
            return case.update(update.field, update.value)
        except ValueError as e:
            raise HTTPException(status_code=422, detail=str(e))

    @app.post("/api/case/randomize", response_model=CaseParameters)
    async def randomize_case(case: CaseFile = Depends(current_case)):
        return case.randomize_catalyst()

    @app.post("/api/case/generate")
    async def generate_case(case: CaseFile = Depends(current_case)):
        try:
            params = case.begin()
        except IncompleteCase as e:
            raise HTTPException(status_code=422, detail={"missing": e.missing})
        except GenerationInProgress as e:
            raise HTTPException(status_code=409, detail=str(e))

        async def event_stream():
            fragments = 0
            try:
                async for fragment in archive.generate(params):
                    fragments += 1
                    case.append(fragment)
                    yield _fragment_event(fragment, case)
                case.finish()
                logger.info("Case file compiled: %d fragments, %d chars", fragments, len(case.story))
                yield _story_event("done", case)
            except ArchiveUnavailable as e:
                logger.error("Archive unavailable after %d fragments: %s", fragments, e)
                case.fail()
                yield _story_event("error", case)
            except Exception:
                logger.exception("Generation failed after %d fragments", fragments)
                case.fail()
                yield _story_event("error", case)
            finally:
                # A dropped connection must not leave the case locked.
                if case.is_streaming:
                    case.finish()

        return StreamingResponse(event_stream(), media_type="text/event-stream")

    return app


app = create_app()


def main() -> None:  # pragma: no cover
    ap = argparse.ArgumentParser(description="The Archive of Collapse (FastAPI)")
    ap.add_argument("--host", default=default_settings.HOST)
    ap.add_argument("--port", type=int, default=default_settings.PORT)
    args = ap.parse_args()

    import uvicorn

    uvicorn.run(app, host=args.host, port=args.port)


if __name__ == "__main__":
    main()
