"""HTTP surface: calendar export, schedule generation and rendering."""

from typing import Optional

from fastapi import Depends, FastAPI, Query, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse, Response
from pydantic import BaseModel

from interpreter import ScheduleInterpreter, render_html
from services.ai_client import ScheduleGenerator, ScheduleRequest
from services.calendar_export import CalendarExportService
from services.config import Settings
from services.errors import StudyRoomError
from services.logging_handler import setup_logger
from services.store import PostgrestStore, RecordStore

logger = setup_logger(__name__)

CORS_HEADERS = {
    "Access-Control-Allow-Origin": "*",
    "Access-Control-Allow-Headers": "authorization, x-client-info, apikey, content-type",
}


class RenderRequest(BaseModel):
    schedule: str


def get_settings() -> Settings:
    return Settings.from_env()


def get_store(settings: Settings = Depends(get_settings)) -> RecordStore:
    url, key = settings.require_store_credentials()
    return PostgrestStore(url, key)


def get_generator(settings: Settings = Depends(get_settings)) -> ScheduleGenerator:
    return ScheduleGenerator(
        settings.require_ai_key(),
        endpoint=settings.ai_endpoint,
        model=settings.ai_model,
    )


def _error_response(message: str, status_code: int) -> JSONResponse:
    return JSONResponse({"error": message}, status_code=status_code, headers=CORS_HEADERS)


def create_app() -> FastAPI:
    """Build the application. Collaborators come from the dependencies above."""
    app = FastAPI(title="StudyRoom")

    @app.middleware("http")
    async def add_cors_headers(request: Request, call_next):
        response = await call_next(request)
        response.headers.update(CORS_HEADERS)
        return response

    @app.exception_handler(StudyRoomError)
    async def handle_studyroom_error(request: Request, exc: StudyRoomError) -> JSONResponse:
        logger.error("%s %s failed: %s", request.method, request.url.path, exc.message)
        return _error_response(exc.message, exc.status_code)

    @app.exception_handler(RequestValidationError)
    async def handle_validation_error(request: Request, exc: RequestValidationError) -> JSONResponse:
        errors = exc.errors()
        if not errors:
            return _error_response("Invalid request", 500)
        first = errors[0]
        field = ".".join(part for part in first.get("loc", ()) if isinstance(part, str) and part != "body")
        message = f"{field}: {first.get('msg')}" if field else str(first.get("msg"))
        logger.error("%s %s rejected: %s", request.method, request.url.path, message)
        return _error_response(message, 500)

    # ServerErrorMiddleware re-raises after this response, so the server logs the traceback.
    @app.exception_handler(Exception)
    async def handle_unexpected_error(request: Request, exc: Exception) -> JSONResponse:
        return _error_response(str(exc) or "Unknown error", 500)

    @app.options("/{path:path}")
    async def preflight(path: str) -> Response:
        return Response(status_code=200)

    @app.get("/generate-calendar")
    def generate_calendar(
        schedule_id: Optional[str] = Query(None, alias="scheduleId"),
        store: RecordStore = Depends(get_store),
    ) -> Response:
        ics = CalendarExportService(store).export(schedule_id or "")
        return Response(
            content=ics,
            media_type="text/calendar; charset=utf-8",
            headers={"Content-Disposition": 'inline; filename="study-schedule.ics"'},
        )

    @app.post("/generate-schedule")
    def generate_schedule(
        request: ScheduleRequest,
        generator: ScheduleGenerator = Depends(get_generator),
    ) -> dict[str, str]:
        return {"schedule": generator.generate(request)}

    @app.post("/render-schedule")
    def render_schedule(request: RenderRequest) -> dict:
        segments = ScheduleInterpreter().parse(request.schedule)
        return {
            "segments": [segment.to_dict() for segment in segments],
            "html": render_html(segments),
        }

    return app
