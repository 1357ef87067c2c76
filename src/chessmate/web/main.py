import logging
from pathlib import Path
from typing import List, Optional

from fastapi import Depends, FastAPI, File, Query, Request, UploadFile
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from fastapi.staticfiles import StaticFiles
from sqlalchemy.orm import Session
from starlette.middleware.sessions import SessionMiddleware

from chessmate.config import settings
from chessmate.db.session import get_db
from chessmate.exceptions import ChessmateError, UnauthorizedError, ValidationError
from chessmate.results.service import ResultService
from chessmate.results.standings import TIEBREAK_KEYS
from chessmate.services.blog import create_post, get_post_by_slug, list_posts
from chessmate.services.descriptions import (
    DescriptionGenerator,
    TournamentDescriptionInput,
    get_description_generator,
)
from chessmate.services.registrations import (
    create_registration,
    delete_registration,
    list_registrations_for_tournament,
    update_registration,
)
from chessmate.services.tournaments import (
    create_tournament,
    delete_tournament,
    get_tournament,
    list_tournaments,
    update_tournament,
)
from chessmate.services.uploads import read_limited, save_upload
from chessmate.web import auth
from chessmate.web.schemas import (
    BlogPostCreate,
    BlogPostResponse,
    DescriptionResponse,
    LoginRequest,
    MessageResponse,
    RegistrationCreate,
    RegistrationResponse,
    RegistrationUpdate,
    RoundScoreUpdate,
    SessionResponse,
    StandingResponse,
    TournamentCreate,
    TournamentResponse,
    TournamentResultIn,
    TournamentResultResponse,
    TournamentUpdate,
    UploadResponse,
)

logger = logging.getLogger(__name__)

app = FastAPI(title="Chessmate Central")
app.add_middleware(
    SessionMiddleware,
    secret_key=settings.session_secret,
    max_age=settings.session_max_age_seconds,
)

# Uploaded images; missing files are plain 404s
Path(settings.upload_dir).mkdir(parents=True, exist_ok=True)
app.mount(
    settings.upload_url_prefix,
    StaticFiles(directory=settings.upload_dir),
    name="uploads",
)

organizer_only = [Depends(auth.require_organizer)]


@app.exception_handler(ChessmateError)
async def chessmate_error_handler(request: Request, exc: ChessmateError):
    """Render service errors as {"message": ...} with the error's status code."""
    if exc.status_code >= 500:
        logger.error("%s %s failed: %s", request.method, request.url.path, exc.message)
    else:
        logger.warning("%s %s rejected (%d): %s", request.method, request.url.path, exc.status_code, exc.message)
    return JSONResponse(status_code=exc.status_code, content={"message": exc.message})


@app.exception_handler(RequestValidationError)
async def request_validation_handler(request: Request, exc: RequestValidationError):
    """Schema violations are client errors like any other ValidationError."""
    problems = []
    for error in exc.errors():
        location = ".".join(str(part) for part in error.get("loc", ()) if part != "body")
        problems.append(f"{location}: {error.get('msg')}" if location else str(error.get("msg")))
    return JSONResponse(status_code=400, content={"message": "; ".join(problems)})


@app.get("/api/health")
async def health():
    return {"status": "ok"}


# =============================================================================
# Results
# =============================================================================

@app.get("/api/results/{tournament_id}", response_model=TournamentResultResponse)
async def get_results(tournament_id: str, db: Session = Depends(get_db)):
    """Stored results; an empty document when nothing has been saved yet."""
    result = ResultService(db).get_result(tournament_id)
    return TournamentResultResponse.from_result(result)


@app.post(
    "/api/results/{tournament_id}",
    response_model=TournamentResultResponse,
    dependencies=organizer_only,
)
async def save_results(
    tournament_id: str,
    payload: TournamentResultIn,
    db: Session = Depends(get_db),
):
    """Replace the whole results document; totals are recomputed."""
    if payload.tournament_id != tournament_id:
        raise ValidationError("Tournament ID mismatch between URL and body.")

    result = ResultService(db).save_result(
        tournament_id,
        [ps.to_player_score() for ps in payload.player_scores],
        expected_version=payload.version,
    )
    return TournamentResultResponse.from_result(result)


@app.post(
    "/api/results/{tournament_id}/reconcile",
    response_model=TournamentResultResponse,
    dependencies=organizer_only,
)
async def reconcile_results(tournament_id: str, db: Session = Depends(get_db)):
    """Sync the results roster and round count with the tournament."""
    result = ResultService(db).reconcile_tournament(tournament_id)
    return TournamentResultResponse.from_result(result)


@app.put(
    "/api/results/{tournament_id}/players/{player_id}/rounds/{round_index}",
    response_model=TournamentResultResponse,
    dependencies=organizer_only,
)
async def set_round_score(
    tournament_id: str,
    player_id: str,
    round_index: int,
    payload: RoundScoreUpdate,
    db: Session = Depends(get_db),
):
    result = ResultService(db).set_round_score(tournament_id, player_id, round_index, payload.score)
    return TournamentResultResponse.from_result(result)


@app.get("/api/results/{tournament_id}/standings", response_model=List[StandingResponse])
async def get_standings(
    tournament_id: str,
    db: Session = Depends(get_db),
    tiebreak: Optional[str] = Query(
        None,
        pattern=f"^({'|'.join(TIEBREAK_KEYS)})$",
        description="Order for equal totals: name or rating (default from settings)",
    ),
):
    standings = ResultService(db).standings(tournament_id, tiebreak)
    return [StandingResponse.from_standing(s) for s in standings]


# =============================================================================
# Tournaments
# =============================================================================

@app.get("/api/tournaments", response_model=List[TournamentResponse])
async def api_tournaments(
    db: Session = Depends(get_db),
    status: Optional[str] = Query(None, description="Comma-separated statuses (default: all)"),
):
    raw_statuses = status.split(",") if status else None
    return list_tournaments(db, raw_statuses)


@app.get("/api/tournaments/{tournament_id}", response_model=TournamentResponse)
async def api_tournament(tournament_id: str, db: Session = Depends(get_db)):
    return get_tournament(db, tournament_id)


@app.post(
    "/api/tournaments",
    response_model=TournamentResponse,
    status_code=201,
    dependencies=organizer_only,
)
async def api_create_tournament(payload: TournamentCreate, db: Session = Depends(get_db)):
    return create_tournament(db, payload.model_dump())


@app.put(
    "/api/tournaments/{tournament_id}",
    response_model=TournamentResponse,
    dependencies=organizer_only,
)
async def api_update_tournament(
    tournament_id: str,
    payload: TournamentUpdate,
    db: Session = Depends(get_db),
):
    return update_tournament(db, tournament_id, payload.model_dump(exclude_unset=True, exclude_none=True))


@app.delete(
    "/api/tournaments/{tournament_id}",
    response_model=MessageResponse,
    dependencies=organizer_only,
)
async def api_delete_tournament(tournament_id: str, db: Session = Depends(get_db)):
    delete_tournament(db, tournament_id)
    return MessageResponse(message="Tournament deleted successfully")


# =============================================================================
# Registrations
# =============================================================================

@app.post("/api/registrations", response_model=RegistrationResponse, status_code=201)
async def api_create_registration(payload: RegistrationCreate, db: Session = Depends(get_db)):
    """Public sign-up; the tournament must be Upcoming or Active."""
    return create_registration(db, payload.model_dump())


@app.get(
    "/api/registrations/by-tournament/{tournament_id}",
    response_model=List[RegistrationResponse],
)
async def api_registrations_for_tournament(tournament_id: str, db: Session = Depends(get_db)):
    return list_registrations_for_tournament(db, tournament_id)


@app.put(
    "/api/registrations/{registration_id}",
    response_model=RegistrationResponse,
    dependencies=organizer_only,
)
async def api_update_registration(
    registration_id: str,
    payload: RegistrationUpdate,
    db: Session = Depends(get_db),
):
    return update_registration(db, registration_id, payload.model_dump(exclude_unset=True))


@app.delete(
    "/api/registrations/{registration_id}",
    response_model=MessageResponse,
    dependencies=organizer_only,
)
async def api_delete_registration(registration_id: str, db: Session = Depends(get_db)):
    delete_registration(db, registration_id)
    return MessageResponse(message="Registration deleted successfully")


# =============================================================================
# Blog
# =============================================================================

@app.get("/api/blog/posts", response_model=List[BlogPostResponse])
async def api_blog_posts(db: Session = Depends(get_db)):
    return list_posts(db)


@app.get("/api/blog/posts/{slug}", response_model=BlogPostResponse)
async def api_blog_post(slug: str, db: Session = Depends(get_db)):
    return get_post_by_slug(db, slug)


@app.post(
    "/api/blog/posts",
    response_model=BlogPostResponse,
    status_code=201,
    dependencies=organizer_only,
)
async def api_create_blog_post(payload: BlogPostCreate, db: Session = Depends(get_db)):
    return create_post(db, payload.model_dump())


# =============================================================================
# Uploads & AI descriptions
# =============================================================================

@app.post("/api/upload", response_model=UploadResponse, dependencies=organizer_only)
async def api_upload(file: Optional[UploadFile] = File(None)):
    content = await read_limited(file, settings.upload_max_bytes) if file is not None else b""
    try:
        url = save_upload(
            file.filename if file is not None else None,
            content,
            upload_dir=Path(settings.upload_dir),
            url_prefix=settings.upload_url_prefix,
            max_bytes=settings.upload_max_bytes,
        )
    except ValidationError as exc:
        # Upload form expects the success flag even on failure
        return JSONResponse(status_code=400, content={"success": False, "message": exc.message})
    return UploadResponse(success=True, url=url)


@app.post(
    "/api/ai/tournament-description",
    response_model=DescriptionResponse,
    dependencies=organizer_only,
)
async def api_tournament_description(
    payload: TournamentDescriptionInput,
    generator: DescriptionGenerator = Depends(get_description_generator),
):
    return DescriptionResponse(description=generator.generate(payload))


# =============================================================================
# Organizer session
# =============================================================================

@app.post("/api/auth/login", response_model=SessionResponse)
async def api_login(request: Request, payload: Optional[LoginRequest] = None):
    if not auth.login(request, payload.password if payload else None):
        raise UnauthorizedError("Invalid organizer password")
    return SessionResponse(is_logged_in=True)


@app.post("/api/auth/logout", response_model=SessionResponse)
async def api_logout(request: Request):
    auth.logout(request)
    return SessionResponse(is_logged_in=False)


@app.get("/api/auth/session", response_model=SessionResponse)
async def api_session(request: Request):
    return SessionResponse(is_logged_in=auth.is_logged_in(request))


# Only for debugging
if __name__ == "__main__":
    import uvicorn
    uvicorn.run("chessmate.web.main:app", host=settings.api_host, port=settings.api_port, reload=True)
