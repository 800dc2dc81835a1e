import logging
from typing import List

from fastapi import (
    Body,
    Depends,
    FastAPI,
    Path,
    Query,
    Request,
    Response,
)
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from fastapi.encoders import jsonable_encoder
from sqlalchemy.orm import Session

from .. import db
from ..middleware import OwnerIdentityMiddleware
from ..utils.settings import (
    MERITJOURNAL_AUTH_DISABLED,
    MERITJOURNAL_DEFAULT_USER_ID,
    MERITJOURNAL_JWT_ALGORITHMS,
    MERITJOURNAL_JWT_AUDIENCE,
    MERITJOURNAL_JWT_SECRET,
)
from ..version import MERITJOURNAL_VERSION
from . import handlers
from .data import JournalEntryContent, JournalEntryResponse, TagUsage
from .repositories import UnitOfWork

SUBMODULE_NAME = "journal-entries"

logger = logging.getLogger(__name__)

tags_metadata = [
    {"name": "entries", "description": "Operations with journal entries."},
    {"name": "images", "description": "Images attached to journal entries."},
    {"name": "tags", "description": "Tags of the user."},
]

app = FastAPI(
    title=f"Merit Journal {SUBMODULE_NAME} submodule",
    description="Endpoints to work with journal entries, their tags and images.",
    version=MERITJOURNAL_VERSION,
    openapi_tags=tags_metadata,
    openapi_url=None,
    docs_url=None,
    redoc_url=None,
)

app.add_middleware(
    OwnerIdentityMiddleware,
    jwt_secret=MERITJOURNAL_JWT_SECRET,
    jwt_algorithms=MERITJOURNAL_JWT_ALGORITHMS,
    jwt_audience=MERITJOURNAL_JWT_AUDIENCE,
    auth_disabled=MERITJOURNAL_AUTH_DISABLED,
    default_user_id=MERITJOURNAL_DEFAULT_USER_ID,
)


@app.exception_handler(RequestValidationError)
async def validation_exception_handler(
    request: Request, exc: RequestValidationError
) -> JSONResponse:
    logger.info(f"Invalid request to {request.url.path}: {exc.errors()}")
    return JSONResponse(
        status_code=400, content=jsonable_encoder({"detail": exc.errors()})
    )


def yield_unit_of_work(
    db_session: Session = Depends(db.yield_connection_from_env),
) -> UnitOfWork:
    return UnitOfWork(db_session)


@app.get("/", tags=["entries"], response_model=List[JournalEntryResponse])
async def get_entries(
    request: Request,
    tag: str = Query(None),
    unit_of_work: UnitOfWork = Depends(yield_unit_of_work),
) -> List[JournalEntryResponse]:
    """
    List all entries of the user, latest entry date first.
    """
    return await handlers.get_entries_handler(unit_of_work, request, tag=tag)


@app.get("/search", tags=["entries"], response_model=List[JournalEntryResponse])
async def search_entries(
    request: Request,
    tag: str = Query(...),
    unit_of_work: UnitOfWork = Depends(yield_unit_of_work),
) -> List[JournalEntryResponse]:
    """
    List entries of the user carrying exactly the given tag.
    """
    return await handlers.get_entries_handler(unit_of_work, request, tag=tag)


@app.get("/tags", tags=["tags"], response_model=List[TagUsage])
async def get_tags(
    request: Request,
    unit_of_work: UnitOfWork = Depends(yield_unit_of_work),
) -> List[TagUsage]:
    """
    List tags of the user with the number of entries using each of them.
    """
    return await handlers.get_tags_handler(unit_of_work, request)


@app.post(
    "/",
    tags=["entries"],
    status_code=201,
    response_model=JournalEntryResponse,
)
async def create_journal_entry(
    request: Request,
    response: Response,
    create_request: JournalEntryContent = Body(...),
    unit_of_work: UnitOfWork = Depends(yield_unit_of_work),
) -> JournalEntryResponse:
    """
    Creates a journal entry.
    """
    result = await handlers.create_journal_entry_handler(
        unit_of_work, request, create_request
    )
    response.headers["Location"] = f"{str(request.url).rstrip('/')}/{result.id}"

    return result


@app.get("/{entry_id}", tags=["entries"], response_model=JournalEntryResponse)
async def get_entry(
    request: Request,
    entry_id: int = Path(...),
    unit_of_work: UnitOfWork = Depends(yield_unit_of_work),
) -> JournalEntryResponse:
    """
    Gets a single journal entry.
    """
    return await handlers.get_entry_handler(unit_of_work, request, entry_id)


@app.put("/{entry_id}", tags=["entries"], response_model=JournalEntryResponse)
async def update_entry(
    request: Request,
    entry_id: int = Path(...),
    update_request: JournalEntryContent = Body(...),
    unit_of_work: UnitOfWork = Depends(yield_unit_of_work),
) -> JournalEntryResponse:
    """
    Overrides title, content and entry date of a journal entry.

    Tags and images are reconciled only if present in the body: an empty list removes
    all of them, an absent field keeps them as they are.
    """
    return await handlers.update_entry_handler(
        unit_of_work, request, entry_id, update_request
    )


@app.delete(
    "/{entry_id}", tags=["entries"], status_code=204, response_class=Response
)
async def delete_entry(
    request: Request,
    entry_id: int = Path(...),
    unit_of_work: UnitOfWork = Depends(yield_unit_of_work),
) -> Response:
    """
    Deletes journal entry with its images.
    """
    await handlers.delete_entry_handler(unit_of_work, request, entry_id)

    return Response(status_code=204)


@app.get("/{entry_id}/images/{image_id}", tags=["images"], response_class=Response)
async def get_entry_image(
    request: Request,
    entry_id: int = Path(...),
    image_id: int = Path(...),
    unit_of_work: UnitOfWork = Depends(yield_unit_of_work),
) -> Response:
    """
    Returns the binary content of an entry image.
    """
    image = await handlers.get_entry_image_handler(
        unit_of_work, request, entry_id, image_id
    )
    return Response(
        content=image.image_data,
        media_type=image.content_type or "application/octet-stream",
    )
