import logging
from typing import List, Optional, Type

from fastapi import HTTPException, Request

from . import actions
from .data import (
    CreateJournalEntryRequest,
    JournalEntryContent,
    JournalEntryResponse,
    ListUpdate,
    TagUsage,
    UpdateJournalEntryRequest,
)
from .models import JournalImage
from .repositories import UnitOfWork

logger = logging.getLogger(__name__)


def _entry_request_from_content(
    request: Request,
    content: JournalEntryContent,
    request_type: Type[CreateJournalEntryRequest] = CreateJournalEntryRequest,
) -> CreateJournalEntryRequest:
    return request_type(
        user_id=request.state.user_id,
        title=content.title,
        content=content.content,
        entry_date=content.entry_date,
        tags=ListUpdate.from_field(content, "tags"),
        images=ListUpdate.from_field(content, "images"),
    )


async def get_entries_handler(
    unit_of_work: UnitOfWork,
    request: Request,
    tag: Optional[str] = None,
) -> List[JournalEntryResponse]:
    try:
        entries = await actions.get_journal_entries(
            unit_of_work, request.state.user_id, tag=tag
        )
    except Exception as e:
        logger.error(f"Error listing journal entries: {str(e)}")
        raise HTTPException(status_code=500)

    return entries


async def get_tags_handler(
    unit_of_work: UnitOfWork, request: Request
) -> List[TagUsage]:
    try:
        tags = await actions.get_tags(unit_of_work, request.state.user_id)
    except Exception as e:
        logger.error(f"Error listing tags: {str(e)}")
        raise HTTPException(status_code=500)

    return tags


async def get_entry_handler(
    unit_of_work: UnitOfWork,
    request: Request,
    entry_id: int,
) -> JournalEntryResponse:
    try:
        entry = await actions.get_journal_entry(
            unit_of_work, entry_id, request.state.user_id
        )
    except Exception as e:
        logger.error(f"Error retrieving journal entry: {str(e)}")
        raise HTTPException(status_code=500)

    if entry is None:
        logger.info(
            f"Entry not found with ID={entry_id} for user={request.state.user_id}"
        )
        raise HTTPException(status_code=404, detail="Entry not found")

    return entry


# create_journal_entry_handler operates for api endpoint:
# - create_journal_entry
async def create_journal_entry_handler(
    unit_of_work: UnitOfWork,
    request: Request,
    create_request: JournalEntryContent,
) -> JournalEntryResponse:
    creation_request = _entry_request_from_content(request, create_request)
    try:
        entry = await actions.create_journal_entry(unit_of_work, creation_request)
    except actions.InvalidEntryParameters as e:
        raise HTTPException(status_code=400, detail=str(e))
    except Exception as e:
        logger.error(f"Error creating journal entry: {str(e)}")
        raise HTTPException(status_code=500)

    return entry


# update_entry_handler operates for api endpoint:
# - update_entry
async def update_entry_handler(
    unit_of_work: UnitOfWork,
    request: Request,
    entry_id: int,
    update_request: JournalEntryContent,
) -> JournalEntryResponse:
    entry_request = _entry_request_from_content(
        request, update_request, request_type=UpdateJournalEntryRequest
    )
    try:
        entry = await actions.update_journal_entry(
            unit_of_work, entry_id, entry_request
        )
    except actions.EntryNotFound:
        logger.info(
            f"Entry not found with ID={entry_id} for user={request.state.user_id}"
        )
        raise HTTPException(status_code=404, detail="Entry not found")
    except actions.InvalidEntryParameters as e:
        raise HTTPException(status_code=400, detail=str(e))
    except Exception as e:
        logger.error(f"Error updating journal entry: {str(e)}")
        raise HTTPException(status_code=500)

    return entry


async def delete_entry_handler(
    unit_of_work: UnitOfWork,
    request: Request,
    entry_id: int,
) -> None:
    try:
        await actions.delete_journal_entry(
            unit_of_work, entry_id, request.state.user_id
        )
    except actions.EntryNotFound:
        logger.info(
            f"Entry not found with ID={entry_id} for user={request.state.user_id}"
        )
        raise HTTPException(status_code=404, detail="Entry not found")
    except Exception as e:
        logger.error(f"Error deleting journal entry: {str(e)}")
        raise HTTPException(status_code=500)


async def get_entry_image_handler(
    unit_of_work: UnitOfWork,
    request: Request,
    entry_id: int,
    image_id: int,
) -> JournalImage:
    try:
        image = await actions.get_journal_image(
            unit_of_work, entry_id, image_id, request.state.user_id
        )
    except Exception as e:
        logger.error(f"Error retrieving entry image: {str(e)}")
        raise HTTPException(status_code=500)

    if image is None:
        raise HTTPException(status_code=404, detail="Image not found")

    return image
