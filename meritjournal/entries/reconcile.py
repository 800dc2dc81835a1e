"""
Reconciliation of the tag and image lists submitted with an entry against stored rows.

Functions here work inside a transaction already opened by the calling action and
never begin, commit or roll back themselves.
"""
import base64
import binascii
import logging
from typing import Dict, List, Optional, Sequence, Set, Tuple

from .data import JournalImageContent, ListUpdate, ListUpdateActions
from .models import JournalEntryTag, JournalImage, Tag
from .repositories import UnitOfWork

logger = logging.getLogger(__name__)


def normalize_tag_names(tag_names: Sequence[Optional[str]]) -> List[str]:
    """
    Trims names, drops blank ones and removes duplicates (case-sensitive),
    keeping the first occurrence order.
    """
    normalized: List[str] = []
    seen: Set[str] = set()
    for tag_name in tag_names:
        if tag_name is None:
            continue
        name = tag_name.strip()
        if not name or name in seen:
            continue
        seen.add(name)
        normalized.append(name)
    return normalized


def decode_image_data(image_data_base64: str) -> Optional[bytes]:
    """
    Decodes strict base64, optionally prefixed as a data URL. Returns None if the
    payload can not be decoded.
    """
    payload = image_data_base64.strip()
    if payload.startswith("data:") and "," in payload:
        payload = payload.split(",", 1)[1]
    try:
        return base64.b64decode(payload, validate=True)
    except (binascii.Error, ValueError):
        return None


async def reconcile_entry_tags(
    unit_of_work: UnitOfWork,
    journal_entry_id: int,
    user_id: str,
    tags_update: ListUpdate,
) -> Tuple[List[JournalEntryTag], List[Tag]]:
    """
    Brings the tag links of an entry in line with the requested tag names.

    Returns the links of the entry after reconciliation and the tags created for
    the user during this call.
    """
    current_links = unit_of_work.journal_entry_tags.list_for_entry(journal_entry_id)
    if tags_update.action == ListUpdateActions.unset:
        return current_links, []

    tag_names: List[str] = []
    if tags_update.action == ListUpdateActions.replace:
        tag_names = normalize_tag_names(tags_update.items)

    created_tags: List[Tag] = []
    requested_tags: Dict[str, Tag] = {}
    for tag_name in tag_names:
        tag = unit_of_work.tags.find_by_name(tag_name, user_id)
        if tag is None:
            tag = unit_of_work.tags.add(Tag(name=tag_name, user_id=user_id))
            # Links below reference the generated tag id
            unit_of_work.flush()
            created_tags.append(tag)
            logger.debug(f"Created tag {tag.id} ({tag_name}) for user {user_id}")
        requested_tags[tag_name] = tag

    requested_tag_ids = {tag.id for tag in requested_tags.values()}
    links: List[JournalEntryTag] = []
    linked_tag_ids: Set[int] = set()
    for link in current_links:
        if link.tag_id in requested_tag_ids:
            links.append(link)
            linked_tag_ids.add(link.tag_id)
        else:
            unit_of_work.journal_entry_tags.remove(link)

    for tag in requested_tags.values():
        if tag.id in linked_tag_ids:
            continue
        link = unit_of_work.journal_entry_tags.add(
            JournalEntryTag(journal_entry_id=journal_entry_id, tag_id=tag.id)
        )
        links.append(link)
        linked_tag_ids.add(tag.id)

    unit_of_work.flush()
    return links, created_tags


async def reconcile_entry_images(
    unit_of_work: UnitOfWork,
    journal_entry_id: int,
    images_update: ListUpdate,
) -> List[JournalImage]:
    """
    Brings the images of an entry in line with the requested image descriptors.

    Descriptors with a positive id update the existing image of this entry, the rest
    are added as new images. Stored images not referenced by id are removed.
    Payloads which can not be decoded are skipped without failing the whole call.
    An empty content type on an update keeps the stored one.
    """
    current_images = unit_of_work.journal_images.list_for_entry(journal_entry_id)
    if images_update.action == ListUpdateActions.unset:
        return current_images

    descriptors: List[JournalImageContent] = []
    if images_update.action == ListUpdateActions.replace:
        descriptors = list(images_update.items)

    update_descriptors = [
        descriptor
        for descriptor in descriptors
        if descriptor.id is not None and descriptor.id > 0
    ]
    add_descriptors = [
        descriptor
        for descriptor in descriptors
        if descriptor.id is None or descriptor.id <= 0
    ]
    requested_ids = {descriptor.id for descriptor in update_descriptors}

    images: List[JournalImage] = []
    images_by_id: Dict[int, JournalImage] = {}
    for image in current_images:
        if image.id in requested_ids:
            images.append(image)
            images_by_id[image.id] = image
        else:
            unit_of_work.journal_images.remove(image)

    for descriptor in update_descriptors:
        existing_image = images_by_id.get(descriptor.id)
        if existing_image is None:
            logger.warning(
                f"Image {descriptor.id} does not belong to entry {journal_entry_id}, skipping"
            )
            continue
        if descriptor.image_data_base64:
            image_data = decode_image_data(descriptor.image_data_base64)
            if image_data is None:
                logger.warning(
                    f"Invalid image data for image {descriptor.id} of entry {journal_entry_id}, keeping stored data"
                )
            else:
                existing_image.image_data = image_data
        if descriptor.content_type:
            existing_image.content_type = descriptor.content_type
        existing_image.caption = descriptor.caption

    for descriptor in add_descriptors:
        image_data = decode_image_data(descriptor.image_data_base64)
        if not image_data:
            logger.warning(
                f"Invalid or empty image data for new image of entry {journal_entry_id}, skipping"
            )
            continue
        image = unit_of_work.journal_images.add(
            JournalImage(
                image_data=image_data,
                content_type=descriptor.content_type,
                caption=descriptor.caption,
                journal_entry_id=journal_entry_id,
            )
        )
        images.append(image)

    unit_of_work.flush()
    return images
