"""
Journal entry related data structures
"""
from datetime import datetime
from enum import Enum
from typing import Any, List, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel


class ListUpdateActions(Enum):
    unset = "unset"
    clear = "clear"
    replace = "replace"


class ListUpdate(BaseModel):
    """
    Requested change of a collection attached to an entry.

    unset - field was not provided, the collection stays as it is
    clear - field was provided as an empty list, the collection is emptied
    replace - field was provided with items, the collection is reconciled against them
    """

    action: ListUpdateActions = ListUpdateActions.unset
    items: List[Any] = Field(default_factory=list)

    @classmethod
    def from_field(cls, request: BaseModel, field_name: str) -> "ListUpdate":
        """
        Explicit JSON null is treated the same way as an absent field.
        """
        value = getattr(request, field_name, None)
        if field_name not in request.model_fields_set or value is None:
            return cls(action=ListUpdateActions.unset)
        if len(value) == 0:
            return cls(action=ListUpdateActions.clear)
        return cls(action=ListUpdateActions.replace, items=list(value))


class CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class JournalImageContent(CamelModel):
    id: Optional[int] = None
    image_data_base64: str = ""
    content_type: str = ""
    caption: Optional[str] = None


class JournalEntryContent(CamelModel):
    title: str
    content: str
    entry_date: datetime
    images: Optional[List[JournalImageContent]] = None
    tags: Optional[List[Optional[str]]] = None

    @field_validator("title")
    @classmethod
    def title_not_blank(cls, value: str) -> str:
        if value.strip() == "":
            raise ValueError("title must not be blank")
        return value


class CreateJournalEntryRequest(BaseModel):
    user_id: str
    title: str
    content: str
    entry_date: datetime
    tags: ListUpdate = Field(default_factory=ListUpdate)
    images: ListUpdate = Field(default_factory=ListUpdate)


class UpdateJournalEntryRequest(CreateJournalEntryRequest):
    pass


class JournalImageResponse(CamelModel):
    id: int
    image_data_base64: str
    content_type: str
    caption: Optional[str] = None
    journal_entry_id: int


class JournalEntryResponse(CamelModel):
    id: int
    title: str
    content: str
    created_at: datetime
    modified_at: Optional[datetime] = None
    entry_date: datetime
    tags: List[str] = Field(default_factory=list)
    images: List[JournalImageResponse] = Field(default_factory=list)


class TagUsage(CamelModel):
    id: int
    name: str
    entries_count: int
