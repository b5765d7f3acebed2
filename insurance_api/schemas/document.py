"""Schemas for offer and policy documents."""

from dataclasses import dataclass
from datetime import datetime
from typing import Optional, Union

from pydantic import BaseModel, ConfigDict

from insurance_api.schemas.enums import DocumentStatus


@dataclass(frozen=True)
class PlainText:
    """An additional-info answer that is just text."""

    text: str


@dataclass(frozen=True)
class FileReference:
    """An additional-info answer pointing at an uploaded file."""

    label: str
    url: str


AdditionalInfoValue = Union[PlainText, FileReference]


class DocumentResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    category: str
    file_name: str
    file_url: str
    file_type: str
    file_size: int
    status: DocumentStatus
    customer_id: Optional[int] = None
    offer_id: Optional[int] = None
    policy_id: Optional[int] = None
    uploaded_by_user_id: Optional[int] = None
    uploaded_at: datetime
