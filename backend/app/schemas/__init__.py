# Pydantic request/response schemas (API contract). Kept in sync with frontend types.

from app.schemas.common import ErrorDetail, MessageResponse, NavigationResponse
from app.schemas.contact import (
    ContactCreatedResponse,
    ContactDetailResponse,
    ContactEditForm,
    ContactListResponse,
    ContactRecord,
    ContactSummary,
    ContactUpdate,
    display_name,
)

__all__ = [
    "MessageResponse",
    "ErrorDetail",
    "NavigationResponse",
    "ContactRecord",
    "ContactUpdate",
    "ContactSummary",
    "ContactListResponse",
    "ContactDetailResponse",
    "ContactEditForm",
    "ContactCreatedResponse",
    "display_name",
]
