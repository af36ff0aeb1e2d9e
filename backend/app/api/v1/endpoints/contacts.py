"""
Contacts endpoints (contact store).
List with search, get, create blank, partial update, favorite toggle, edit form, delete.
"""

import logging

from fastapi import APIRouter, Body, Depends, Form, HTTPException, Query, Request, Response, status
from starlette.concurrency import run_in_threadpool

from app.schemas.common import MessageResponse, NavigationResponse
from app.schemas.contact import (
    ContactCreatedResponse,
    ContactDetailResponse,
    ContactEditForm,
    ContactListResponse,
    ContactSummary,
    ContactUpdate,
)
from app.services.contact_store import (
    ContactNotFoundError,
    ContactStore,
    ContactStoreError,
    get_contact_store,
)

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/contacts", tags=["contacts"])

EDIT_FORM_FIELDS = ("first", "last", "twitter", "avatar", "notes")


def require_contact_id(contact_id: str) -> str:
    """Path dependency: a blank contact_id is a caller bug, abort the request."""
    if not contact_id.strip():
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Missing contact_id param",
        )
    return contact_id


def _store_http_error(e: ContactNotFoundError | ContactStoreError, contact_id: str | None = None) -> HTTPException:
    """Map store exceptions to API errors: unknown id -> 404, store failure -> 503."""
    if isinstance(e, ContactNotFoundError):
        logger.warning("Contact not found: %s", e.contact_id)
        return HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Contact not found")
    logger.error("Contact store error (contact_id=%s): %s", contact_id, e.message)
    return HTTPException(
        status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
        detail=e.message or "Contact store unavailable",
    )


@router.get(
    "",
    response_model=ContactListResponse,
    summary="List contacts",
    description="All contacts ordered by creation time; q filters by name, case-insensitive.",
)
def list_contacts(
    q: str | None = Query(None, description="Optional name search; empty means unfiltered"),
    store: ContactStore = Depends(get_contact_store),
) -> ContactListResponse:
    """GET /api/v1/contacts?q=: sidebar list, echoing q back for the search field."""
    try:
        records = store.list_contacts(q)
    except Exception as e:
        logger.exception("List contacts error: %s", e)
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to list contacts",
        )
    return ContactListResponse(
        contacts=[ContactSummary.from_record(r) for r in records],
        q=q,
    )


@router.post(
    "",
    response_model=ContactCreatedResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Create blank contact",
)
def create_contact(
    response: Response,
    store: ContactStore = Depends(get_contact_store),
) -> ContactCreatedResponse:
    """POST /api/v1/contacts: create an empty contact and point the client at its edit form."""
    try:
        record = store.create_blank()
    except ContactStoreError as e:
        raise _store_http_error(e) from e
    except Exception as e:
        logger.exception("Create contact error: %s", e)
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to create contact",
        )
    response.headers["Location"] = f"/api/v1/contacts/{record.id}"
    return ContactCreatedResponse(contact=record, redirect_to=f"/contacts/{record.id}/edit")


@router.get(
    "/{contact_id}",
    response_model=ContactDetailResponse,
    summary="Get contact",
)
def get_contact(
    contact_id: str = Depends(require_contact_id),
    store: ContactStore = Depends(get_contact_store),
) -> ContactDetailResponse:
    """GET /api/v1/contacts/{contact_id}: detail pane data."""
    try:
        record = store.get_contact(contact_id)
    except (ContactNotFoundError, ContactStoreError) as e:
        raise _store_http_error(e, contact_id) from e
    return ContactDetailResponse.from_record(record)


@router.patch(
    "/{contact_id}",
    response_model=ContactDetailResponse,
    summary="Update contact",
)
def update_contact(
    body: ContactUpdate = Body(...),
    contact_id: str = Depends(require_contact_id),
    store: ContactStore = Depends(get_contact_store),
) -> ContactDetailResponse:
    """PATCH /api/v1/contacts/{contact_id}: apply only the fields present in the body."""
    try:
        record = store.update_contact(contact_id, body)
    except (ContactNotFoundError, ContactStoreError) as e:
        raise _store_http_error(e, contact_id) from e
    except Exception as e:
        logger.exception("Update contact error: %s", e)
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to update contact",
        )
    return ContactDetailResponse.from_record(record)


@router.post(
    "/{contact_id}/favorite",
    response_model=ContactDetailResponse,
    summary="Set favorite",
    description='Form field favorite: "true" marks the contact favorite; any other value clears it.',
)
def set_favorite(
    favorite: str | None = Form(None),
    contact_id: str = Depends(require_contact_id),
    store: ContactStore = Depends(get_contact_store),
) -> ContactDetailResponse:
    """POST /api/v1/contacts/{contact_id}/favorite: favorite toggle submitted by the detail pane."""
    try:
        record = store.update_contact(contact_id, ContactUpdate(favorite=favorite == "true"))
    except (ContactNotFoundError, ContactStoreError) as e:
        raise _store_http_error(e, contact_id) from e
    return ContactDetailResponse.from_record(record)


@router.get(
    "/{contact_id}/edit",
    response_model=ContactEditForm,
    summary="Get edit form values",
)
def get_edit_form(
    contact_id: str = Depends(require_contact_id),
    store: ContactStore = Depends(get_contact_store),
) -> ContactEditForm:
    """GET /api/v1/contacts/{contact_id}/edit: current values to pre-fill the edit form."""
    try:
        record = store.get_contact(contact_id)
    except (ContactNotFoundError, ContactStoreError) as e:
        raise _store_http_error(e, contact_id) from e
    return ContactEditForm.from_record(record)


@router.post(
    "/{contact_id}/edit",
    response_model=NavigationResponse,
    summary="Submit edit form",
)
async def submit_edit_form(
    request: Request,
    contact_id: str = Depends(require_contact_id),
    store: ContactStore = Depends(get_contact_store),
) -> NavigationResponse:
    """POST /api/v1/contacts/{contact_id}/edit: submitted fields change, cleared fields become empty."""
    form = await request.form()
    # Raw form so an emptied input clears the field instead of being dropped
    patch = {
        name: (str(form[name]).strip() or None)
        for name in EDIT_FORM_FIELDS
        if name in form
    }
    try:
        await run_in_threadpool(store.update_contact, contact_id, ContactUpdate(**patch))
    except (ContactNotFoundError, ContactStoreError) as e:
        raise _store_http_error(e, contact_id) from e
    except Exception as e:
        logger.exception("Edit contact error: %s", e)
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to update contact",
        )
    return NavigationResponse(message="Contact updated", redirect_to=f"/contacts/{contact_id}")


@router.delete(
    "/{contact_id}",
    response_model=MessageResponse,
    summary="Delete contact",
)
def delete_contact(
    contact_id: str = Depends(require_contact_id),
    store: ContactStore = Depends(get_contact_store),
) -> MessageResponse:
    """DELETE /api/v1/contacts/{contact_id}: unknown or already deleted ids answer 404."""
    try:
        store.delete_contact(contact_id)
    except (ContactNotFoundError, ContactStoreError) as e:
        raise _store_http_error(e, contact_id) from e
    return MessageResponse(message="Contact deleted successfully")


@router.post(
    "/{contact_id}/destroy",
    response_model=NavigationResponse,
    summary="Delete contact (form action)",
)
def destroy_contact(
    contact_id: str = Depends(require_contact_id),
    store: ContactStore = Depends(get_contact_store),
) -> NavigationResponse:
    """POST /api/v1/contacts/{contact_id}/destroy: delete, then send the client back to the list."""
    try:
        store.delete_contact(contact_id)
    except (ContactNotFoundError, ContactStoreError) as e:
        raise _store_http_error(e, contact_id) from e
    return NavigationResponse(message="Contact deleted successfully", redirect_to="/")
