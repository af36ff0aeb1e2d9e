"""
Contacts API client (requests) for frontends and scripts.
Optimistic favorite toggle with rollback, and confirm-before-delete.
"""

import logging
from typing import Any, Callable

import requests

from app.schemas.contact import ContactRecord

logger = logging.getLogger(__name__)

DELETE_CONFIRM_PROMPT = "Please confirm you want to delete this record."
API_PREFIX = "/api/v1/contacts"


class ContactsClientError(Exception):
    """Raised when a Contacts API call fails."""

    def __init__(
        self,
        message: str,
        status_code: int | None = None,
        detail: Any = None,
    ) -> None:
        self.message = message
        self.status_code = status_code
        self.detail = detail
        super().__init__(message)

    @property
    def not_found(self) -> bool:
        return self.status_code == 404


class ContactsClient:
    """
    Thin client over the /api/v1/contacts endpoints. Any object with a requests-style
    request(method, url, ...) method can stand in for the session.
    """

    def __init__(self, base_url: str, session: Any = None, timeout: float = 10) -> None:
        self._base_url = base_url.rstrip("/")
        self._session = session or requests.Session()
        self._timeout = timeout

    def _handle_error(self, response: Any) -> None:
        """Interpret error response and raise ContactsClientError with detail."""
        try:
            body = response.json()
        except ValueError:
            body = response.text or None
        msg = f"Contacts API error: {response.status_code}"
        if isinstance(body, dict) and isinstance(body.get("detail"), str):
            msg += f": {body['detail']}"
        raise ContactsClientError(msg, status_code=response.status_code, detail=body)

    def _request(
        self,
        method: str,
        path: str,
        *,
        params: dict[str, Any] | None = None,
        json: dict[str, Any] | None = None,
        data: dict[str, str] | None = None,
    ) -> dict[str, Any]:
        url = f"{self._base_url}{API_PREFIX}{path}"
        try:
            resp = self._session.request(
                method,
                url,
                params=params,
                json=json,
                data=data,
                timeout=self._timeout,
            )
        except requests.RequestException as e:
            logger.warning("Contacts request failed: %s %s: %s", method, url, e)
            raise ContactsClientError(f"Contacts request failed: {e!s}") from e
        if resp.status_code >= 400:
            self._handle_error(resp)
        if resp.status_code == 204 or not resp.content:
            return {}
        return resp.json()

    # -------------------------------------------------------------------------
    # Contacts
    # -------------------------------------------------------------------------

    def list_contacts(self, q: str | None = None) -> list[dict[str, Any]]:
        """Sidebar rows (id, display_name, favorite), optionally filtered by name."""
        params = {"q": q} if q else None
        return self._request("GET", "", params=params).get("contacts") or []

    def get_contact(self, contact_id: str) -> ContactRecord:
        return ContactRecord.model_validate(self._request("GET", f"/{contact_id}"))

    def create_contact(self) -> ContactRecord:
        """Create a blank contact; the caller is expected to open its edit form next."""
        data = self._request("POST", "")
        return ContactRecord.model_validate(data["contact"])

    def update_contact(self, contact_id: str, **fields: Any) -> ContactRecord:
        return ContactRecord.model_validate(self._request("PATCH", f"/{contact_id}", json=fields))

    def set_favorite(self, contact_id: str, favorite: bool) -> ContactRecord:
        """Submit the favorite form field as "true"/"false"."""
        data = self._request(
            "POST",
            f"/{contact_id}/favorite",
            data={"favorite": "true" if favorite else "false"},
        )
        return ContactRecord.model_validate(data)

    def delete_contact(self, contact_id: str, confirm: Callable[[str], bool]) -> bool:
        """
        Ask confirm(prompt) first; when declined nothing is sent and False is returned.
        Returns True once the server has deleted the contact.
        """
        if not confirm(DELETE_CONFIRM_PROMPT):
            logger.info("Delete of contact %s cancelled", contact_id)
            return False
        self._request("POST", f"/{contact_id}/destroy")
        return True


class FavoriteToggle:
    """
    Favorite star for one contact. While a write is in flight, favorite shows the submitted
    value; afterwards it shows what the server stored. On failure it reverts and re-raises.
    """

    def __init__(self, client: ContactsClient, contact: ContactRecord) -> None:
        self._client = client
        self._contact_id = contact.id
        self._confirmed = contact.favorite
        self._pending: bool | None = None

    @property
    def favorite(self) -> bool:
        return self._confirmed if self._pending is None else self._pending

    @property
    def pending(self) -> bool:
        return self._pending is not None

    @property
    def label(self) -> str:
        return "Remove from favorites" if self.favorite else "Add to favorites"

    def toggle(self) -> bool:
        self._pending = not self.favorite
        try:
            record = self._client.set_favorite(self._contact_id, self._pending)
        except ContactsClientError:
            logger.warning("Favorite toggle failed for %s; reverting to %s", self._contact_id, self._confirmed)
            raise
        else:
            self._confirmed = record.favorite
        finally:
            self._pending = None
        return self._confirmed
