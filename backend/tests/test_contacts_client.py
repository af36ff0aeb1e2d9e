"""
Contacts client against the app (TestClient as the session) and against failing stubs.
"""

import pytest
import requests

from app.services.contacts_client import (
    DELETE_CONFIRM_PROMPT,
    ContactsClient,
    ContactsClientError,
    FavoriteToggle,
)


class StubResponse:
    def __init__(self, status_code, body=None):
        self.status_code = status_code
        self._body = body
        self.content = b"{}" if body is not None else b""
        self.text = ""

    def json(self):
        return self._body


class StubSession:
    """Records calls; answers every request with the same response or raises."""

    def __init__(self, response=None, exc=None):
        self.response = response
        self.exc = exc
        self.calls = []

    def request(self, method, url, **kwargs):
        self.calls.append((method, url, kwargs))
        if self.exc is not None:
            raise self.exc
        return self.response


@pytest.fixture
def client(api):
    return ContactsClient("http://testserver", session=api)


def test_create_list_get(client, store):
    record = client.create_contact()
    assert store.get_contact(record.id) == record
    assert client.list_contacts() == [{"id": record.id, "display_name": "No Name", "favorite": False}]
    assert client.get_contact(record.id).id == record.id


def test_list_with_query(client, ada_and_lovelace):
    assert [c["id"] for c in client.list_contacts("lov")] == ["2"]
    assert [c["id"] for c in client.list_contacts("")] == ["1", "2"]


def test_update_contact(client, ada_and_lovelace):
    record = client.update_contact("1", last="Lovelace", notes="First programmer")
    assert record.last == "Lovelace"
    assert ada_and_lovelace.get_contact("1").notes == "First programmer"


def test_get_missing_raises_404(client):
    with pytest.raises(ContactsClientError) as exc:
        client.get_contact("missing")
    assert exc.value.not_found
    assert "Contact not found" in exc.value.message


def test_toggle_twice_restores_value(client, ada_and_lovelace):
    toggle = FavoriteToggle(client, client.get_contact("1"))
    assert toggle.favorite is False
    assert toggle.toggle() is True
    assert ada_and_lovelace.get_contact("1").favorite is True
    assert toggle.label == "Remove from favorites"
    assert toggle.toggle() is False
    assert ada_and_lovelace.get_contact("1").favorite is False
    assert not toggle.pending


def test_toggle_shows_pending_value_while_in_flight(client, ada_and_lovelace):
    seen = {}
    toggle = FavoriteToggle(client, client.get_contact("2"))
    real_set_favorite = client.set_favorite

    def observing_set_favorite(contact_id, favorite):
        seen["favorite"] = toggle.favorite
        seen["pending"] = toggle.pending
        return real_set_favorite(contact_id, favorite)

    client.set_favorite = observing_set_favorite
    toggle.toggle()
    assert seen == {"favorite": True, "pending": True}


def test_toggle_reverts_on_server_error(ada_and_lovelace):
    session = StubSession(StubResponse(503, {"detail": "Contact store unavailable"}))
    client = ContactsClient("http://contacts.local", session=session)
    toggle = FavoriteToggle(client, ada_and_lovelace.get_contact("1"))

    with pytest.raises(ContactsClientError) as exc:
        toggle.toggle()
    assert exc.value.status_code == 503
    assert toggle.favorite is False
    assert not toggle.pending

    method, url, kwargs = session.calls[0]
    assert (method, url) == ("POST", "http://contacts.local/api/v1/contacts/1/favorite")
    assert kwargs["data"] == {"favorite": "true"}


def test_toggle_reverts_on_transport_error(ada_and_lovelace):
    session = StubSession(exc=requests.ConnectionError("refused"))
    client = ContactsClient("http://contacts.local/", session=session)
    ada_and_lovelace.update_contact("2", {"favorite": True})
    toggle = FavoriteToggle(client, ada_and_lovelace.get_contact("2"))

    with pytest.raises(ContactsClientError):
        toggle.toggle()
    assert toggle.favorite is True


def test_delete_declined_sends_nothing():
    session = StubSession(StubResponse(200, {}))
    client = ContactsClient("http://contacts.local", session=session)
    prompts = []

    def decline(prompt):
        prompts.append(prompt)
        return False

    assert client.delete_contact("1", confirm=decline) is False
    assert prompts == [DELETE_CONFIRM_PROMPT]
    assert session.calls == []


def test_delete_confirmed(client, ada_and_lovelace):
    assert client.delete_contact("1", confirm=lambda prompt: True) is True
    with pytest.raises(ContactsClientError) as exc:
        client.get_contact("1")
    assert exc.value.not_found


def test_delete_missing_raises(client):
    with pytest.raises(ContactsClientError) as exc:
        client.delete_contact("missing", confirm=lambda prompt: True)
    assert exc.value.status_code == 404
