# Services: contact store, Contacts API client

from app.services.contact_store import (
    ContactNotFoundError,
    ContactStore,
    ContactStoreError,
    get_contact_store,
)
from app.services.contacts_client import (
    ContactsClient,
    ContactsClientError,
    FavoriteToggle,
)

__all__ = [
    "ContactStore",
    "ContactStoreError",
    "ContactNotFoundError",
    "get_contact_store",
    "ContactsClient",
    "ContactsClientError",
    "FavoriteToggle",
]
