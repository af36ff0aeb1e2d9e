"""
Common Pydantic schemas (messages, errors, navigation).
"""

from pydantic import BaseModel


class MessageResponse(BaseModel):
    message: str


class ErrorDetail(BaseModel):
    detail: str


class NavigationResponse(BaseModel):
    """Result of a form-style action: a message and the path the client should load next."""
    message: str
    redirect_to: str
