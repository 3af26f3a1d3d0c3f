"""Response envelopes returned by the Bobuild API.

Absent fields decode to their zero value; present fields of the wrong
type fail validation.
"""

from typing import Generic, TypeVar

from pydantic import BaseModel, Field

__all__ = [
    "DeleteResponse",
    "InsertMultipleResponse",
    "InsertResponse",
    "ListEnvelope",
    "MutationResponse",
]

T = TypeVar("T")


class ListEnvelope(BaseModel, Generic[T]):
    """One page of a list endpoint.

    Attributes:
        items: Items on this page, in server order
        total: Number of items available across all pages
    """

    items: list[T] = Field(default_factory=list)
    total: int = 0


class MutationResponse(BaseModel):
    """Fields shared by every mutation envelope.

    A 200 response may still carry error=True; the client hands the envelope
    back as-is and leaves that decision to the caller.
    """

    success: bool = False
    error: bool = False

    @property
    def ok(self) -> bool:
        """True when the server reported success and no error."""
        return self.success and not self.error


class InsertResponse(MutationResponse):
    """Envelope for a single insert: {success, error, object, id}."""

    object: str = ""
    id: int = 0


class InsertMultipleResponse(MutationResponse):
    """Envelope for a multi insert: {success, error, object, id: [...]}."""

    object: str = ""
    id: list[int] = Field(default_factory=list)


class DeleteResponse(MutationResponse):
    """Envelope for a delete: {success, error}."""
