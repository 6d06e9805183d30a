"""Wire payloads and value objects for stored documents."""

from __future__ import annotations

import dataclasses
import typing as typ

import msgspec

from docbridge.codec import fields_from_wire

if typ.TYPE_CHECKING:
    from docbridge.codec import DocumentCodec, GenericRecord, TypedField


class DocumentPayload(msgspec.Struct, kw_only=True, rename="camel"):
    """A document resource as returned by the store."""

    name: str
    fields: dict[str, typ.Any] = msgspec.field(default_factory=dict)
    create_time: str | None = None
    update_time: str | None = None


class ListDocumentsPayload(msgspec.Struct, kw_only=True, rename="camel"):
    """One page of a collection listing.

    An empty collection comes back as ``{}``, so ``documents`` defaults to
    an empty list.
    """

    documents: list[DocumentPayload] = msgspec.field(default_factory=list)
    next_page_token: str | None = None


@dataclasses.dataclass(frozen=True, slots=True)
class StoredDocument:
    """A persisted document with its typed fields.

    Attributes
    ----------
    resource_path
        Full resource name, ending in ``.../{collection}/{document_id}``.
    fields
        Parsed typed fields; entries with no usable variant are absent.
    created_at
        Store-assigned creation time, as the RFC 3339 string it sent.
    updated_at
        Store-assigned update time, as the RFC 3339 string it sent.

    """

    resource_path: str
    fields: dict[str, TypedField]
    created_at: str | None = None
    updated_at: str | None = None

    @property
    def document_id(self) -> str:
        """Return the trailing segment of the resource path."""
        return self.resource_path.rsplit("/", 1)[-1]

    @classmethod
    def from_payload(cls, payload: DocumentPayload) -> StoredDocument:
        """Build a stored document from its wire payload."""
        return cls(
            resource_path=payload.name,
            fields=fields_from_wire(payload.fields),
            created_at=payload.create_time,
            updated_at=payload.update_time,
        )

    def to_record(self, codec: DocumentCodec) -> GenericRecord:
        """Decode the fields into a generic record keyed by ``id``."""
        return codec.decode(self.fields, self.document_id)
