"""
Request/response models for the batched document fetch.

Mirrors the multi-get shape of the document store: one request carrying an
(index, type, id) triple per document, and an ordered response where each
item is either a document result or a per-item failure.
"""

from pydantic import BaseModel, Field, model_validator


class DocumentRef(BaseModel):
    """One document addressed inside a batched fetch."""

    index: str = Field(..., description='Collection (index) holding the document')
    doc_type: str = Field(..., description='Fixed type tag of configuration documents')
    id: str = Field(..., description='Configuration identifier')

    model_config = {'frozen': True}


class MultiGetRequest(BaseModel):
    """A single batched fetch covering every requested document."""

    items: list[DocumentRef] = Field(default_factory=list)
    refresh: bool = Field(
        default=False, description='Refresh before reading so the latest commit is visible'
    )
    realtime: bool = Field(
        default=False, description='Read the live document, bypassing any read-through cache'
    )

    def add(self, index: str, doc_type: str, id: str) -> 'MultiGetRequest':
        self.items.append(DocumentRef(index=index, doc_type=doc_type, id=id))
        return self

    @property
    def ids(self) -> list[str]:
        return [item.id for item in self.items]


class GetResult(BaseModel):
    """Document descriptor for one successfully retrieved item."""

    index: str
    doc_type: str
    id: str
    found: bool = False
    source: bytes | None = Field(default=None, description='Raw stored document content')

    @property
    def is_source_empty(self) -> bool:
        return not self.source


class ItemFailureDetail(BaseModel):
    """Store-reported failure for one item within an otherwise healthy batch."""

    index: str | None = None
    doc_type: str | None = None
    id: str | None = None
    message: str = ''


class MultiGetItemResponse(BaseModel):
    """One slot of the batched response: a result OR a failure, never both."""

    response: GetResult | None = None
    failure: ItemFailureDetail | None = None

    @model_validator(mode='after')
    def _exactly_one(self) -> 'MultiGetItemResponse':
        if (self.response is None) == (self.failure is None):
            raise ValueError('exactly one of response or failure must be set')
        return self

    @property
    def is_failed(self) -> bool:
        return self.failure is not None

    @property
    def id(self) -> str | None:
        if self.response is not None:
            return self.response.id
        return self.failure.id if self.failure else None


class MultiGetResponse(BaseModel):
    """Ordered per-item results of one batched fetch."""

    items: list[MultiGetItemResponse | None] = Field(default_factory=list)
