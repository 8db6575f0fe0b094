"""
Diff request builder.

Collects the two sides of a diff (a reference name plus an optional commit hash on it) and
forwards them, as one immutable DiffParams, to the injected API object:

    response = (
        GetDiffBuilder(api)
        .from_ref("main")
        .to_ref("feature")
        .to_hash_on_ref("2e1cfa82b035c26cbbbdae632cea070514eb8b773f616aaeaf668e2f0be8f10d")
        .get()
    )
"""

from typing import Any, Protocol

from pydantic import BaseModel, ConfigDict, Field


class DiffParams(BaseModel):
    model_config = ConfigDict(frozen=True)

    from_ref: str = Field(min_length=1)
    from_hash_on_ref: str | None = None
    to_ref: str = Field(min_length=1)
    to_hash_on_ref: str | None = None


class DiffApi(Protocol):
    def get_diff(self, params: DiffParams) -> Any: ...


class GetDiffBuilder:
    def __init__(self, api: DiffApi):
        self._api = api
        self._from_ref: str | None = None
        self._from_hash_on_ref: str | None = None
        self._to_ref: str | None = None
        self._to_hash_on_ref: str | None = None

    def from_ref(self, name: str) -> "GetDiffBuilder":
        self._from_ref = name
        return self

    def from_hash_on_ref(self, hash_on_ref: str | None) -> "GetDiffBuilder":
        self._from_hash_on_ref = hash_on_ref
        return self

    def to_ref(self, name: str) -> "GetDiffBuilder":
        self._to_ref = name
        return self

    def to_hash_on_ref(self, hash_on_ref: str | None) -> "GetDiffBuilder":
        self._to_hash_on_ref = hash_on_ref
        return self

    def params(self) -> DiffParams:
        """Raises pydantic.ValidationError when from_ref or to_ref is missing."""
        return DiffParams(
            from_ref=self._from_ref,
            from_hash_on_ref=self._from_hash_on_ref,
            to_ref=self._to_ref,
            to_hash_on_ref=self._to_hash_on_ref,
        )

    def get(self) -> Any:
        return self._api.get_diff(self.params())


__all__ = ["DiffParams", "DiffApi", "GetDiffBuilder"]
