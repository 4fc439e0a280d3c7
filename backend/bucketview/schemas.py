from __future__ import annotations

import datetime as dt

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class _Wire(BaseModel):
    # The browser speaks camelCase; Python code uses the snake_case attribute names.
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class CredentialConfig(_Wire):
    access_key_id: str | None = None
    secret_access_key: str | None = None
    bucket_name: str | None = None
    region: str | None = None
    account_id: str | None = None
    public_domain: str | None = None


class ListRequest(_Wire):
    provider: str = "r2"
    config: CredentialConfig = Field(default_factory=CredentialConfig)
    prefix: str | None = ""


class ObjectItem(_Wire):
    key: str
    size: int = 0
    last_modified: dt.datetime | None = None


class PrefixItem(_Wire):
    prefix: str


class ListResponse(_Wire):
    contents: list[ObjectItem] = Field(default_factory=list)
    common_prefixes: list[PrefixItem] = Field(default_factory=list)


class PresignRequest(_Wire):
    provider: str = "r2"
    config: CredentialConfig = Field(default_factory=CredentialConfig)
    key: str | None = None
    ttl_seconds: int | None = Field(default=None, ge=1, le=7 * 24 * 3600)


class UrlResponse(_Wire):
    url: str


class UploadResponse(UrlResponse):
    key: str
