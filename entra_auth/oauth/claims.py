"""Identity claims carried inside token responses."""

from uuid import UUID

from pydantic import BaseModel, ConfigDict


class IdToken(BaseModel):
    """Claims from the payload segment of an identity token."""

    model_config = ConfigDict(frozen=True)

    name: str
    oid: str
    preferred_username: str
    puid: str | None = None
    tenant_region_scope: str | None = None
    tid: str


class ClientInfo(BaseModel):
    """Directory-level user and tenant identifiers from the client_info blob."""

    model_config = ConfigDict(frozen=True)

    uid: UUID | None = None
    utid: UUID | None = None
