"""
Request and response schemas for the HTTP surface.
"""

from datetime import datetime
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, StrictBool

from ..auth.types import Action, AdminPanelAttrs, DocumentAttrs, ResourceAttrs, ResourceType
from ..documents.models import Document


class CamelModel(BaseModel):
    model_config = ConfigDict(populate_by_name=True)


class LoginRequest(BaseModel):
    username: str
    password: str


class UserOut(BaseModel):
    id: str
    username: str
    name: str
    role: str


class TokenResponse(BaseModel):
    access_token: str
    token_type: str = "bearer"
    expires_in: int
    user: UserOut


class DocumentIn(CamelModel):
    title: str
    content: str = ""
    is_public: bool = Field(default=False, alias="isPublic")


class DocumentOut(CamelModel):
    id: str
    title: str
    content: str
    owner_id: str = Field(alias="ownerId")
    is_public: bool = Field(alias="isPublic")
    created_at: datetime = Field(alias="createdAt")
    updated_at: datetime = Field(alias="updatedAt")

    @classmethod
    def from_document(cls, document: Document) -> "DocumentOut":
        return cls.model_validate(document.to_public_dict())


class DeleteResponse(BaseModel):
    success: bool
    message: str


class DocumentAttributesIn(CamelModel):
    model_config = ConfigDict(populate_by_name=True, extra="forbid")

    id: Optional[str] = None
    owner_id: Optional[str] = Field(default=None, alias="ownerId")
    is_public: StrictBool = Field(default=False, alias="isPublic")


class PermissionCheckRequest(CamelModel):
    action: Action
    resource_type: ResourceType = Field(alias="resourceType")
    attributes: DocumentAttributesIn = Field(default_factory=DocumentAttributesIn)

    def to_attrs(self) -> ResourceAttrs:
        if self.resource_type is ResourceType.ADMIN_PANEL:
            return AdminPanelAttrs()
        return DocumentAttrs(
            id=self.attributes.id,
            owner_id=self.attributes.owner_id,
            is_public=self.attributes.is_public,
        )


class PermissionCheckResponse(CamelModel):
    allowed: bool
    reason: Optional[str] = None
