"""
HTTP routes.

Thin handlers: resolve the subject, call the gateway, shape the response.
"""

import logging

from fastapi import APIRouter, Depends

from ..auth.base import BaseAuthorizationProvider
from ..auth.jwt import encode_access_token
from ..auth.types import Action, ResourceType, Subject
from ..auth.users import UserDirectory
from ..config import AppConfig
from ..dependencies import (
    get_authz_provider,
    get_config,
    get_current_subject,
    get_directory,
    get_gateway,
    get_store,
)
from ..documents.store import DocumentStore
from ..exceptions import AuthenticationError, NotFoundError, PermissionDeniedError
from ..gateway import DocumentGateway
from ..observability.metrics import get_metrics_collector
from .schemas import (
    DeleteResponse,
    DocumentIn,
    DocumentOut,
    LoginRequest,
    PermissionCheckRequest,
    PermissionCheckResponse,
    TokenResponse,
    UserOut,
)

logger = logging.getLogger(__name__)

router = APIRouter()


@router.post("/auth/login", response_model=TokenResponse, tags=["auth"])
async def login(
    body: LoginRequest,
    config: AppConfig = Depends(get_config),
    directory: UserDirectory = Depends(get_directory),
):
    user = directory.authenticate(body.username, body.password)
    if user is None:
        raise AuthenticationError("Invalid username or password")
    token = encode_access_token(user, config.secret_key, expires_in=config.access_token_ttl)
    return TokenResponse(
        access_token=token, expires_in=config.access_token_ttl, user=UserOut(**user.to_dict())
    )


@router.get("/auth/me", response_model=UserOut, tags=["auth"])
async def me(
    subject: Subject = Depends(get_current_subject),
    directory: UserDirectory = Depends(get_directory),
):
    return UserOut(**directory.get(subject.id).to_dict())


@router.get("/documents", response_model=list[DocumentOut], tags=["documents"])
async def list_documents(
    subject: Subject = Depends(get_current_subject),
    gateway: DocumentGateway = Depends(get_gateway),
):
    documents = await gateway.list_documents(subject.id)
    return [DocumentOut.from_document(d) for d in documents]


@router.post("/documents", response_model=DocumentOut, status_code=201, tags=["documents"])
async def create_document(
    body: DocumentIn,
    subject: Subject = Depends(get_current_subject),
    gateway: DocumentGateway = Depends(get_gateway),
):
    document = await gateway.create_document(subject.id, body.model_dump(by_alias=True))
    return DocumentOut.from_document(document)


@router.get("/documents/{document_id}", response_model=DocumentOut, tags=["documents"])
async def get_document(
    document_id: str,
    subject: Subject = Depends(get_current_subject),
    gateway: DocumentGateway = Depends(get_gateway),
):
    document = await gateway.get_document(subject.id, document_id)
    if document is None:
        raise NotFoundError("Document not found", resource_id=document_id)
    return DocumentOut.from_document(document)


@router.put("/documents/{document_id}", response_model=DocumentOut, tags=["documents"])
async def update_document(
    document_id: str,
    body: DocumentIn,
    subject: Subject = Depends(get_current_subject),
    gateway: DocumentGateway = Depends(get_gateway),
):
    document = await gateway.update_document(
        subject.id, document_id, body.model_dump(by_alias=True)
    )
    return DocumentOut.from_document(document)


@router.delete("/documents/{document_id}", response_model=DeleteResponse, tags=["documents"])
async def delete_document(
    document_id: str,
    subject: Subject = Depends(get_current_subject),
    gateway: DocumentGateway = Depends(get_gateway),
):
    return await gateway.delete_document(subject.id, document_id)


@router.get("/admin", tags=["admin"])
async def admin_panel(
    subject: Subject = Depends(get_current_subject),
    authz: BaseAuthorizationProvider = Depends(get_authz_provider),
    store: DocumentStore = Depends(get_store),
):
    decision = await authz.decide(subject, Action.ACCESS, ResourceType.ADMIN_PANEL)
    if not decision:
        raise PermissionDeniedError(
            "You do not have permission to access the admin panel",
            subject_id=subject.id,
            action=Action.ACCESS.value,
        )
    return {
        "document_count": await store.count(),
        "authz_provider": authz.engine_name,
        "fail_open": authz.fail_open,
        "metrics": get_metrics_collector().get_summary(),
    }


@router.post("/permissions/check", response_model=PermissionCheckResponse, tags=["auth"])
async def check_permission(
    body: PermissionCheckRequest,
    subject: Subject = Depends(get_current_subject),
    authz: BaseAuthorizationProvider = Depends(get_authz_provider),
):
    decision = await authz.decide(subject, body.action, body.resource_type, body.to_attrs())
    return PermissionCheckResponse(allowed=decision.allowed, reason=decision.reason)


@router.get("/health", tags=["ops"])
async def health(authz: BaseAuthorizationProvider = Depends(get_authz_provider)):
    return {
        "status": "healthy" if authz.is_initialized else "degraded",
        "authz_provider": authz.engine_name,
    }


@router.get("/metrics", tags=["ops"])
async def metrics():
    return get_metrics_collector().get_metrics()
