"""
FastAPI Dependencies for DocVault

Pulls the application services off ``app.state`` and resolves the acting
subject from the bearer token.

Usage:
    from fastapi import Depends
    from docvault.dependencies import get_current_subject, get_gateway

    @router.get("/documents")
    async def list_documents(
        subject: Subject = Depends(get_current_subject),
        gateway: DocumentGateway = Depends(get_gateway),
    ):
        ...
"""

import logging

from fastapi import Depends, HTTPException, Request, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from .auth.base import BaseAuthorizationProvider
from .auth.jwt import decode_access_token
from .auth.types import Subject
from .auth.users import UserDirectory
from .config import AppConfig
from .documents.store import DocumentStore
from .exceptions import AuthenticationError
from .gateway import DocumentGateway
from .observability.logging import set_subject_context

logger = logging.getLogger(__name__)

_bearer = HTTPBearer(auto_error=False)


def _state(request: Request, name: str):
    value = getattr(request.app.state, name, None)
    if value is None:
        raise HTTPException(503, f"{name} not initialized")
    return value


async def get_config(request: Request) -> AppConfig:
    return _state(request, "config")


async def get_store(request: Request) -> DocumentStore:
    return _state(request, "store")


async def get_directory(request: Request) -> UserDirectory:
    return _state(request, "directory")


async def get_authz_provider(request: Request) -> BaseAuthorizationProvider:
    return _state(request, "authz")


async def get_gateway(request: Request) -> DocumentGateway:
    return _state(request, "gateway")


async def get_current_subject(
    credentials: HTTPAuthorizationCredentials | None = Depends(_bearer),
    config: AppConfig = Depends(get_config),
    directory: UserDirectory = Depends(get_directory),
) -> Subject:
    """
    FastAPI Dependency: resolve the subject from the ``Authorization: Bearer`` token.

    The role is taken from the directory, not from the token, so a role
    change takes effect without re-issuing tokens.
    """
    if credentials is None or credentials.scheme.lower() != "bearer":
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Not authenticated",
            headers={"WWW-Authenticate": "Bearer"},
        )
    try:
        payload = decode_access_token(credentials.credentials, config.secret_key)
        subject = directory.resolve_subject(payload["sub"])
    except AuthenticationError as e:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail=e.message,
            headers={"WWW-Authenticate": "Bearer"},
        ) from e

    set_subject_context(subject.id, subject.role.value)
    return subject
