"""
FastAPI application factory.

Builds one set of services per application instance: configuration,
authorization provider, user directory, document store and gateway. Nothing
is process-global, so several apps (or tests) can run side by side.
"""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request

from ..auth.factory import create_authz_provider, create_rule_policy
from ..auth.provider import LocalRuleProvider
from ..auth.users import UserDirectory
from ..config import AppConfig
from ..constants import CORRELATION_ID_HEADER
from ..documents.notifications import ChangeNotifier
from ..documents.store import DocumentStore
from ..gateway import DocumentGateway
from ..observability.logging import (
    clear_correlation_id,
    clear_subject_context,
    set_correlation_id,
)
from .errors import register_error_handlers
from .routes import router

logger = logging.getLogger(__name__)


def create_app(config: AppConfig | None = None) -> FastAPI:
    """
    Create the DocVault FastAPI application.

    Args:
        config: Application configuration (read from the environment if None)

    Raises:
        ConfigurationError: If the configuration is invalid
    """
    config = config or AppConfig()
    config.validate()

    authz = create_authz_provider(config)
    local_rules = (
        authz
        if isinstance(authz, LocalRuleProvider)
        else LocalRuleProvider(policy=create_rule_policy(config))
    )
    notifier = ChangeNotifier()
    store = DocumentStore(authz, notifier=notifier, seed=config.seed_documents)
    directory = UserDirectory(
        password=config.demo_password, bcrypt_rounds=config.bcrypt_rounds
    )

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        logger.info(f"DocVault starting with {authz.engine_name} authorization")
        try:
            yield
        finally:
            await authz.aclose()
            logger.info("DocVault stopped")

    app = FastAPI(title="DocVault", lifespan=lifespan)
    app.state.config = config
    app.state.authz = authz
    app.state.notifier = notifier
    app.state.store = store
    app.state.directory = directory
    app.state.gateway = DocumentGateway(store, directory, local_rules)

    @app.middleware("http")
    async def correlation_id_middleware(request: Request, call_next):
        correlation_id = set_correlation_id(request.headers.get(CORRELATION_ID_HEADER))
        try:
            response = await call_next(request)
        finally:
            clear_correlation_id()
            clear_subject_context()
        response.headers[CORRELATION_ID_HEADER] = correlation_id
        return response

    register_error_handlers(app)
    app.include_router(router)
    return app
