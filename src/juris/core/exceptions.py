"""Tenancy error taxonomy and the HTTP handlers that translate it.

Access failures are reported with one generic message regardless of the
underlying cause so that responses cannot be used to enumerate tenants.
"""

from asgi_correlation_id import correlation_id
from fastapi import FastAPI, HTTPException, Request, status
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from src.juris.core.logging import get_logger

logger = get_logger(__name__)

ACCESS_DENIED_DETAIL = "Access denied"


class TenancyError(Exception):
    """Base class for every tenancy-engine failure."""


class TenantNotFound(TenancyError):
    def __init__(self, tenant_id: object) -> None:
        super().__init__(f"Tenant {tenant_id} not found")
        self.tenant_id = tenant_id


class TenantInactive(TenancyError):
    def __init__(self, tenant_id: object) -> None:
        super().__init__(f"Tenant {tenant_id} is inactive")
        self.tenant_id = tenant_id


class InvalidNamespaceName(TenancyError, ValueError):
    """Injection guard tripped. Never retried."""

    def __init__(self, schema_name: str, reason: str) -> None:
        super().__init__(reason)
        self.schema_name = schema_name


class SchemaProvisioningFailure(TenancyError):
    """DDL failed part way through creating or healing a namespace."""

    def __init__(self, schema_name: str, step: str, cause: BaseException | None = None) -> None:
        detail = f": {type(cause).__name__}" if cause is not None else ""
        super().__init__(f"Provisioning of {schema_name} failed at {step}{detail}")
        self.schema_name = schema_name
        self.step = step


class QueryExecutionFailure(TenancyError):
    """A tenant-scoped statement failed or timed out.

    Carries tenant and namespace for diagnosis. The driver message is reduced to
    its exception type and SQLSTATE so that DSNs and bound values never leak.
    """

    def __init__(
        self,
        schema_name: str,
        tenant_id: object | None = None,
        reason: str = "query failed",
        sqlstate: str | None = None,
    ) -> None:
        super().__init__(f"Query in {schema_name} (tenant {tenant_id}) failed: {reason}")
        self.schema_name = schema_name
        self.tenant_id = tenant_id
        self.reason = reason
        self.sqlstate = sqlstate


class AccessDenied(TenancyError):
    def __init__(self, reason: str) -> None:
        super().__init__(reason)
        self.reason = reason


def _error_response(status_code: int, detail: str) -> JSONResponse:
    return JSONResponse(
        status_code=status_code,
        content={"detail": detail, "request_id": correlation_id.get()},
    )


def setup_exception_handlers(app: FastAPI) -> None:
    """Configure exception handlers that include request_id in responses."""

    @app.exception_handler(StarletteHTTPException)
    async def starlette_exception_handler(
        request: Request, exc: StarletteHTTPException
    ) -> JSONResponse:
        return _error_response(exc.status_code, exc.detail)

    @app.exception_handler(HTTPException)
    async def http_exception_handler(request: Request, exc: HTTPException) -> JSONResponse:
        return _error_response(exc.status_code, exc.detail)

    @app.exception_handler(AccessDenied)
    @app.exception_handler(TenantNotFound)
    @app.exception_handler(TenantInactive)
    async def access_denied_handler(request: Request, exc: TenancyError) -> JSONResponse:
        logger.warning("Tenant access denied", reason=str(exc), path=request.url.path)
        return _error_response(status.HTTP_403_FORBIDDEN, ACCESS_DENIED_DETAIL)

    @app.exception_handler(SchemaProvisioningFailure)
    async def provisioning_failure_handler(
        request: Request, exc: SchemaProvisioningFailure
    ) -> JSONResponse:
        logger.error(
            "Tenant namespace provisioning failed",
            schema_name=exc.schema_name,
            step=exc.step,
            path=request.url.path,
        )
        return _error_response(
            status.HTTP_503_SERVICE_UNAVAILABLE, "Tenant storage is not available"
        )

    @app.exception_handler(QueryExecutionFailure)
    @app.exception_handler(InvalidNamespaceName)
    async def tenancy_internal_handler(request: Request, exc: TenancyError) -> JSONResponse:
        logger.error("Tenant data access failed", error=str(exc), path=request.url.path)
        return _error_response(status.HTTP_500_INTERNAL_SERVER_ERROR, "Internal server error")

    @app.exception_handler(Exception)
    async def generic_exception_handler(request: Request, exc: Exception) -> JSONResponse:
        logger.exception(
            "Unhandled exception",
            exc_info=exc,
            request_id=correlation_id.get(),
            path=request.url.path,
        )
        return _error_response(status.HTTP_500_INTERNAL_SERVER_ERROR, "Internal server error")
