from typing import Annotated, Optional
from fastapi import Depends, HTTPException, status, Header, Request
from sqlalchemy.orm import Session

from orgtasks.api.database import get_db
from orgtasks.access_control.models import Principal
from orgtasks.access_control.rbac import RBACEngine
from orgtasks.audit.schemas import AuditRequestContext
from orgtasks.storage.repositories.user_repository import UserRepository

# Identity is resolved from a header; token issuance lives outside this service
USER_ID_HEADER = "X-User-ID"


def get_user_repository() -> UserRepository:
    return UserRepository()


def get_rbac_engine() -> RBACEngine:
    return RBACEngine()


def get_current_principal(
    x_user_id: Annotated[Optional[str], Header(alias=USER_ID_HEADER)] = None,
    db: Session = Depends(get_db),
    user_repo: UserRepository = Depends(get_user_repository),
) -> Principal:
    """
    Build the Principal for this request from the X-User-ID header.
    In production, this would come from a verified JWT.
    """
    if not x_user_id:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Authentication required"
        )

    user = user_repo.get_user(db, x_user_id)
    if not user or not user.is_active:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid User ID"
        )
    return Principal.from_user(user)


def get_audit_context(request: Request) -> AuditRequestContext:
    return AuditRequestContext(
        ip_address=request.client.host if request.client else None,
        user_agent=request.headers.get("user-agent"),
    )


def require_audit_viewer(
    principal: Annotated[Principal, Depends(get_current_principal)],
    rbac: Annotated[RBACEngine, Depends(get_rbac_engine)],
) -> Principal:
    """Only owners and admins may read the audit trail."""
    decision = rbac.can_view_audit_log(principal)
    if not decision.allowed:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail=decision.reason
        )
    return principal
