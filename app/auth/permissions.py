"""
Simple role-based authorization for FastAPI endpoints, plus the board
capability predicates used by the kanban service.
"""

from typing import Dict, FrozenSet, List, Optional

from fastapi import Depends, HTTPException, status

from app.auth.jwt_handler import verify_jwt_token
from app.models.kanban_card import KanbanBoard
from app.models.user import UserRole


def get_current_user(allowed_roles: Optional[List[str]] = None):
    """
    Dependency factory to create a get_current_user dependency with role checking.

    Args:
        allowed_roles: List of role strings that are allowed to access the endpoint.
                      If None, any authenticated user can access.

    Example:
        @router.post("/justifications/{id}/archive")
        def archive(current_user=Depends(get_current_user(["ceo"]))):
            ...
    """
    def dependency(current_user_data = Depends(verify_jwt_token)):
        if not current_user_data:
            raise HTTPException(
                status_code=status.HTTP_401_UNAUTHORIZED,
                detail="Authentication required"
            )

        if allowed_roles is None:
            return current_user_data

        user_role = current_user_data.get("role")
        if not user_role:
            raise HTTPException(
                status_code=status.HTTP_401_UNAUTHORIZED,
                detail="User role not found"
            )

        if user_role not in allowed_roles:
            raise HTTPException(
                status_code=status.HTTP_403_FORBIDDEN,
                detail=f"Access denied. Required roles: {allowed_roles}, your role: {user_role}"
            )

        return current_user_data

    return dependency


_ALWAYS = (UserRole.CEO, UserRole.GESTOR_PROJETOS, UserRole.GESTOR_ADS, UserRole.SUCESSO_CLIENTE)

CARD_MOVERS: Dict[KanbanBoard, FrozenSet[UserRole]] = {
    KanbanBoard.DESIGN: frozenset(_ALWAYS + (UserRole.DESIGN,)),
    KanbanBoard.DEVS: frozenset(_ALWAYS + (UserRole.DEVS,)),
    KanbanBoard.VIDEO: frozenset(_ALWAYS + (UserRole.EDITOR_VIDEO,)),
    KanbanBoard.ATRIZES: frozenset(_ALWAYS + (UserRole.ATRIZES_GRAVACAO,)),
    KanbanBoard.PRODUTORA: frozenset(_ALWAYS + (UserRole.PRODUTORA, UserRole.EDITOR_VIDEO)),
}

JUSTIFICATION_ARCHIVERS = [UserRole.CEO.value]


def _as_role(role) -> Optional[UserRole]:
    if role is None or isinstance(role, UserRole):
        return role
    try:
        return UserRole(role)
    except ValueError:
        return None


def can_move_card(role, board: KanbanBoard) -> bool:
    role = _as_role(role)
    if role is None:
        return False
    return role in CARD_MOVERS[board]
