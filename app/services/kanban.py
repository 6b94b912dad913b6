import logging
from typing import Dict, Optional, Tuple

from sqlalchemy.orm import Session

from app.auth.permissions import can_move_card
from app.database import transactional
from app.errors.kanban_errors import (
    CardMoveNotAllowed,
    CardNotFound,
    CompletionNotificationNotFound,
    InvalidCardStatus,
)
from app.models import CardCompletionNotification, KanbanBoard, KanbanCard
from app.schemas.kanban import MoveCardResult
from app.utils.clock import Clock

logger = logging.getLogger(__name__)


# Column statuses of each board, left to right
BOARD_STATUSES: Dict[KanbanBoard, Tuple[str, ...]] = {
    KanbanBoard.DESIGN: ("a_fazer", "fazendo", "arrumar", "para_aprovacao", "aprovado"),
    KanbanBoard.DEVS: ("a_fazer", "fazendo", "alteracao", "aguardando_aprovacao", "aprovados"),
    KanbanBoard.VIDEO: ("a_fazer", "fazendo", "alteracao", "aguardando_aprovacao", "aprovados"),
    KanbanBoard.ATRIZES: ("a_fazer", "fazendo", "alteracao", "aguardando_aprovacao", "aprovados"),
    KanbanBoard.PRODUTORA: ("a_gravar", "gravando", "problemas", "pos_producao", "gravado"),
}

# Entering this status means the work is done and the requester must review it
TERMINAL_STATUS: Dict[KanbanBoard, str] = {
    KanbanBoard.DESIGN: "para_aprovacao",
    KanbanBoard.DEVS: "aguardando_aprovacao",
    KanbanBoard.VIDEO: "aguardando_aprovacao",
    KanbanBoard.ATRIZES: "aguardando_aprovacao",
    KanbanBoard.PRODUTORA: "gravado",
}


def enters_terminal_status(board: KanbanBoard, source_status: str, destination_status: str) -> bool:
    terminal = TERMINAL_STATUS[board]
    return destination_status == terminal and source_status != terminal


class KanbanService:
    def __init__(self, db: Session, clock: Optional[Clock] = None):
        self.db = db
        self.clock = clock or Clock()

    def move_card(
        self,
        card_id: int,
        *,
        status: str,
        position: int,
        actor_id: Optional[int],
        actor_role,
        column_id: Optional[str] = None,
    ) -> MoveCardResult:
        """
        Moves a card and, on a genuine entry into the board's terminal status,
        notifies the card's creator. Reordering inside a column never notifies.
        """
        with transactional(self.db):
            card = self.db.get(KanbanCard, card_id)
            if card is None:
                raise CardNotFound(f"Card {card_id} not found")
            if not can_move_card(actor_role, card.board):
                raise CardMoveNotAllowed(f"Role {actor_role} cannot move cards on the {card.board.value} board")
            if status not in BOARD_STATUSES[card.board]:
                raise InvalidCardStatus(f"'{status}' is not a column of the {card.board.value} board")

            source_status = card.status
            card.status = status
            card.position = position
            if column_id is not None:
                card.column_id = column_id
            card.updated_at = self.clock.now()

            result = MoveCardResult(
                card_id=card.id,
                board=card.board,
                source_status=source_status,
                status=status,
                position=position,
            )
            if enters_terminal_status(card.board, source_status, status):
                result.entered_terminal_status = True
                notification = self._notify_requester(card, actor_id)
                result.notification_id = notification.id if notification else None
            self.db.flush()
        return result

    def _notify_requester(self, card: KanbanCard, actor_id: Optional[int]) -> Optional[CardCompletionNotification]:
        if card.created_by_id is None:
            logger.warning(f"Card {card.id} reached {TERMINAL_STATUS[card.board]} but has no creator to notify")
            return None

        existing = (
            self.db.query(CardCompletionNotification)
            .filter(CardCompletionNotification.card_id == card.id, CardCompletionNotification.read.is_(False))
            .first()
        )
        if existing:
            logger.debug(f"Unread completion notification already exists for card {card.id}")
            return existing

        notification = CardCompletionNotification(
            card_id=card.id,
            card_title=card.title,
            board=card.board,
            completed_by_id=actor_id,
            requester_id=card.created_by_id,
        )
        self.db.add(notification)
        self.db.flush()
        logger.info(f"Completion notification for card {card.id} sent to user {card.created_by_id}")
        return notification

    def notifications_for(self, requester_id: int, *, unread_only: bool = True) -> list[CardCompletionNotification]:
        q = self.db.query(CardCompletionNotification).filter(CardCompletionNotification.requester_id == requester_id)
        if unread_only:
            q = q.filter(CardCompletionNotification.read.is_(False))
        return q.order_by(CardCompletionNotification.created_at.desc(), CardCompletionNotification.id.desc()).all()

    def mark_notification_read(
        self, notification_id: int, *, requester_id: Optional[int] = None
    ) -> CardCompletionNotification:
        with transactional(self.db):
            notification = self.db.get(CardCompletionNotification, notification_id)
            if notification is None or (requester_id is not None and notification.requester_id != requester_id):
                raise CompletionNotificationNotFound(f"Completion notification {notification_id} not found")
            if not notification.read:
                notification.read = True
                notification.read_at = self.clock.now()
        return notification
