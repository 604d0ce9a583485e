"""請求書ステータスの遷移表"""
from dataclasses import dataclass
from typing import FrozenSet, Optional, Tuple

from invoicing.domain.exceptions import ForbiddenError, InvalidTransitionError
from invoicing.domain.value_objects.actor import ActorContext, Role
from invoicing.domain.value_objects.invoice_status import InvoiceAction, InvoiceStatus

ALL_STATUSES: FrozenSet[Optional[InvoiceStatus]] = frozenset(InvoiceStatus)
EDITABLE: FrozenSet[Optional[InvoiceStatus]] = frozenset({InvoiceStatus.DRAFT, InvoiceStatus.REJECTED})


@dataclass(frozen=True)
class Transition:
    """遷移表の1行

    to_status が None の場合、ステータスは変わらない。
    """

    action: InvoiceAction
    role: Role
    from_statuses: FrozenSet[Optional[InvoiceStatus]]
    to_status: Optional[InvoiceStatus] = None
    owner_only: bool = False


TRANSITIONS: Tuple[Transition, ...] = (
    Transition(InvoiceAction.CREATE, Role.COMPANY, frozenset({None}), InvoiceStatus.DRAFT),
    Transition(InvoiceAction.EDIT, Role.COMPANY, EDITABLE),
    Transition(InvoiceAction.CONFIRM, Role.COMPANY, EDITABLE, InvoiceStatus.PENDING_APPROVAL),
    Transition(
        InvoiceAction.APPROVE,
        Role.FREELANCER,
        frozenset({InvoiceStatus.PENDING_APPROVAL}),
        InvoiceStatus.APPROVED,
        owner_only=True,
    ),
    Transition(
        InvoiceAction.REJECT,
        Role.FREELANCER,
        frozenset({InvoiceStatus.PENDING_APPROVAL}),
        InvoiceStatus.REJECTED,
        owner_only=True,
    ),
    Transition(
        InvoiceAction.REJECT,
        Role.COMPANY,
        frozenset({InvoiceStatus.PENDING_APPROVAL}),
        InvoiceStatus.REJECTED,
    ),
    Transition(
        InvoiceAction.MARK_PAID,
        Role.COMPANY,
        frozenset({InvoiceStatus.APPROVED}),
        InvoiceStatus.PAID,
    ),
    Transition(InvoiceAction.DELETE, Role.COMPANY, frozenset({InvoiceStatus.DRAFT})),
    Transition(InvoiceAction.DUPLICATE, Role.COMPANY, ALL_STATUSES),
    Transition(InvoiceAction.VIEW, Role.COMPANY, ALL_STATUSES),
    Transition(InvoiceAction.VIEW, Role.FREELANCER, ALL_STATUSES, owner_only=True),
)


def resolve_transition(
    action: InvoiceAction,
    actor: ActorContext,
    current_status: Optional[InvoiceStatus],
    freelancer_id: Optional[str] = None,
) -> Optional[InvoiceStatus]:
    """操作の可否を判定し、遷移後のステータスを返す

    判定順: ロール -> 本人確認 -> 現在のステータス。

    Args:
        action: 操作
        actor: 操作者
        current_status: 現在のステータス（新規作成時はNone）
        freelancer_id: 請求書のフリーランスID

    Returns:
        Optional[InvoiceStatus]: 遷移後のステータス

    Raises:
        ForbiddenError: ロールまたは所有者が一致しない場合
        InvalidTransitionError: 現在のステータスでは操作できない場合
    """
    candidates = [t for t in TRANSITIONS if t.action == action and t.role == actor.role]
    if not candidates:
        raise ForbiddenError(f"{actor.role.value} は操作 {action.value} を実行できません")

    if any(t.owner_only for t in candidates):
        if freelancer_id is None or not actor.owns(freelancer_id):
            raise ForbiddenError("本人の請求書ではありません")

    for transition in candidates:
        if current_status in transition.from_statuses:
            if transition.to_status is None:
                return current_status
            return transition.to_status

    raise InvalidTransitionError(
        current_status.value if current_status is not None else None,
        action.value,
    )
