"""出牌校验 - 组合牌型识别与比较，给出接受/拒绝及原因"""

import logging
from enum import Enum
from dataclasses import dataclass
from typing import Optional, Sequence, Union

from .card import Card, Rank
from .hand_type import ClassifiedHand
from .hand_detector import classify
from .comparator import Verdict, compare
from .ranking import to_level

logger = logging.getLogger(__name__)


class RejectReason(str, Enum):
    """拒绝原因，每次校验只报告第一个失败的检查"""
    EMPTY_PLAY = "EMPTY_PLAY"
    INVALID_SHAPE = "INVALID_SHAPE"
    INVALID_INCUMBENT = "INVALID_INCUMBENT"
    ILLEGAL_FAMILY = "ILLEGAL_FAMILY"
    KIND_MISMATCH = "KIND_MISMATCH"
    SPAN_MISMATCH = "SPAN_MISMATCH"
    NOT_STRONG_ENOUGH = "NOT_STRONG_ENOUGH"

    @property
    def does_not_beat(self) -> bool:
        """是否属于“压不过上家”一类"""
        return self in _DOES_NOT_BEAT


_DOES_NOT_BEAT = frozenset({
    RejectReason.ILLEGAL_FAMILY,
    RejectReason.KIND_MISMATCH,
    RejectReason.SPAN_MISMATCH,
    RejectReason.NOT_STRONG_ENOUGH,
})

REJECT_MESSAGES = {
    RejectReason.EMPTY_PLAY: "没有选择牌",
    RejectReason.INVALID_SHAPE: "无效的牌型",
    RejectReason.INVALID_INCUMBENT: "上家出牌无效",
    RejectReason.ILLEGAL_FAMILY: "普通牌型不能打炸弹",
    RejectReason.KIND_MISMATCH: "牌型不同，无法比较",
    RejectReason.SPAN_MISMATCH: "长度不同，无法比较",
    RejectReason.NOT_STRONG_ENOUGH: "牌值太小，不能打过",
}


@dataclass(frozen=True)
class ValidationResult:
    """一次出牌校验的结果"""
    accepted: bool
    reason: Optional[RejectReason] = None
    hand: Optional[ClassifiedHand] = None        # 本次出牌的牌型
    incumbent: Optional[ClassifiedHand] = None   # 上家牌型（首出时为 None）

    @property
    def message(self) -> str:
        if self.accepted:
            return "出牌有效"
        return REJECT_MESSAGES[self.reason]

    def __bool__(self) -> bool:
        return self.accepted


def validate(
    play: Sequence[Card],
    incumbent: Optional[Sequence[Card]],
    hand: Optional[Sequence[Card]],
    level: Union[Rank, int, str],
) -> ValidationResult:
    """
    校验一次出牌。
    incumbent 为 None 或空表示首出，任何合法牌型都可以出。
    hand 是出牌玩家的全部手牌；是否持有这些牌由调用方负责，这里只判断牌型与大小。
    """
    level = to_level(level)

    if not play:
        return _reject(RejectReason.EMPTY_PLAY)

    current = classify(play, level)
    if current is None:
        return _reject(RejectReason.INVALID_SHAPE)

    if not incumbent:
        return ValidationResult(accepted=True, hand=current)

    previous = classify(incumbent, level)
    if previous is None:
        return _reject(RejectReason.INVALID_INCUMBENT, current)

    verdict = compare(current, previous)
    if verdict is Verdict.BEATS:
        return ValidationResult(accepted=True, hand=current, incumbent=previous)
    return _reject(RejectReason(verdict.value), current, previous)


def _reject(
    reason: RejectReason,
    current: Optional[ClassifiedHand] = None,
    previous: Optional[ClassifiedHand] = None,
) -> ValidationResult:
    logger.debug("出牌被拒绝: %s (%s vs %s)", reason.value, current, previous)
    return ValidationResult(
        accepted=False, reason=reason, hand=current, incumbent=previous,
    )
