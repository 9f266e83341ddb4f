"""牌型比较 - 先过牌型关（炸弹/普通、同型、同长度），再比大小"""

from enum import Enum

from .hand_type import HandKind, ClassifiedHand, RUN_KINDS


class Verdict(str, Enum):
    """比较结论：BEATS 以外都是压不过的原因"""
    BEATS = "BEATS"
    ILLEGAL_FAMILY = "ILLEGAL_FAMILY"          # 普通牌不能打炸弹
    KIND_MISMATCH = "KIND_MISMATCH"            # 牌型不同
    SPAN_MISMATCH = "SPAN_MISMATCH"            # 顺子/连对/钢板长度不同
    NOT_STRONG_ENOUGH = "NOT_STRONG_ENOUGH"    # 同型但不够大


def compare(challenger: ClassifiedHand, incumbent: ClassifiedHand) -> Verdict:
    """
    判断 challenger 能否压过 incumbent。
    规则：
    1. 炸弹压一切普通牌，普通牌打不了炸弹
    2. 炸弹之间按等级：天王炸 > 8炸 > 7炸 > 6炸 > 同花顺 > 5炸 > 4炸，同级再比大小
    3. 普通牌必须同类型（连续牌型还要同长度），比 strength，相等不算大
    """
    if challenger.is_bomb and not incumbent.is_bomb:
        return Verdict.BEATS
    if incumbent.is_bomb and not challenger.is_bomb:
        return Verdict.ILLEGAL_FAMILY

    if challenger.is_bomb:
        return _compare_bombs(challenger, incumbent)

    if challenger.kind != incumbent.kind:
        return Verdict.KIND_MISMATCH
    if challenger.kind in RUN_KINDS and challenger.span != incumbent.span:
        return Verdict.SPAN_MISMATCH
    return _stronger(challenger.strength, incumbent.strength)


def beats(challenger: ClassifiedHand, incumbent: ClassifiedHand) -> bool:
    """challenger 是否能压过 incumbent"""
    return compare(challenger, incumbent) is Verdict.BEATS


def _compare_bombs(challenger: ClassifiedHand, incumbent: ClassifiedHand) -> Verdict:
    if challenger.bomb_tier != incumbent.bomb_tier:
        return _stronger(challenger.bomb_tier, incumbent.bomb_tier)
    # 同花顺之间：张数多的大，同张数比最大点数
    if challenger.kind == HandKind.STRAIGHT_FLUSH and challenger.span != incumbent.span:
        return _stronger(challenger.span, incumbent.span)
    return _stronger(challenger.strength, incumbent.strength)


def _stronger(a: int, b: int) -> Verdict:
    return Verdict.BEATS if a > b else Verdict.NOT_STRONG_ENOUGH
