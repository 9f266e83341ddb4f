"""牌型定义 - 掼蛋10种合法牌型与炸弹等级"""

from enum import Enum, IntEnum
from dataclasses import dataclass, field
from typing import Optional

from .card import Rank


class Family(str, Enum):
    """牌型大类：普通牌 / 炸弹"""
    NORMAL = "NORMAL"
    BOMB = "BOMB"


class HandKind(str, Enum):
    """牌型枚举"""
    SINGLE = "SINGLE"                       # 单张
    PAIR = "PAIR"                           # 对子
    TRIPLE = "TRIPLE"                       # 三张
    TRIPLE_WITH_PAIR = "TRIPLE_WITH_PAIR"   # 三带二
    STRAIGHT = "STRAIGHT"                   # 顺子 (≥5张)
    PAIR_STRAIGHT = "PAIR_STRAIGHT"         # 连对 (≥3对)
    TRIPLE_STRAIGHT = "TRIPLE_STRAIGHT"     # 钢板 (≥2个连续三张)
    BOMB = "BOMB"                           # 炸弹 (4-8张)
    STRAIGHT_FLUSH = "STRAIGHT_FLUSH"       # 同花顺
    KING_BOMB = "KING_BOMB"                 # 天王炸 (四王)


class BombTier(IntEnum):
    """炸弹之间的先后顺序：天王炸 > 8炸 > 7炸 > 6炸 > 同花顺 > 5炸 > 4炸"""
    FOUR = 1
    FIVE = 2
    STRAIGHT_FLUSH = 3
    SIX = 4
    SEVEN = 5
    EIGHT = 6
    KING_BOMB = 7


BOMB_KINDS = frozenset({HandKind.BOMB, HandKind.STRAIGHT_FLUSH, HandKind.KING_BOMB})

# 需要长度相同才能比较的牌型
RUN_KINDS = frozenset({
    HandKind.STRAIGHT, HandKind.PAIR_STRAIGHT, HandKind.TRIPLE_STRAIGHT,
})

_BOMB_TIER_BY_SIZE = {
    4: BombTier.FOUR,
    5: BombTier.FIVE,
    6: BombTier.SIX,
    7: BombTier.SEVEN,
    8: BombTier.EIGHT,
}


@dataclass(frozen=True)
class ClassifiedHand:
    """一手牌的识别结果。

    相等性只看 (kind, strength, span, size)；main_rank 与 wild_count
    仅供展示，不参与比较。
    """
    kind: HandKind
    strength: int
    size: int
    span: Optional[int] = None              # 顺子/连对/钢板/同花顺的连续组数
    main_rank: Optional[Rank] = field(default=None, compare=False)
    wild_count: int = field(default=0, compare=False)  # 逢人配替代的张数

    def __post_init__(self) -> None:
        needs_span = self.kind in RUN_KINDS or self.kind == HandKind.STRAIGHT_FLUSH
        if needs_span != (self.span is not None):
            raise ValueError(f"{self.kind.value} 的 span 设置不正确: {self.span}")
        if self.kind == HandKind.BOMB and self.size not in _BOMB_TIER_BY_SIZE:
            raise ValueError(f"炸弹只能是4-8张: {self.size}")
        if self.kind == HandKind.KING_BOMB and self.size != 4:
            raise ValueError("天王炸必须是4张王")

    @property
    def family(self) -> Family:
        return Family.BOMB if self.kind in BOMB_KINDS else Family.NORMAL

    @property
    def is_bomb(self) -> bool:
        return self.kind in BOMB_KINDS

    @property
    def bomb_tier(self) -> Optional[BombTier]:
        if self.kind == HandKind.KING_BOMB:
            return BombTier.KING_BOMB
        if self.kind == HandKind.STRAIGHT_FLUSH:
            return BombTier.STRAIGHT_FLUSH
        if self.kind == HandKind.BOMB:
            return _BOMB_TIER_BY_SIZE[self.size]
        return None

    def __repr__(self) -> str:
        extra = f" span={self.span}" if self.span is not None else ""
        return f"[{self.kind.value}] strength={self.strength}{extra}"
