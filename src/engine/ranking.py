"""点数大小与级牌规则 - 普通序、炸弹序、逢人配判定"""

from typing import Dict, List, Union

from .card import Card, Rank, Suit, JOKERS, RANK_DISPLAY, SUITS_ORDER


# 默认从2开始打
DEFAULT_LEVEL = Rank.TWO

# 红桃级牌在普通序中的位置：大于2，小于小王
LEVEL_CARD_VALUE = 16

# 普通序：3 < ... < A < 2 < 红桃级牌 < 小王 < 大王
_NORMAL_SCALE: Dict[Rank, int] = {r: int(r) for r in Rank if r not in JOKERS}
_NORMAL_SCALE[Rank.SMALL_JOKER] = 17
_NORMAL_SCALE[Rank.BIG_JOKER] = 18

# 炸弹序：同张数炸弹比点数时 2 最小，级牌不升值
_BOMB_SCALE: Dict[Rank, int] = {r: int(r) for r in Rank if r not in JOKERS}
_BOMB_SCALE[Rank.TWO] = 2

# 顺子/连对/钢板/同花顺只能使用 3..A
CHAIN_RANKS = frozenset(r for r in Rank if Rank.THREE <= r <= Rank.ACE)

# 级数编号（2..14，14=A）与点数的对应
_LEVEL_NUMBERS: Dict[int, Rank] = {
    2: Rank.TWO, 3: Rank.THREE, 4: Rank.FOUR, 5: Rank.FIVE, 6: Rank.SIX,
    7: Rank.SEVEN, 8: Rank.EIGHT, 9: Rank.NINE, 10: Rank.TEN,
    11: Rank.JACK, 12: Rank.QUEEN, 13: Rank.KING, 14: Rank.ACE,
}


def to_level(value: Union[Rank, int, str]) -> Rank:
    """把级数统一转成 Rank。

    接受 Rank、级数编号（2..14，14 表示 A）或点数文本（'2'、'10'、'J'、'A'）。
    王不能做级牌，其余无法识别的输入抛 ValueError。
    """
    if isinstance(value, Rank):
        rank = value
    elif isinstance(value, int) and not isinstance(value, bool):
        rank = _LEVEL_NUMBERS.get(value)
    elif isinstance(value, str):
        text = value.strip().upper()
        rank = next((r for r, d in RANK_DISPLAY.items() if d == text), None)
        if rank is None and text.isdigit():
            rank = _LEVEL_NUMBERS.get(int(text))
    else:
        rank = None

    if rank is None or rank in JOKERS:
        raise ValueError(f"无效的级数: {value!r}")
    return rank


def is_level_card(card: Card, level: Rank) -> bool:
    """级牌（逢人配）：当前级数的红桃牌"""
    return card.rank == level and card.suit == Suit.HEART


# 逢人配就是红桃级牌
is_wildcard = is_level_card


def is_any_level_card(card: Card, level: Rank) -> bool:
    """任意花色的级数牌，仅用于界面高亮，不参与规则判断"""
    return card.rank == level


def normal_rank_value(rank: Rank) -> int:
    """点数在普通序中的值（不考虑级牌升值）"""
    return _NORMAL_SCALE[rank]


def normal_value(card: Card, level: Rank) -> int:
    """单张牌在普通序中的值：红桃级牌升到 2 与小王之间"""
    if is_level_card(card, level):
        return LEVEL_CARD_VALUE
    return _NORMAL_SCALE[card.rank]


def group_rank_value(rank: Rank, level: Rank) -> int:
    """对子/三张/三带二的主点数值：级数点数整组升值，与花色无关"""
    if rank == level:
        return LEVEL_CARD_VALUE
    return _NORMAL_SCALE[rank]


def bomb_value(rank: Rank) -> int:
    """炸弹主点数在炸弹序中的值"""
    if rank in JOKERS:
        raise ValueError("王不能组成普通炸弹")
    return _BOMB_SCALE[rank]


def sort_by_level(cards: List[Card], level: Rank) -> List[Card]:
    """按当前级数下的普通序排序（从小到大）"""
    return sorted(
        cards,
        key=lambda c: (normal_value(c, level), SUITS_ORDER[c.suit], c.copy_tag),
    )
