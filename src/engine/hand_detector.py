"""牌型检测器 - 识别一组牌的掼蛋牌型并给出 ClassifiedHand"""

from functools import lru_cache
from typing import Iterable, List, Optional, Tuple, Union
from collections import Counter

from .card import Card, Rank, JOKERS, sort_cards
from .hand_type import HandKind, ClassifiedHand
from .ranking import (
    CHAIN_RANKS,
    bomb_value,
    group_rank_value,
    is_level_card,
    normal_rank_value,
    normal_value,
    to_level,
)


# 各普通牌型的基础分；只在同类牌型之间比较，保证类内有序即可
_KIND_BASE = {
    HandKind.SINGLE: 100,
    HandKind.PAIR: 200,
    HandKind.TRIPLE: 300,
    HandKind.TRIPLE_WITH_PAIR: 400,
    HandKind.STRAIGHT: 500,
    HandKind.PAIR_STRAIGHT: 600,
    HandKind.TRIPLE_STRAIGHT: 700,
    HandKind.STRAIGHT_FLUSH: 1000,
}

# 普通炸弹按张数分档
_BOMB_BASE = {4: 2000, 5: 3000, 6: 4000, 7: 5000, 8: 6000}

KING_BOMB_STRENGTH = 10000

# 王对 / 三王：固定值，高于任何普通对子 / 三张
JOKER_GROUP_VALUE = 19


def classify(cards: Iterable[Card], level: Union[Rank, int, str]) -> Optional[ClassifiedHand]:
    """
    识别一组牌的牌型。
    返回 ClassifiedHand 或 None（非法牌型）。对任意有限的牌组都不会抛异常；
    只有 level 非法时抛 ValueError。
    """
    level = to_level(level)
    cards = list(cards)
    if not cards:
        return None

    n = len(cards)
    rank_counts = Counter(c.rank for c in cards)

    # 按检测优先级依次尝试：炸弹类 > 连续牌型 > 三带二 > 三张/对子/单张
    result = (
        _detect_king_bomb(cards, n, rank_counts)
        or _detect_straight_flush(cards, n, rank_counts)
        or _detect_bomb(cards, n, rank_counts)
        or _detect_triple_straight(cards, n, rank_counts)
        or _detect_pair_straight(cards, n, rank_counts)
        or _detect_straight(cards, n, rank_counts)
        or _detect_triple_with_pair(cards, n, rank_counts, level)
        or _detect_triple(cards, n, level)
        or _detect_pair(cards, n, level)
        or _detect_single(cards, n, level)
    )
    return result


def classify_cached(cards: Iterable[Card], level: Union[Rank, int, str]) -> Optional[ClassifiedHand]:
    """带缓存的 classify，供 AI 枚举候选出牌时反复调用。

    缓存键为排序后的牌组加级数：同一组牌在不同级数下牌型可能不同。
    """
    key = tuple(sort_cards(list(cards)))
    return _classify_key(key, to_level(level))


@lru_cache(maxsize=65536)
def _classify_key(cards: Tuple[Card, ...], level: Rank) -> Optional[ClassifiedHand]:
    return classify(cards, level)


def classify_cache_info():
    """classify_cached 的缓存命中统计（functools 的 CacheInfo）"""
    return _classify_key.cache_info()


def classify_cache_clear() -> None:
    """清空 classify_cached 的缓存"""
    _classify_key.cache_clear()


# ============================================================
#  辅助函数
# ============================================================

def _find_consecutive(ranks: Iterable[Rank], length: int) -> Optional[List[Rank]]:
    """
    检查 ranks 是否恰好为 length 个连续点数（只允许 3..A，排除 2 和大小王）。
    返回排序后的序列或 None。
    """
    ordered = sorted(ranks)
    if len(ordered) != length:
        return None
    if any(r not in CHAIN_RANKS for r in ordered):
        return None
    for i in range(len(ordered) - 1):
        if ordered[i + 1] - ordered[i] != 1:
            return None
    return ordered


def _all_counts(rc: Counter, count: int) -> bool:
    return all(c == count for c in rc.values())


def _chain_hand(kind: HandKind, seq: List[Rank], size: int) -> ClassifiedHand:
    """连续牌型：基础分 + 最大点数 + 长度"""
    top = seq[-1]
    span = len(seq)
    return ClassifiedHand(
        kind, _KIND_BASE[kind] + normal_rank_value(top) + span,
        size=size, span=span, main_rank=top,
    )


def _same_rank_group(cards: List[Card], level: Rank, kind: HandKind) -> Optional[ClassifiedHand]:
    """
    对子/三张：非逢人配的牌必须同点数（不能是王），逢人配补齐缺的张数。
    级数点数的牌组不论花色组成都按级牌升值。
    """
    naturals = [c for c in cards if not is_level_card(c, level)]
    wilds = len(cards) - len(naturals)

    if naturals:
        ranks = {c.rank for c in naturals}
        if len(ranks) != 1:
            return None
        rank = ranks.pop()
        if rank in JOKERS:
            return None  # 逢人配不能代替王
    else:
        rank = level  # 全是红桃级牌

    # 红桃级牌配同点数时只是普通的同点牌
    wild_count = 0 if rank == level else wilds
    return ClassifiedHand(
        kind, _KIND_BASE[kind] + group_rank_value(rank, level),
        size=len(cards), main_rank=rank, wild_count=wild_count,
    )


# ============================================================
#  炸弹类检测
# ============================================================

def _detect_king_bomb(cards: List[Card], n: int, rc: Counter) -> Optional[ClassifiedHand]:
    """天王炸：两大王 + 两小王"""
    if n == 4 and rc[Rank.SMALL_JOKER] == 2 and rc[Rank.BIG_JOKER] == 2:
        return ClassifiedHand(HandKind.KING_BOMB, KING_BOMB_STRENGTH, size=4)
    return None


def _detect_straight_flush(cards: List[Card], n: int, rc: Counter) -> Optional[ClassifiedHand]:
    """同花顺：≥5张同花色连续单牌，只允许 3..A"""
    if n < 5 or not _all_counts(rc, 1):
        return None
    if len({c.suit for c in cards}) != 1:
        return None
    seq = _find_consecutive(rc.keys(), n)
    if seq:
        return _chain_hand(HandKind.STRAIGHT_FLUSH, seq, n)
    return None


def _detect_bomb(cards: List[Card], n: int, rc: Counter) -> Optional[ClassifiedHand]:
    """炸弹：4-8张相同点数（不含王）；同张数时按炸弹序比点数"""
    if n < 4 or n > 8 or len(rc) != 1:
        return None
    rank = next(iter(rc))
    if rank in JOKERS:
        return None
    return ClassifiedHand(
        HandKind.BOMB, _BOMB_BASE[n] + bomb_value(rank), size=n, main_rank=rank,
    )


# ============================================================
#  连续牌型检测
# ============================================================

def _detect_triple_straight(cards: List[Card], n: int, rc: Counter) -> Optional[ClassifiedHand]:
    """钢板：≥2个连续三张"""
    if n < 6 or n % 3 != 0 or not _all_counts(rc, 3):
        return None
    seq = _find_consecutive(rc.keys(), n // 3)
    if seq:
        return _chain_hand(HandKind.TRIPLE_STRAIGHT, seq, n)
    return None


def _detect_pair_straight(cards: List[Card], n: int, rc: Counter) -> Optional[ClassifiedHand]:
    """连对：≥3对连续对子"""
    if n < 6 or n % 2 != 0 or not _all_counts(rc, 2):
        return None
    seq = _find_consecutive(rc.keys(), n // 2)
    if seq:
        return _chain_hand(HandKind.PAIR_STRAIGHT, seq, n)
    return None


def _detect_straight(cards: List[Card], n: int, rc: Counter) -> Optional[ClassifiedHand]:
    """顺子：≥5张连续单牌，不含2和王"""
    if n < 5 or not _all_counts(rc, 1):
        return None
    seq = _find_consecutive(rc.keys(), n)
    if seq:
        return _chain_hand(HandKind.STRAIGHT, seq, n)
    return None


# ============================================================
#  基础牌型检测
# ============================================================

def _detect_triple_with_pair(cards: List[Card], n: int, rc: Counter, level: Rank) -> Optional[ClassifiedHand]:
    """三带二：三张 + 一个不同点数的对子，按三张的点数比大小"""
    if n != 5 or len(rc) != 2:
        return None
    triple = next((r for r, cnt in rc.items() if cnt == 3), None)
    pair = next((r for r, cnt in rc.items() if cnt == 2), None)
    if triple is None or pair is None or triple in JOKERS:
        return None
    return ClassifiedHand(
        HandKind.TRIPLE_WITH_PAIR,
        _KIND_BASE[HandKind.TRIPLE_WITH_PAIR] + group_rank_value(triple, level),
        size=5, main_rank=triple,
    )


def _detect_triple(cards: List[Card], n: int, level: Rank) -> Optional[ClassifiedHand]:
    """三张：同点数三张，逢人配可补缺；三张王单独成一类"""
    if n != 3:
        return None
    jokers = sum(1 for c in cards if c.is_joker)
    if jokers == 3:
        return ClassifiedHand(
            HandKind.TRIPLE, _KIND_BASE[HandKind.TRIPLE] + JOKER_GROUP_VALUE, size=3,
        )
    if jokers:
        return None
    return _same_rank_group(cards, level, HandKind.TRIPLE)


def _detect_pair(cards: List[Card], n: int, level: Rank) -> Optional[ClassifiedHand]:
    """对子：同点数两张，逢人配可补缺；任意两张王为王对，大于所有普通对子"""
    if n != 2:
        return None
    jokers = sum(1 for c in cards if c.is_joker)
    if jokers == 2:
        return ClassifiedHand(
            HandKind.PAIR, _KIND_BASE[HandKind.PAIR] + JOKER_GROUP_VALUE, size=2,
        )
    if jokers:
        return None
    return _same_rank_group(cards, level, HandKind.PAIR)


def _detect_single(cards: List[Card], n: int, level: Rank) -> Optional[ClassifiedHand]:
    """单张：红桃级牌大于2、小于小王"""
    if n != 1:
        return None
    card = cards[0]
    return ClassifiedHand(
        HandKind.SINGLE, _KIND_BASE[HandKind.SINGLE] + normal_value(card, level),
        size=1, main_rank=card.rank,
    )
