"""牌的定义 - 掼蛋两副108张扑克牌的数据模型"""

from enum import IntEnum, Enum
from dataclasses import dataclass
from typing import Dict, List, Optional, Tuple
import random


class Rank(IntEnum):
    """点数枚举（不考虑级牌时的自然大小，数值越大牌越大）"""
    THREE = 3
    FOUR = 4
    FIVE = 5
    SIX = 6
    SEVEN = 7
    EIGHT = 8
    NINE = 9
    TEN = 10
    JACK = 11
    QUEEN = 12
    KING = 13
    ACE = 14
    TWO = 15
    SMALL_JOKER = 16
    BIG_JOKER = 17


class Suit(str, Enum):
    """花色枚举"""
    SPADE = "♠"
    HEART = "♥"
    DIAMOND = "♦"
    CLUB = "♣"
    JOKER = "🃏"


JOKERS = frozenset({Rank.SMALL_JOKER, Rank.BIG_JOKER})

# 点数显示映射
RANK_DISPLAY = {
    Rank.THREE: "3", Rank.FOUR: "4", Rank.FIVE: "5",
    Rank.SIX: "6", Rank.SEVEN: "7", Rank.EIGHT: "8",
    Rank.NINE: "9", Rank.TEN: "10", Rank.JACK: "J",
    Rank.QUEEN: "Q", Rank.KING: "K", Rank.ACE: "A",
    Rank.TWO: "2", Rank.SMALL_JOKER: "小王", Rank.BIG_JOKER: "大王",
}

# 文本解析用的反查表（含 ASCII 别名）
_RANK_FROM_TEXT: Dict[str, Rank] = {v: k for k, v in RANK_DISPLAY.items()}
_RANK_FROM_TEXT.update({"T": Rank.TEN, "XW": Rank.SMALL_JOKER, "DW": Rank.BIG_JOKER})

_SUIT_FROM_TEXT = {
    "♠": Suit.SPADE, "♥": Suit.HEART, "♦": Suit.DIAMOND, "♣": Suit.CLUB,
    "S": Suit.SPADE, "H": Suit.HEART, "D": Suit.DIAMOND, "C": Suit.CLUB,
}

SUITS = [Suit.SPADE, Suit.HEART, Suit.DIAMOND, Suit.CLUB]
SUITS_ORDER = {suit: i for i, suit in enumerate(SUITS + [Suit.JOKER])}

DECK_SIZE = 108


@dataclass(frozen=True)
class Card:
    """一张扑克牌

    copy_tag 区分两副牌中完全相同的两张（0/1），只用于界面追踪单张牌，
    不影响牌型和大小。
    """
    rank: Rank
    suit: Suit
    copy_tag: int = 0

    def __post_init__(self) -> None:
        if self.copy_tag not in (0, 1):
            raise ValueError(f"copy_tag 只能是 0 或 1: {self.copy_tag}")
        if (self.rank in JOKERS) != (self.suit == Suit.JOKER):
            raise ValueError(f"王牌与花色不匹配: {self.rank.name} {self.suit.name}")

    @property
    def is_joker(self) -> bool:
        return self.rank in JOKERS

    @property
    def display(self) -> str:
        if self.is_joker:
            return RANK_DISPLAY[self.rank]
        return f"{self.suit.value}{RANK_DISPLAY[self.rank]}"

    def __repr__(self) -> str:
        return self.display

    def __lt__(self, other: "Card") -> bool:
        return self.rank < other.rank


def create_deck() -> List[Card]:
    """创建两副共108张扑克牌"""
    deck: List[Card] = []
    ranks = [r for r in Rank if r not in JOKERS]

    for copy_tag in (0, 1):
        for suit in SUITS:
            for rank in ranks:
                deck.append(Card(rank=rank, suit=suit, copy_tag=copy_tag))
        deck.append(Card(rank=Rank.SMALL_JOKER, suit=Suit.JOKER, copy_tag=copy_tag))
        deck.append(Card(rank=Rank.BIG_JOKER, suit=Suit.JOKER, copy_tag=copy_tag))

    assert len(deck) == DECK_SIZE, f"牌数错误: {len(deck)}"
    assert len(set(deck)) == DECK_SIZE, "牌堆中存在重复的牌"
    return deck


def shuffle_and_deal(
    deck: List[Card],
    rng: Optional[random.Random] = None,
) -> Tuple[List[Card], List[Card], List[Card], List[Card]]:
    """洗牌并发牌: 返回四名玩家各27张的手牌"""
    if len(deck) != DECK_SIZE:
        raise ValueError(f"掼蛋需要{DECK_SIZE}张牌，实际 {len(deck)} 张")
    shuffled = deck.copy()
    (rng or random).shuffle(shuffled)

    hand1 = sort_cards(shuffled[0:27])
    hand2 = sort_cards(shuffled[27:54])
    hand3 = sort_cards(shuffled[54:81])
    hand4 = sort_cards(shuffled[81:108])

    return hand1, hand2, hand3, hand4


def sort_cards(cards: List[Card]) -> List[Card]:
    """按点数排序手牌（从小到大，同点数按花色、牌副排列）"""
    return sorted(cards, key=lambda c: (c.rank, SUITS_ORDER[c.suit], c.copy_tag))


# ============================================================
#  文本解析
# ============================================================

def parse_card(text: str, copy_tag: int = 0) -> Card:
    """解析单张牌文本（如 '♠A', 'H10', '小王', 'DW'），无法解析时抛 ValueError"""
    token = text.strip()
    upper = token.upper()
    rank = _RANK_FROM_TEXT.get(token) or _RANK_FROM_TEXT.get(upper)
    if rank in JOKERS:
        return Card(rank=rank, suit=Suit.JOKER, copy_tag=copy_tag)

    if len(token) < 2:
        raise ValueError(f"无法解析的牌: '{text}'")
    suit = _SUIT_FROM_TEXT.get(upper[0])
    rank = _RANK_FROM_TEXT.get(upper[1:])
    if suit is None or rank is None or rank in JOKERS:
        raise ValueError(f"无法解析的牌: '{text}'")
    return Card(rank=rank, suit=suit, copy_tag=copy_tag)


def parse_cards(text: str) -> List[Card]:
    """解析以空格或逗号分隔的一组牌。

    同一张牌出现第二次时自动视为另一副牌（copy_tag=1），出现第三次则报错。
    """
    cards: List[Card] = []
    seen: Dict[Tuple[Rank, Suit], int] = {}
    for token in text.replace(",", " ").split():
        card = parse_card(token)
        key = (card.rank, card.suit)
        count = seen.get(key, 0)
        if count >= 2:
            raise ValueError(f"两副牌中只有两张 {card.display}")
        seen[key] = count + 1
        cards.append(Card(rank=card.rank, suit=card.suit, copy_tag=count))
    return cards
