"""终端可视化渲染器 - 在终端中展示牌组、牌型识别与出牌校验结果"""

from typing import List, Optional, Sequence

from src.engine.card import Card, Rank, Suit, RANK_DISPLAY
from src.engine.hand_type import HandKind, ClassifiedHand
from src.engine.ranking import is_level_card, is_any_level_card, sort_by_level
from src.engine.validator import ValidationResult


# 颜色常量 (ANSI)
RED = "\033[91m"
GREEN = "\033[92m"
YELLOW = "\033[93m"
MAGENTA = "\033[95m"
CYAN = "\033[96m"
BOLD = "\033[1m"
DIM = "\033[2m"
RESET = "\033[0m"

# 座位名
SEAT_NAMES = ["南", "西", "北", "东"]

# 牌型中文名
HAND_KIND_NAME = {
    HandKind.SINGLE: "单张",
    HandKind.PAIR: "对子",
    HandKind.TRIPLE: "三张",
    HandKind.TRIPLE_WITH_PAIR: "三带二",
    HandKind.STRAIGHT: "顺子",
    HandKind.PAIR_STRAIGHT: "连对",
    HandKind.TRIPLE_STRAIGHT: "钢板",
    HandKind.BOMB: "炸弹 💣",
    HandKind.STRAIGHT_FLUSH: "同花顺 💣",
    HandKind.KING_BOMB: "天王炸 🚀",
}


def describe_hand(hand: ClassifiedHand) -> str:
    """牌型的简短中文描述，如 '连对(3连)'、'5张炸弹'"""
    name = HAND_KIND_NAME[hand.kind]
    if hand.kind == HandKind.BOMB:
        return f"{hand.size}张{name}"
    if hand.span is not None:
        return f"{name}({hand.span}连)"
    return name


class TerminalRenderer:
    """终端可视化渲染器"""

    def __init__(self, color: bool = True):
        self.color = color

    def _paint(self, text: str, *styles: str) -> str:
        if not self.color or not styles:
            return text
        return "".join(styles) + text + RESET

    # ============================================================
    #  牌面渲染
    # ============================================================

    def format_cards(self, cards: Sequence[Card], level: Optional[Rank] = None) -> str:
        """将牌列表格式化为彩色字符串；给出级数时高亮级牌，逢人配加粗"""
        parts = []
        for c in cards:
            display = c.display
            if level is not None and is_level_card(c, level):
                parts.append(self._paint(display, MAGENTA, BOLD))
            elif level is not None and is_any_level_card(c, level):
                parts.append(self._paint(display, YELLOW))
            elif c.suit in (Suit.HEART, Suit.DIAMOND):
                parts.append(self._paint(display, RED))
            elif c.suit == Suit.JOKER:
                if c.rank == Rank.BIG_JOKER:
                    parts.append(self._paint(display, RED, BOLD))
                else:
                    parts.append(self._paint(display, CYAN))
            else:
                parts.append(display)
        return " ".join(parts)

    # ============================================================
    #  标题
    # ============================================================

    def print_header(self, title: str) -> None:
        """打印带框的标题"""
        line = "═" * 60
        print(f"\n{self._paint(line, YELLOW, BOLD)}")
        print(self._paint(f"  {title}", YELLOW, BOLD))
        print(f"{self._paint(line, YELLOW, BOLD)}\n")

    # ============================================================
    #  牌型识别展示
    # ============================================================

    def show_classification(
        self, cards: Sequence[Card], hand: Optional[ClassifiedHand], level: Rank,
    ) -> None:
        """展示一组牌的识别结果"""
        cards_str = self.format_cards(sort_by_level(list(cards), level), level)
        if hand is None:
            print(f"  {cards_str}  →  {self._paint('不是合法牌型', DIM)}")
            return
        extra = ""
        if hand.wild_count:
            extra = f"  (逢人配 ×{hand.wild_count})"
        print(f"  {cards_str}  →  [{describe_hand(hand)}] 强度 {hand.strength}{extra}")

    # ============================================================
    #  出牌校验展示
    # ============================================================

    def show_validation(
        self,
        play: Sequence[Card],
        incumbent: Optional[Sequence[Card]],
        result: ValidationResult,
        level: Rank,
    ) -> None:
        """展示一次出牌校验"""
        if incumbent:
            prev = self.format_cards(sort_by_level(list(incumbent), level), level)
            kind = f"[{describe_hand(result.incumbent)}] " if result.incumbent else ""
            print(f"  上家: {kind}{prev}")
        else:
            print(f"  上家: {self._paint('无（首出）', DIM)}")

        cards_str = self.format_cards(sort_by_level(list(play), level), level)
        kind = f"[{describe_hand(result.hand)}] " if result.hand else ""
        print(f"  出牌: {kind}{cards_str}")

        if result.accepted:
            print(f"  结果: {self._paint('✔ ' + result.message, GREEN, BOLD)}")
        else:
            print(f"  结果: {self._paint('✘ ' + result.message, RED, BOLD)} ({result.reason.value})")

    # ============================================================
    #  发牌展示
    # ============================================================

    def show_deal(self, hands: List[List[Card]], level: Rank) -> None:
        """展示四家手牌"""
        self.print_header(f"🃏 发牌完成（打 {RANK_DISPLAY[level]}）")
        for seat, hand in zip(SEAT_NAMES, hands):
            cards = self.format_cards(sort_by_level(hand, level), level)
            print(f"  {self._paint(seat, BOLD)} ({len(hand)}张): {cards}")
        print()
