"""牌型检测器单元测试 - 覆盖10种掼蛋牌型、逢人配与识别优先级"""

import random
from itertools import combinations

import pytest
from src.engine.card import Card, Rank, Suit, create_deck
from src.engine.hand_type import HandKind, Family, BombTier
from src.engine.hand_detector import (
    classify, classify_cached, classify_cache_info, classify_cache_clear,
)


LEVEL = Rank.TWO


# ============================================================
#  辅助：快速构造牌
# ============================================================

def c(rank: Rank, suit: Suit = Suit.SPADE, copy_tag: int = 0) -> Card:
    """快捷构造一张牌"""
    return Card(rank=rank, suit=suit, copy_tag=copy_tag)


def cards_of_rank(rank: Rank, count: int) -> list[Card]:
    """构造同点数的多张牌（依次分配花色，超过4张用第二副牌）"""
    suits = [Suit.SPADE, Suit.HEART, Suit.DIAMOND, Suit.CLUB]
    return [Card(rank=rank, suit=suits[i % 4], copy_tag=i // 4) for i in range(count)]


def run(low: Rank, length: int, suit: Suit = None) -> list[Card]:
    """从 low 开始的连续单牌；不指定花色时轮换花色避免同花"""
    suits = [Suit.SPADE, Suit.DIAMOND, Suit.CLUB, Suit.HEART]
    return [
        c(Rank(low + i), suit or suits[i % 4])
        for i in range(length)
    ]


SMALL = Card(Rank.SMALL_JOKER, Suit.JOKER, 0)
SMALL2 = Card(Rank.SMALL_JOKER, Suit.JOKER, 1)
BIG = Card(Rank.BIG_JOKER, Suit.JOKER, 0)
BIG2 = Card(Rank.BIG_JOKER, Suit.JOKER, 1)


# ============================================================
#  基础牌型测试
# ============================================================

class TestBasicTypes:
    """单张、对子、三张、三带二"""

    def test_single(self):
        hand = classify([c(Rank.ACE)], LEVEL)
        assert hand is not None
        assert hand.kind == HandKind.SINGLE
        assert hand.family == Family.NORMAL
        assert hand.main_rank == Rank.ACE
        assert hand.span is None

    def test_single_two_beats_ace(self):
        two = classify([c(Rank.TWO)], Rank.SEVEN)
        ace = classify([c(Rank.ACE)], Rank.SEVEN)
        assert two.strength > ace.strength

    def test_single_jokers_on_top(self):
        small = classify([SMALL], LEVEL)
        big = classify([BIG], LEVEL)
        two = classify([c(Rank.TWO)], LEVEL)
        assert two.strength < small.strength < big.strength

    def test_pair(self):
        hand = classify(cards_of_rank(Rank.KING, 2), LEVEL)
        assert hand.kind == HandKind.PAIR
        assert hand.main_rank == Rank.KING
        assert hand.wild_count == 0

    def test_pair_of_different_ranks_invalid(self):
        assert classify([c(Rank.THREE), c(Rank.FOUR)], LEVEL) is None

    def test_triple(self):
        hand = classify(cards_of_rank(Rank.SEVEN, 3), LEVEL)
        assert hand.kind == HandKind.TRIPLE
        assert hand.main_rank == Rank.SEVEN

    def test_triple_with_pair(self):
        cards = cards_of_rank(Rank.JACK, 3) + cards_of_rank(Rank.FIVE, 2)
        hand = classify(cards, LEVEL)
        assert hand.kind == HandKind.TRIPLE_WITH_PAIR
        assert hand.main_rank == Rank.JACK
        assert hand.size == 5

    def test_triple_with_pair_ranked_by_triple(self):
        low = classify(cards_of_rank(Rank.FOUR, 3) + cards_of_rank(Rank.ACE, 2), LEVEL)
        high = classify(cards_of_rank(Rank.NINE, 3) + cards_of_rank(Rank.THREE, 2), LEVEL)
        assert high.strength > low.strength

    def test_triple_with_joker_pair(self):
        cards = cards_of_rank(Rank.NINE, 3) + [SMALL, SMALL2]
        hand = classify(cards, LEVEL)
        assert hand.kind == HandKind.TRIPLE_WITH_PAIR
        assert hand.main_rank == Rank.NINE

    def test_triple_with_mixed_jokers_invalid(self):
        cards = cards_of_rank(Rank.NINE, 3) + [SMALL, BIG]
        assert classify(cards, LEVEL) is None

    def test_triple_with_two_singles_invalid(self):
        cards = cards_of_rank(Rank.NINE, 3) + [c(Rank.THREE), c(Rank.FIVE)]
        assert classify(cards, LEVEL) is None

    def test_empty_returns_none(self):
        assert classify([], LEVEL) is None

    def test_four_mixed_cards_invalid(self):
        cards = [c(Rank.THREE), c(Rank.FIVE), c(Rank.NINE), c(Rank.KING)]
        assert classify(cards, LEVEL) is None


# ============================================================
#  王牌特殊牌型
# ============================================================

class TestJokerGroups:
    """王对、三王、天王炸"""

    def test_any_two_jokers_form_pair(self):
        for pair in ([SMALL, BIG], [SMALL, SMALL2], [BIG, BIG2]):
            hand = classify(pair, LEVEL)
            assert hand.kind == HandKind.PAIR
            assert hand.main_rank is None

    def test_joker_pairs_are_equal(self):
        assert classify([SMALL, SMALL2], LEVEL) == classify([BIG, BIG2], LEVEL)

    def test_joker_pair_outranks_every_pair(self):
        joker_pair = classify([SMALL, BIG], Rank.SEVEN)
        twos = classify(cards_of_rank(Rank.TWO, 2), Rank.SEVEN)
        wild_pair = classify([c(Rank.SEVEN, Suit.HEART, 0), c(Rank.SEVEN, Suit.HEART, 1)], Rank.SEVEN)
        assert joker_pair.strength > wild_pair.strength > twos.strength

    def test_three_jokers_form_triple(self):
        hand = classify([SMALL, SMALL2, BIG], LEVEL)
        assert hand.kind == HandKind.TRIPLE
        aces = classify(cards_of_rank(Rank.ACE, 3), LEVEL)
        assert hand.strength > aces.strength

    def test_joker_with_normal_card_invalid(self):
        assert classify([SMALL, c(Rank.ACE)], LEVEL) is None
        assert classify([SMALL, BIG, c(Rank.ACE)], LEVEL) is None

    def test_king_bomb(self):
        hand = classify([SMALL, SMALL2, BIG, BIG2], LEVEL)
        assert hand.kind == HandKind.KING_BOMB
        assert hand.family == Family.BOMB
        assert hand.bomb_tier == BombTier.KING_BOMB

    def test_four_jokers_wrong_mix_invalid(self):
        # 真实牌堆中不存在三张小王，但识别器不能因此出错
        assert classify([SMALL, SMALL2, SMALL, BIG], LEVEL) is None


# ============================================================
#  逢人配（红桃级牌）
# ============================================================

class TestWildcards:
    """逢人配只能补对子和三张"""

    level = Rank.SEVEN
    wild = Card(Rank.SEVEN, Suit.HEART, 0)
    wild2 = Card(Rank.SEVEN, Suit.HEART, 1)

    def test_wild_fills_pair(self):
        hand = classify([self.wild, c(Rank.NINE)], self.level)
        assert hand.kind == HandKind.PAIR
        assert hand.main_rank == Rank.NINE
        assert hand.wild_count == 1
        assert hand == classify(cards_of_rank(Rank.NINE, 2), self.level)

    def test_wild_fills_triple(self):
        hand = classify([self.wild, c(Rank.NINE), c(Rank.NINE, Suit.CLUB)], self.level)
        assert hand.kind == HandKind.TRIPLE
        assert hand.main_rank == Rank.NINE
        assert hand.wild_count == 1

    def test_two_wilds_fill_triple(self):
        hand = classify([self.wild, self.wild2, c(Rank.QUEEN)], self.level)
        assert hand.kind == HandKind.TRIPLE
        assert hand.main_rank == Rank.QUEEN
        assert hand.wild_count == 2

    def test_wild_pair_of_two(self):
        hand = classify([self.wild, c(Rank.TWO)], self.level)
        assert hand.main_rank == Rank.TWO

    def test_wild_cannot_replace_joker(self):
        assert classify([self.wild, SMALL], self.level) is None
        assert classify([self.wild, SMALL, BIG], self.level) is None

    def test_wild_with_natural_level_card_is_plain_pair(self):
        hand = classify([self.wild, c(Rank.SEVEN, Suit.CLUB)], self.level)
        assert hand.main_rank == Rank.SEVEN
        assert hand.wild_count == 0

    def test_level_pair_strength_ignores_suits(self):
        all_wild = classify([self.wild, self.wild2], self.level)
        mixed = classify([self.wild, c(Rank.SEVEN)], self.level)
        plain = classify([c(Rank.SEVEN), c(Rank.SEVEN, Suit.CLUB)], self.level)
        assert all_wild == mixed == plain
        assert all_wild.main_rank == Rank.SEVEN

    def test_non_heart_level_card_is_not_wild(self):
        assert classify([c(Rank.SEVEN, Suit.CLUB), c(Rank.NINE)], self.level) is None

    def test_wild_does_not_fill_straight_gap(self):
        cards = [c(Rank.THREE), c(Rank.FOUR, Suit.DIAMOND), c(Rank.FIVE, Suit.CLUB),
                 c(Rank.SIX), self.wild]
        # 3-4-5-6 + 红桃7：红桃7按本身点数参与，恰好构成顺子
        assert classify(cards, self.level).kind == HandKind.STRAIGHT
        gap = [c(Rank.THREE), c(Rank.FOUR, Suit.DIAMOND), c(Rank.FIVE, Suit.CLUB),
               c(Rank.SIX), Card(Rank.NINE, Suit.HEART)]
        assert classify(gap, Rank.NINE) is None

    def test_wild_does_not_complete_bomb(self):
        cards = [self.wild] + [c(Rank.QUEEN, s) for s in (Suit.SPADE, Suit.DIAMOND, Suit.CLUB)]
        assert classify(cards, self.level) is None

    def test_wild_does_not_complete_pair_straight(self):
        cards = (cards_of_rank(Rank.THREE, 2) + cards_of_rank(Rank.FOUR, 2)
                 + [c(Rank.FIVE), self.wild])
        assert classify(cards, self.level) is None

    def test_wild_does_not_complete_triple_with_pair(self):
        cards = [self.wild, c(Rank.NINE), c(Rank.NINE, Suit.CLUB),
                 c(Rank.FIVE), c(Rank.FIVE, Suit.CLUB)]
        assert classify(cards, self.level) is None

    def test_heart_level_single_elevated(self):
        wild = classify([self.wild], self.level)
        two = classify([c(Rank.TWO)], self.level)
        small = classify([SMALL], self.level)
        assert two.strength < wild.strength < small.strength

    def test_non_heart_level_single_not_elevated(self):
        spade_seven = classify([c(Rank.SEVEN)], self.level)
        eight = classify([c(Rank.EIGHT)], self.level)
        assert spade_seven.strength < eight.strength


# ============================================================
#  级数点数的对子/三张/三带二
# ============================================================

class TestLevelGroups:
    """级数点数的牌组整组升值：大于2的同型牌，小于王对/三王"""

    level = Rank.SEVEN

    def test_level_pair_above_twos_below_jokers(self):
        sevens = classify([c(Rank.SEVEN), c(Rank.SEVEN, Suit.CLUB)], self.level)
        twos = classify(cards_of_rank(Rank.TWO, 2), self.level)
        jokers = classify([SMALL, BIG], self.level)
        assert twos.strength < sevens.strength < jokers.strength

    def test_pair_of_eights_below_level_pair(self):
        mixed = classify([Card(Rank.SEVEN, Suit.HEART), c(Rank.SEVEN)], self.level)
        eights = classify(cards_of_rank(Rank.EIGHT, 2), self.level)
        assert eights.strength < mixed.strength

    def test_level_triple_above_twos(self):
        sevens = classify([c(Rank.SEVEN), c(Rank.SEVEN, Suit.CLUB), c(Rank.SEVEN, Suit.DIAMOND)], self.level)
        twos = classify(cards_of_rank(Rank.TWO, 3), self.level)
        jokers = classify([SMALL, SMALL2, BIG], self.level)
        assert twos.strength < sevens.strength < jokers.strength

    def test_level_triple_same_with_or_without_heart(self):
        with_heart = classify(cards_of_rank(Rank.SEVEN, 3), self.level)
        without = classify([c(Rank.SEVEN), c(Rank.SEVEN, Suit.CLUB), c(Rank.SEVEN, Suit.DIAMOND)], self.level)
        assert with_heart == without

    def test_level_triple_with_pair_above_twos(self):
        sevens = classify(cards_of_rank(Rank.SEVEN, 3) + cards_of_rank(Rank.THREE, 2), self.level)
        twos = classify(cards_of_rank(Rank.TWO, 3) + cards_of_rank(Rank.ACE, 2), self.level)
        assert sevens.kind == twos.kind == HandKind.TRIPLE_WITH_PAIR
        assert sevens.strength > twos.strength

    def test_level_pair_as_attachment_does_not_lift(self):
        low = classify(cards_of_rank(Rank.FOUR, 3) + cards_of_rank(Rank.SEVEN, 2), self.level)
        high = classify(cards_of_rank(Rank.FIVE, 3) + cards_of_rank(Rank.THREE, 2), self.level)
        assert high.strength > low.strength

    def test_same_groups_unelevated_at_other_level(self):
        sevens = classify([c(Rank.SEVEN), c(Rank.SEVEN, Suit.CLUB)], Rank.TWO)
        eights = classify(cards_of_rank(Rank.EIGHT, 2), Rank.TWO)
        assert sevens.strength < eights.strength

    def test_single_still_heart_only(self):
        spade = classify([c(Rank.SEVEN)], self.level)
        two = classify([c(Rank.TWO)], self.level)
        assert spade.strength < two.strength


# ============================================================
#  顺子类测试
# ============================================================

class TestStraights:
    """顺子、连对、钢板"""

    def test_straight_5(self):
        hand = classify(run(Rank.THREE, 5), LEVEL)
        assert hand.kind == HandKind.STRAIGHT
        assert hand.main_rank == Rank.SEVEN
        assert hand.span == 5

    def test_straight_to_ace(self):
        hand = classify(run(Rank.TEN, 5), LEVEL)
        assert hand.kind == HandKind.STRAIGHT
        assert hand.main_rank == Rank.ACE

    def test_straight_12(self):
        """最长顺子: 3到A共12张"""
        hand = classify(run(Rank.THREE, 12), LEVEL)
        assert hand.kind == HandKind.STRAIGHT
        assert hand.span == 12

    def test_straight_with_2_invalid(self):
        cards = run(Rank.JACK, 4) + [c(Rank.TWO, Suit.DIAMOND)]
        assert classify(cards, LEVEL) is None

    def test_straight_with_low_ace_invalid(self):
        cards = [c(Rank.ACE), c(Rank.TWO, Suit.DIAMOND)] + run(Rank.THREE, 3)
        assert classify(cards, Rank.FIVE) is None

    def test_straight_with_joker_invalid(self):
        assert classify(run(Rank.THREE, 4) + [SMALL], LEVEL) is None

    def test_straight_with_gap_invalid(self):
        cards = run(Rank.THREE, 4) + [c(Rank.NINE)]
        assert classify(cards, LEVEL) is None

    def test_straight_four_cards_invalid(self):
        assert classify(run(Rank.THREE, 4), LEVEL) is None

    def test_pair_straight_3(self):
        cards = (cards_of_rank(Rank.THREE, 2)
                 + cards_of_rank(Rank.FOUR, 2)
                 + cards_of_rank(Rank.FIVE, 2))
        hand = classify(cards, LEVEL)
        assert hand.kind == HandKind.PAIR_STRAIGHT
        assert hand.main_rank == Rank.FIVE
        assert hand.span == 3

    def test_pair_straight_with_2_invalid(self):
        cards = (cards_of_rank(Rank.KING, 2)
                 + cards_of_rank(Rank.ACE, 2)
                 + cards_of_rank(Rank.TWO, 2))
        assert classify(cards, LEVEL) is None

    def test_two_pairs_invalid(self):
        cards = cards_of_rank(Rank.THREE, 2) + cards_of_rank(Rank.FOUR, 2)
        assert classify(cards, LEVEL) is None

    def test_triple_straight_2(self):
        """钢板: 333-444"""
        cards = cards_of_rank(Rank.THREE, 3) + cards_of_rank(Rank.FOUR, 3)
        hand = classify(cards, LEVEL)
        assert hand.kind == HandKind.TRIPLE_STRAIGHT
        assert hand.main_rank == Rank.FOUR
        assert hand.span == 2

    def test_triple_straight_3(self):
        cards = (cards_of_rank(Rank.THREE, 3)
                 + cards_of_rank(Rank.FOUR, 3)
                 + cards_of_rank(Rank.FIVE, 3))
        hand = classify(cards, LEVEL)
        assert hand.kind == HandKind.TRIPLE_STRAIGHT
        assert hand.span == 3

    def test_triples_not_consecutive_invalid(self):
        cards = cards_of_rank(Rank.THREE, 3) + cards_of_rank(Rank.FIVE, 3)
        assert classify(cards, LEVEL) is None

    def test_level_rank_keeps_natural_value_in_runs(self):
        cards = (cards_of_rank(Rank.SIX, 2)
                 + cards_of_rank(Rank.SEVEN, 2)
                 + cards_of_rank(Rank.EIGHT, 2))
        hand = classify(cards, Rank.SEVEN)
        assert hand.kind == HandKind.PAIR_STRAIGHT
        assert hand.main_rank == Rank.EIGHT


# ============================================================
#  炸弹类测试
# ============================================================

class TestBombs:
    """普通炸弹、同花顺"""

    @pytest.mark.parametrize("count,tier", [
        (4, BombTier.FOUR), (5, BombTier.FIVE), (6, BombTier.SIX),
        (7, BombTier.SEVEN), (8, BombTier.EIGHT),
    ])
    def test_bomb_sizes(self, count, tier):
        hand = classify(cards_of_rank(Rank.QUEEN, count), LEVEL)
        assert hand.kind == HandKind.BOMB
        assert hand.size == count
        assert hand.bomb_tier == tier
        assert hand.main_rank == Rank.QUEEN

    def test_bomb_of_twos_is_lowest(self):
        twos = classify(cards_of_rank(Rank.TWO, 4), Rank.FIVE)
        threes = classify(cards_of_rank(Rank.THREE, 4), Rank.FIVE)
        assert twos.strength < threes.strength

    def test_level_bomb_not_elevated(self):
        sevens = classify(cards_of_rank(Rank.SEVEN, 4), Rank.SEVEN)
        eights = classify(cards_of_rank(Rank.EIGHT, 4), Rank.SEVEN)
        assert sevens.strength < eights.strength

    def test_straight_flush(self):
        hand = classify(run(Rank.THREE, 5, Suit.SPADE), LEVEL)
        assert hand.kind == HandKind.STRAIGHT_FLUSH
        assert hand.family == Family.BOMB
        assert hand.bomb_tier == BombTier.STRAIGHT_FLUSH
        assert hand.span == 5
        assert hand.main_rank == Rank.SEVEN

    def test_straight_flush_with_heart_level_card(self):
        hand = classify(run(Rank.FIVE, 5, Suit.HEART), Rank.SEVEN)
        assert hand.kind == HandKind.STRAIGHT_FLUSH

    def test_flush_without_run_invalid(self):
        cards = [c(r) for r in (Rank.THREE, Rank.FIVE, Rank.SEVEN, Rank.NINE, Rank.JACK)]
        assert classify(cards, LEVEL) is None

    def test_straight_flush_longer_than_five(self):
        hand = classify(run(Rank.EIGHT, 7, Suit.CLUB), LEVEL)
        assert hand.kind == HandKind.STRAIGHT_FLUSH
        assert hand.span == 7

    def test_nine_of_a_kind_invalid(self):
        cards = cards_of_rank(Rank.FIVE, 8) + [c(Rank.FIVE)]
        assert classify(cards, LEVEL) is None


# ============================================================
#  级数参数与全函数性
# ============================================================

class TestLevelAndTotality:

    def test_level_accepts_number_and_symbol(self):
        card = [Card(Rank.ACE, Suit.HEART)]
        assert classify(card, 14) == classify(card, "A") == classify(card, Rank.ACE)

    def test_joker_level_rejected(self):
        with pytest.raises(ValueError):
            classify([c(Rank.THREE)], Rank.SMALL_JOKER)

    def test_accepts_any_iterable(self):
        hand = classify(iter(cards_of_rank(Rank.NINE, 2)), LEVEL)
        assert hand.kind == HandKind.PAIR

    def test_every_small_subset_classifies_or_none(self):
        deck = random.Random(7).sample(create_deck(), 16)
        for size in range(1, 5):
            for combo in combinations(deck, size):
                hand = classify(combo, Rank.SEVEN)
                assert hand is None or hand.size == size

    def test_classification_ignores_order(self):
        cards = cards_of_rank(Rank.JACK, 3) + cards_of_rank(Rank.FIVE, 2)
        assert classify(cards, LEVEL) == classify(list(reversed(cards)), LEVEL)


class TestClassifyCached:

    def setup_method(self):
        classify_cache_clear()

    def test_matches_classify(self):
        cards = run(Rank.THREE, 5)
        assert classify_cached(cards, LEVEL) == classify(cards, LEVEL)

    def test_cache_hit_ignores_order(self):
        cards = cards_of_rank(Rank.NINE, 3)
        classify_cached(cards, LEVEL)
        classify_cached(list(reversed(cards)), LEVEL)
        assert classify_cache_info().hits == 1

    def test_cache_key_includes_level(self):
        card = [Card(Rank.SEVEN, Suit.HEART)]
        at_two = classify_cached(card, Rank.TWO)
        at_seven = classify_cached(card, Rank.SEVEN)
        assert at_seven.strength > at_two.strength
        assert classify_cache_info().misses == 2
