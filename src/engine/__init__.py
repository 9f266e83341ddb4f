# 掼蛋规则引擎模块
from .card import Card, Rank, Suit, create_deck, shuffle_and_deal, sort_cards, parse_card, parse_cards
from .ranking import DEFAULT_LEVEL, to_level, is_level_card, is_wildcard, normal_value, bomb_value, sort_by_level
from .hand_type import Family, HandKind, BombTier, ClassifiedHand
from .hand_detector import classify, classify_cached, classify_cache_info, classify_cache_clear
from .comparator import Verdict, compare, beats
from .validator import RejectReason, ValidationResult, validate
