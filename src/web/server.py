"""HTTP 规则服务 - 供浏览器客户端调用的牌型识别、比较与出牌校验接口

服务本身不保存对局状态：级数、上家出牌等都由客户端随请求带上。
"""

import logging
import os
import random
from typing import List, Optional, Union

from fastapi import FastAPI, HTTPException
from pydantic import BaseModel

from src.engine.card import Card, Rank, RANK_DISPLAY, create_deck, shuffle_and_deal, parse_cards
from src.engine.hand_type import ClassifiedHand
from src.engine.hand_detector import classify
from src.engine.comparator import compare, Verdict
from src.engine.ranking import to_level, is_level_card
from src.engine.validator import validate
from src.ui.renderer import describe_hand

logger = logging.getLogger(__name__)

# 请求未带级数时使用的默认级数
DEFAULT_LEVEL = os.environ.get("GUANDAN_LEVEL", "2")


# ============================================================
#  请求模型
# ============================================================

class ClassifyRequest(BaseModel):
    cards: List[str]
    level: Optional[Union[int, str]] = None


class CompareRequest(BaseModel):
    challenger: List[str]
    incumbent: List[str]
    level: Optional[Union[int, str]] = None


class ValidateRequest(BaseModel):
    play: List[str]
    incumbent: Optional[List[str]] = None
    hand: Optional[List[str]] = None
    level: Optional[Union[int, str]] = None


# ============================================================
#  序列化工具
# ============================================================

def card_to_dict(c: Card, level: Optional[Rank] = None) -> dict:
    """将 Card 序列化为前端可用的 dict"""
    return {
        "rank": int(c.rank),
        "suit": c.suit.value,
        "copy_tag": c.copy_tag,
        "display": c.display,
        "is_level_card": level is not None and is_level_card(c, level),
    }


def hand_to_dict(hand: Optional[ClassifiedHand]) -> Optional[dict]:
    """将 ClassifiedHand 序列化，非法牌型返回 None"""
    if hand is None:
        return None
    return {
        "kind": hand.kind.value,
        "family": hand.family.value,
        "name": describe_hand(hand),
        "strength": hand.strength,
        "span": hand.span,
        "size": hand.size,
        "main_rank": RANK_DISPLAY[hand.main_rank] if hand.main_rank is not None else None,
        "wild_count": hand.wild_count,
    }


def _parse(cards: Optional[List[str]]) -> Optional[List[Card]]:
    if cards is None:
        return None
    try:
        return parse_cards(" ".join(cards))
    except ValueError as e:
        logger.warning("无法解析的牌: %s", e)
        raise HTTPException(status_code=400, detail=str(e))


def _level(value: Optional[Union[int, str]]) -> Rank:
    try:
        return to_level(DEFAULT_LEVEL if value is None else value)
    except ValueError as e:
        logger.warning("无效的级数: %r", value)
        raise HTTPException(status_code=400, detail=str(e))


# ============================================================
#  FastAPI 应用
# ============================================================

app = FastAPI(title="掼蛋规则引擎")


@app.post("/api/classify")
async def classify_endpoint(req: ClassifyRequest) -> dict:
    """识别一组牌的牌型"""
    level = _level(req.level)
    cards = _parse(req.cards)
    hand = classify(cards, level)
    logger.info("classify %s (级数 %s) -> %s", cards, RANK_DISPLAY[level], hand)
    return {
        "level": RANK_DISPLAY[level],
        "valid": hand is not None,
        "cards": [card_to_dict(c, level) for c in cards],
        "hand": hand_to_dict(hand),
    }


@app.post("/api/compare")
async def compare_endpoint(req: CompareRequest) -> dict:
    """比较两手牌：challenger 能否压过 incumbent"""
    level = _level(req.level)
    challenger = classify(_parse(req.challenger), level)
    incumbent = classify(_parse(req.incumbent), level)
    if challenger is None or incumbent is None:
        raise HTTPException(status_code=400, detail="无效的牌型")
    verdict = compare(challenger, incumbent)
    return {
        "level": RANK_DISPLAY[level],
        "verdict": verdict.value,
        "beats": verdict is Verdict.BEATS,
        "challenger": hand_to_dict(challenger),
        "incumbent": hand_to_dict(incumbent),
    }


@app.post("/api/validate")
async def validate_endpoint(req: ValidateRequest) -> dict:
    """校验一次出牌（incumbent 为空表示首出）"""
    level = _level(req.level)
    play = _parse(req.play)
    result = validate(play, _parse(req.incumbent), _parse(req.hand), level)
    logger.info("validate %s -> %s", play, result.reason or "ACCEPTED")
    return {
        "level": RANK_DISPLAY[level],
        "accepted": result.accepted,
        "reason": result.reason.value if result.reason else None,
        "message": result.message,
        "hand": hand_to_dict(result.hand),
        "incumbent": hand_to_dict(result.incumbent),
    }


@app.get("/api/deal")
async def deal_endpoint(seed: Optional[int] = None, level: Optional[str] = None) -> dict:
    """洗牌发牌，返回四家各27张手牌"""
    lvl = _level(level)
    rng = random.Random(seed)
    hands = shuffle_and_deal(create_deck(), rng)
    return {
        "level": RANK_DISPLAY[lvl],
        "hands": [[card_to_dict(c, lvl) for c in hand] for hand in hands],
    }
