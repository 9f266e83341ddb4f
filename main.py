"""掼蛋规则引擎 - 命令行入口"""

import sys
import random
import logging
import argparse
from typing import List, Optional

import uvicorn

from src.engine.card import create_deck, shuffle_and_deal, parse_cards
from src.engine.hand_detector import classify
from src.engine.ranking import to_level
from src.engine.validator import validate
from src.ui.renderer import TerminalRenderer

logger = logging.getLogger(__name__)


def cmd_classify(args: argparse.Namespace, renderer: TerminalRenderer) -> int:
    """识别牌型：合法返回0，非法返回1"""
    level = to_level(args.level)
    cards = parse_cards(args.cards)
    hand = classify(cards, level)
    renderer.show_classification(cards, hand, level)
    return 0 if hand is not None else 1


def cmd_validate(args: argparse.Namespace, renderer: TerminalRenderer) -> int:
    """校验出牌：接受返回0，拒绝返回1"""
    level = to_level(args.level)
    play = parse_cards(args.play)
    incumbent = parse_cards(args.incumbent) if args.incumbent else None
    result = validate(play, incumbent, None, level)
    renderer.show_validation(play, incumbent, result, level)
    return 0 if result.accepted else 1


def cmd_deal(args: argparse.Namespace, renderer: TerminalRenderer) -> int:
    """洗牌发牌并展示四家手牌"""
    level = to_level(args.level)
    hands = shuffle_and_deal(create_deck(), random.Random(args.seed))
    renderer.show_deal(list(hands), level)
    return 0


def cmd_serve(args: argparse.Namespace, renderer: TerminalRenderer) -> int:
    """启动 HTTP 规则服务"""
    logger.info("启动规则服务 %s:%d", args.host, args.port)
    uvicorn.run("src.web.server:app", host=args.host, port=args.port)
    return 0


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="掼蛋牌型识别与出牌校验")
    parser.add_argument("--no-color", action="store_true", help="关闭彩色输出")
    parser.add_argument("--verbose", action="store_true", help="输出调试日志")
    sub = parser.add_subparsers(dest="command", required=True)

    p = sub.add_parser("classify", help="识别一组牌的牌型")
    p.add_argument("cards", help="牌组，如 '♠3 ♠4 ♠5 ♠6 ♠7' 或 'S3 S4 S5 S6 S7'")
    p.add_argument("--level", default="2", help="当前级数 (默认2)")
    p.set_defaults(func=cmd_classify)

    p = sub.add_parser("validate", help="校验一次出牌能否压过上家")
    p.add_argument("play", help="要出的牌")
    p.add_argument("--incumbent", default=None, help="上家出的牌（不填表示首出）")
    p.add_argument("--level", default="2", help="当前级数 (默认2)")
    p.set_defaults(func=cmd_validate)

    p = sub.add_parser("deal", help="洗牌并发四家手牌")
    p.add_argument("--seed", type=int, default=None, help="随机种子")
    p.add_argument("--level", default="2", help="当前级数 (默认2)")
    p.set_defaults(func=cmd_deal)

    p = sub.add_parser("serve", help="启动 HTTP 规则服务")
    p.add_argument("--host", default="127.0.0.1")
    p.add_argument("--port", type=int, default=8000)
    p.set_defaults(func=cmd_serve)

    return parser


def main(argv: Optional[List[str]] = None) -> int:
    """命令行入口"""
    args = build_parser().parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )
    renderer = TerminalRenderer(color=not args.no_color)

    try:
        return args.func(args, renderer)
    except ValueError as e:
        print(f"输入错误: {e}", file=sys.stderr)
        return 2


if __name__ == "__main__":
    sys.exit(main())
