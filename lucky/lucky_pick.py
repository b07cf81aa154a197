#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
幸运选号命令行

  python -m lucky.lucky_pick pick --game ssq --count 5 --red-lock 1,8 --red-exclude 33
  python -m lucky.lucky_pick stats --game dlt --window 30 --chart pics/dlt.png
  python -m lucky.lucky_pick update --game ssq --max-pages 10
  python -m lucky.lucky_pick check --game ssq --red 1,2,3,4,5,6 --blue 7
"""

import argparse
import random
import sys

from lucky.draw import NumberConstraints, Ticket, generate_tickets, parse_numbers
from lucky.errors import InsufficientPoolError, LuckyError
from lucky.games import GAMES, get_game
from lucky.history import LotteryHistory
from lucky.report import export_distribution_hjson, format_pending_list, format_numbers, plot_distribution
from lucky.stats import hot_numbers, zone_distribution
from lucky.winning import check_ticket


def print_disclaimer():
    print("=" * 60)
    print("⚠️  彩票开奖完全随机，本工具仅供娱乐参考，不构成投注建议")
    print("⚠️  请理性购彩，量力而行，未满18周岁禁止购买")
    print("=" * 60)


def cmd_pick(args):
    game = get_game(args.game)
    red = NumberConstraints(parse_numbers(args.red_lock), parse_numbers(args.red_exclude))
    blue = NumberConstraints(parse_numbers(args.blue_lock), parse_numbers(args.blue_exclude))
    rng = random.Random(args.seed) if args.seed is not None else None

    tickets = generate_tickets(game, args.count, red=red, blue=blue, rng=rng)
    print(f"\n=== {game.name} 机选 {len(tickets)} 注 ===")
    print(format_pending_list(tickets), end="")
    return 0


def _load_history(args, game):
    history = LotteryHistory(game, data_dir=args.data_dir)
    if not history.load_data() or not history.records:
        history.init_and_update(max_pages=args.max_pages)
    return history


def cmd_stats(args):
    game = get_game(args.game)
    history = _load_history(args, game)
    red = zone_distribution(game, history.records, args.window, "red")
    blue = zone_distribution(game, history.records, args.window, "blue")

    print(f"\n=== {game.name} 近 {args.window} 期号码分布 ===")
    for label, (table, ratios) in (("红球", red), ("蓝球", blue)):
        print(f"\n{label}：号码 出现 当前遗漏 最大遗漏")
        for number, s in sorted(table.items()):
            print(f"  {number:02d}  {s.frequency:3d}  {s.current_missing:3d}  {s.max_missing:3d}")
        print(f"{label}奇偶比 {ratios.odd}:{ratios.even}  大小比 {ratios.big}:{ratios.small}")
        hot = hot_numbers(table)
        print(f"{label}热号（出现2次及以上）：{format_numbers(hot) if hot else '无'}")

    if args.chart:
        plot_distribution(game, red[0], blue[0], args.chart, window=args.window)
        print(f"\n号码分布图已保存为 {args.chart}")
    if args.hjson:
        export_distribution_hjson(game, args.window, red, blue, args.hjson, latest=history.latest())
        print(f"聚合数据已保存为 {args.hjson}")
    return 0


def cmd_update(args):
    game = get_game(args.game)
    history = LotteryHistory(game, data_dir=args.data_dir)
    history.init_and_update(max_pages=args.max_pages)
    latest = history.latest()
    print(f"当前最新一期: 期号 {latest['period']} 日期 {latest['date']}")
    return 0


def cmd_check(args):
    game = get_game(args.game)
    history = _load_history(args, game)
    ticket = Ticket(
        sorted(parse_numbers(args.red, unique=False)),
        sorted(parse_numbers(args.blue, unique=False)),
    )
    report = check_ticket(game, ticket, history.records, periods=args.periods)

    print(f"\n=== 核对近 {report.checked_periods} 期 ===")
    if not report.matches:
        print("未中奖")
    for m in report.matches:
        print(f"{m.period} ({m.date}): 红{m.red_matches} 蓝{m.blue_matches} -> "
              f"{m.level.name} {m.level.amount / 100:.0f}元")
    print(f"合计中奖 {report.total_matches} 次，奖金 {report.total_prize / 100:.0f} 元")
    return 0


def build_parser():
    parser = argparse.ArgumentParser(description="双色球 / 大乐透 幸运选号")
    parser.add_argument("--data-dir", default=None, help="开奖数据目录，默认 LUCKY_DATA_DIR 或 data")
    parser.add_argument("--max-pages", type=int, default=10, help="抓取开奖数据的最大页数")

    # 子命令里也可写数据选项；SUPPRESS 保证未填写时不覆盖顶层的值
    data_opts = argparse.ArgumentParser(add_help=False)
    data_opts.add_argument("--data-dir", default=argparse.SUPPRESS, help="开奖数据目录")
    data_opts.add_argument("--max-pages", type=int, default=argparse.SUPPRESS, help="抓取开奖数据的最大页数")

    sub = parser.add_subparsers(dest="command", required=True)

    def add_game(p):
        p.add_argument("--game", choices=sorted(GAMES), default="ssq", help="彩种")

    p = sub.add_parser("pick", help="机选号码（支持胆号/杀号）")
    add_game(p)
    p.add_argument("--count", type=int, default=5, help="注数 1-20")
    p.add_argument("--red-lock", default="", help="红球胆号，如 1,8")
    p.add_argument("--red-exclude", default="", help="红球杀号")
    p.add_argument("--blue-lock", default="", help="蓝球胆号")
    p.add_argument("--blue-exclude", default="", help="蓝球杀号")
    p.add_argument("--seed", type=int, default=None, help="随机种子（便于复现）")
    p.set_defaults(func=cmd_pick)

    p = sub.add_parser("stats", parents=[data_opts], help="近 N 期号码分布 / 遗漏统计")
    add_game(p)
    p.add_argument("--window", type=int, default=30, help="统计期数")
    p.add_argument("--chart", default=None, help="保存分布图 PNG 路径")
    p.add_argument("--hjson", default=None, help="保存聚合数据 HJSON 路径")
    p.set_defaults(func=cmd_stats)

    p = sub.add_parser("update", parents=[data_opts], help="抓取并更新开奖数据")
    add_game(p)
    p.set_defaults(func=cmd_update)

    p = sub.add_parser("check", parents=[data_opts], help="核对一注号码的中奖情况")
    add_game(p)
    p.add_argument("--red", required=True, help="红球号码，如 1,2,3,4,5,6")
    p.add_argument("--blue", required=True, help="蓝球号码")
    p.add_argument("--periods", type=int, default=15, help="核对最近期数")
    p.set_defaults(func=cmd_check)

    return parser


def main(argv=None):
    args = build_parser().parse_args(argv)
    print_disclaimer()
    try:
        return args.func(args)
    except InsufficientPoolError as e:
        print(f"❌ {e}，请减少杀号后重试")
        return 2
    except LuckyError as e:
        print(f"❌ {e}")
        return 1


if __name__ == "__main__":
    try:
        sys.exit(main())
    except KeyboardInterrupt:
        print("\n\n👋 用户中断，程序退出")
