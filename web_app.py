#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
幸运选号 Web API（供小程序调用）

功能：
- 双色球 / 大乐透 机选，支持红蓝区胆号、杀号
- 历史开奖分页查询
- 近 10/30/50 期号码分布（出现次数、遗漏、奇偶比、大小比）
- 号码中奖核对

统一响应格式：{"code": 200, "message": "success", "data": ...}
"""

from __future__ import annotations

import math
import os
from typing import Optional

from flask import Flask, jsonify, request

from lucky.draw import NumberConstraints, Ticket, generate_tickets, parse_numbers
from lucky.errors import (
    HistoryFetchError,
    InsufficientPoolError,
    InvalidConstraintError,
    UnknownGameError,
)
from lucky.games import get_game, list_games
from lucky.history import LotteryHistory
from lucky.stats import table_to_list, zone_distribution
from lucky.winning import DEFAULT_CHECK_PERIODS, check_ticket

DISTRIBUTION_PERIODS = (10, 30, 50)
DEFAULT_TICKET_COUNT = 5

app = Flask(__name__)
app.config["DATA_DIR"] = os.environ.get("LUCKY_DATA_DIR", "data")
# 本地无数据时是否自动抓取开奖数据
app.config["AUTO_FETCH"] = os.environ.get("LUCKY_AUTO_FETCH", "1") == "1"


def get_history(game_code: str) -> LotteryHistory:
    """按彩种获取全局开奖历史实例，首次访问时加载本地数据（必要时抓取）"""
    game = get_game(game_code)
    if not hasattr(app, "_histories"):
        app._histories = {}  # type: ignore[attr-defined]
    histories = app._histories  # type: ignore[attr-defined]

    if game.code not in histories:
        history = LotteryHistory(game, data_dir=app.config["DATA_DIR"], silent=True)
        history.load_data()
        if not history.records and app.config["AUTO_FETCH"]:
            try:
                history.init_and_update()
            except HistoryFetchError as e:
                app.logger.warning("加载%s开奖数据失败: %s", game.name, e)
        histories[game.code] = history
    return histories[game.code]


def _ok(data, message: str = "success"):
    return jsonify({"code": 200, "message": message, "data": data})


def _error(status: int, message: str):
    return jsonify({"code": status, "message": message}), status


def _int_arg(value, name: str, default: Optional[int] = None) -> int:
    if value is None or value == "":
        if default is None:
            raise InvalidConstraintError(f"{name} 参数不能为空")
        return default
    try:
        return int(value)
    except (TypeError, ValueError):
        raise InvalidConstraintError(f"{name} 必须是数字")


@app.errorhandler(InsufficientPoolError)
def handle_insufficient_pool(e):
    return _error(400, f"{e}，请减少排除的号码")


@app.errorhandler(InvalidConstraintError)
def handle_invalid_constraint(e):
    return _error(400, str(e))


@app.errorhandler(UnknownGameError)
def handle_unknown_game(e):
    return _error(404, str(e))


@app.route("/ping", methods=["GET"])
def ping():
    return jsonify({"message": "pong"})


@app.route("/api/games", methods=["GET"])
def api_games():
    return _ok([g.to_dict() for g in list_games()])


@app.route("/api/games/<game_code>", methods=["GET"])
def api_game_detail(game_code):
    return _ok(get_game(game_code).to_dict())


@app.route("/api/numbers/random", methods=["POST"])
def api_random_numbers():
    """
    API: 机选号码。

    请求(JSON 或 form)字段：
    - gameCode: ssq / dlt
    - count: 注数 1-20，默认 5
    - redLocked / redExcluded / blueLocked / blueExcluded: 可选，"1,3,8" 或 数组
    """
    data = request.get_json(silent=True) or request.form
    game = get_game(data.get("gameCode", "ssq"))
    count = _int_arg(data.get("count"), "count", DEFAULT_TICKET_COUNT)

    red = NumberConstraints(
        locked=parse_numbers(data.get("redLocked")),
        excluded=parse_numbers(data.get("redExcluded")),
    )
    blue = NumberConstraints(
        locked=parse_numbers(data.get("blueLocked")),
        excluded=parse_numbers(data.get("blueExcluded")),
    )

    tickets = generate_tickets(game, count, red=red, blue=blue)
    return _ok(
        {
            "gameCode": game.code,
            "list": [t.to_dict() for t in tickets],
        }
    )


@app.route("/api/results/<game_code>", methods=["GET"])
def api_results(game_code):
    """历史开奖分页查询"""
    history = get_history(game_code)
    page = max(_int_arg(request.args.get("page"), "page", 1), 1)
    page_size = min(max(_int_arg(request.args.get("pageSize"), "pageSize", 20), 1), 100)

    records, total = history.page(page, page_size)
    return _ok(
        {
            "list": records,
            "total": total,
            "page": page,
            "pageSize": page_size,
            "pages": max(math.ceil(total / page_size), 1),
        }
    )


@app.route("/api/results/<game_code>/distribution", methods=["GET"])
def api_distribution(game_code):
    """近 N 期号码分布：出现次数 / 当前遗漏 / 最大遗漏 / 奇偶比 / 大小比"""
    game = get_game(game_code)
    period_count = _int_arg(request.args.get("periodCount"), "periodCount", 30)
    if period_count not in DISTRIBUTION_PERIODS:
        raise InvalidConstraintError("periodCount 只支持 10、30、50")

    history = get_history(game.code)
    red_table, red_ratios = zone_distribution(game, history.records, period_count, "red")
    blue_table, blue_ratios = zone_distribution(game, history.records, period_count, "blue")
    latest = history.latest()

    return _ok(
        {
            "gameCode": game.code,
            "periodCount": period_count,
            "latestPeriod": latest["period"] if latest else None,
            "red": table_to_list(red_table),
            "blue": table_to_list(blue_table),
            "redRatios": red_ratios.to_dict(),
            "blueRatios": blue_ratios.to_dict(),
        }
    )


@app.route("/api/numbers/check", methods=["POST"])
def api_check_numbers():
    """
    API: 核对一注号码在最近若干期的中奖情况。

    请求(JSON)字段：gameCode, redBalls, blueBalls, periods(默认15)
    """
    data = request.get_json(silent=True) or {}
    game = get_game(data.get("gameCode", ""))
    periods = _int_arg(data.get("periods"), "periods", DEFAULT_CHECK_PERIODS)
    if periods < 1:
        raise InvalidConstraintError("periods 必须大于 0")

    ticket = Ticket(
        red_balls=sorted(parse_numbers(data.get("redBalls"), unique=False)),
        blue_balls=sorted(parse_numbers(data.get("blueBalls"), unique=False)),
    )
    history = get_history(game.code)
    report = check_ticket(game, ticket, history.records, periods=periods)
    return _ok(report.to_dict(), message="查询成功")


if __name__ == "__main__":
    port = int(os.environ.get("PORT", 8000))
    # 默认在 0.0.0.0 监听，方便容器或局域网访问
    app.run(host="0.0.0.0", port=port, debug=True)
