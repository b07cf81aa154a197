#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
彩种规则配置

大小号分界没有统一公式（双色球红球 17、大乐透前区 18），按彩种配置表维护。
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import List

from lucky.draw import DrawSpec
from lucky.errors import UnknownGameError


@dataclass(frozen=True)
class GameRule:
    code: str
    name: str
    red: DrawSpec
    blue: DrawSpec
    # 号码 >= 分界值 记为大号
    red_big_threshold: int
    blue_big_threshold: int
    # 期号格式：双色球 7 位（2025001），大乐透 5 位（25001）
    period_pattern: str

    def matches_period(self, period) -> bool:
        return bool(re.match(self.period_pattern, str(period or "")))

    def big_threshold(self, zone: str) -> int:
        return self.red_big_threshold if zone == "red" else self.blue_big_threshold

    def zone_spec(self, zone: str) -> DrawSpec:
        return self.red if zone == "red" else self.blue

    def to_dict(self) -> dict:
        return {
            "gameCode": self.code,
            "gameName": self.name,
            "redBallCount": self.red.pool_max,
            "redSelectCount": self.red.select_count,
            "blueBallCount": self.blue.pool_max,
            "blueSelectCount": self.blue.select_count,
            "redBigThreshold": self.red_big_threshold,
            "blueBigThreshold": self.blue_big_threshold,
        }


GAMES = {
    "ssq": GameRule(
        code="ssq",
        name="双色球",
        red=DrawSpec(1, 33, 6),
        blue=DrawSpec(1, 16, 1),
        red_big_threshold=17,
        blue_big_threshold=9,
        period_pattern=r"^\d{6,}$",
    ),
    "dlt": GameRule(
        code="dlt",
        name="大乐透",
        red=DrawSpec(1, 35, 5),
        blue=DrawSpec(1, 12, 2),
        red_big_threshold=18,
        blue_big_threshold=7,
        period_pattern=r"^\d{5}$",
    ),
}


def get_game(code: str) -> GameRule:
    try:
        return GAMES[(code or "").lower()]
    except KeyError:
        raise UnknownGameError(code)


def list_games() -> List[GameRule]:
    return [GAMES["ssq"], GAMES["dlt"]]
