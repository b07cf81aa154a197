#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
号码分布统计

对最近 N 期开奖（从新到旧）统计每个号码的：
- 出现次数 frequency
- 当前遗漏 current_missing：从最新一期往前连续未出现的期数
- 最大遗漏 max_missing：统计窗口内最长的连续未出现期数

并按出现次数加权计算奇偶比、大小比。输入为空或窗口 <= 0 时返回全零表，不报错。
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, List, Sequence, Tuple

from lucky.errors import InvalidConstraintError

ZONES = ("red", "blue")


@dataclass(frozen=True)
class HistoricalDraw:
    period: str
    date: str
    numbers: Tuple[int, ...]


@dataclass
class NumberStats:
    frequency: int = 0
    current_missing: int = 0
    max_missing: int = 0


@dataclass
class Ratios:
    odd: int = 0
    even: int = 0
    big: int = 0
    small: int = 0

    def to_dict(self) -> dict:
        return {
            "odd": self.odd,
            "even": self.even,
            "big": self.big,
            "small": self.small,
            "oddEven": f"{self.odd}:{self.even}",
            "bigSmall": f"{self.big}:{self.small}",
        }


def compute_distribution(
    history: Sequence[HistoricalDraw], window: int, pool_min: int, pool_max: int
) -> Dict[int, NumberStats]:
    table = {n: NumberStats() for n in range(pool_min, pool_max + 1)}
    if window <= 0 or not history:
        return table

    recent = [set(d.numbers) for d in history[:window]]
    for number, stats in table.items():
        run = 0
        seen = False
        for drawn in recent:
            if number in drawn:
                stats.frequency += 1
                seen = True
                run = 0
            else:
                run += 1
                if not seen:
                    stats.current_missing += 1
                if run > stats.max_missing:
                    stats.max_missing = run
    return table


def compute_ratios(table: Dict[int, NumberStats], threshold: int) -> Ratios:
    """奇偶 / 大小按出现次数加权：某号出现 5 次，则给对应分组贡献 5"""
    ratios = Ratios()
    for number, stats in table.items():
        if number % 2 == 1:
            ratios.odd += stats.frequency
        else:
            ratios.even += stats.frequency
        if number >= threshold:
            ratios.big += stats.frequency
        else:
            ratios.small += stats.frequency
    return ratios


def hot_numbers(table: Dict[int, NumberStats], minimum: int = 2) -> List[int]:
    """热号：窗口内出现次数 >= minimum 的号码"""
    return sorted(n for n, s in table.items() if s.frequency >= minimum)


def draws_from_records(records: Sequence[dict], zone: str) -> List[HistoricalDraw]:
    """把存储的开奖记录转换成某个号区的 HistoricalDraw 列表（保持从新到旧）"""
    if zone not in ZONES:
        raise InvalidConstraintError(f"未知号区: {zone}（red / blue）")
    key = "red_balls" if zone == "red" else "blue_balls"
    return [
        HistoricalDraw(
            period=str(rec.get("period", "")),
            date=str(rec.get("date", "")),
            numbers=tuple(rec.get(key) or ()),
        )
        for rec in records
    ]


def zone_distribution(game, records: Sequence[dict], window: int, zone: str):
    """返回 (分布表, 奇偶大小比)，供分布接口直接使用"""
    spec = game.zone_spec(zone)
    table = compute_distribution(
        draws_from_records(records, zone), window, spec.pool_min, spec.pool_max
    )
    return table, compute_ratios(table, game.big_threshold(zone))


def table_to_list(table: Dict[int, NumberStats]) -> List[dict]:
    return [
        {
            "number": n,
            "frequency": s.frequency,
            "currentMissing": s.current_missing,
            "maxMissing": s.max_missing,
        }
        for n, s in sorted(table.items())
    ]
