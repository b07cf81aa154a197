#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
中奖核对：把一注号码与最近若干期开奖逐期比对，给出中奖等级与奖金。

奖金单位为分；一、二等奖为浮动奖金，这里使用固定的模拟金额。
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Iterable, List, Optional, Sequence

from lucky.draw import Ticket
from lucky.errors import InvalidConstraintError

# 每个等级：(等级名, 奖金(分), 命中组合[(红球命中数, 蓝球命中数), ...])，按等级从高到低匹配
PRIZE_TABLES = {
    "ssq": [
        ("一等奖", 500000000, [(6, 1)]),
        ("二等奖", 10000000, [(6, 0)]),
        ("三等奖", 300000, [(5, 1)]),
        ("四等奖", 20000, [(5, 0), (4, 1)]),
        ("五等奖", 1000, [(4, 0), (3, 1)]),
        ("六等奖", 500, [(2, 1), (1, 1), (0, 1)]),
    ],
    "dlt": [
        ("一等奖", 1000000000, [(5, 2)]),
        ("二等奖", 80000000, [(5, 1)]),
        ("三等奖", 1000000, [(5, 0)]),
        ("四等奖", 300000, [(4, 2)]),
        ("五等奖", 30000, [(4, 1), (3, 2)]),
        ("六等奖", 10000, [(4, 0), (3, 1), (2, 2)]),
        ("七等奖", 1500, [(3, 0), (2, 1), (1, 2), (0, 2)]),
        ("八等奖", 500, [(2, 0), (1, 1), (0, 1)]),
    ],
}

DEFAULT_CHECK_PERIODS = 15


@dataclass(frozen=True)
class PrizeLevel:
    name: str
    amount: int


@dataclass
class WinningMatch:
    period: str
    date: str
    red_balls: List[int]
    blue_balls: List[int]
    red_matches: int
    blue_matches: int
    level: PrizeLevel

    def to_dict(self) -> dict:
        return {
            "period": self.period,
            "drawDate": self.date,
            "redBalls": self.red_balls,
            "blueBalls": self.blue_balls,
            "redMatches": self.red_matches,
            "blueMatches": self.blue_matches,
            "winLevel": self.level.name,
            "prizeAmount": self.level.amount,
        }


@dataclass
class WinningReport:
    ticket: Ticket
    checked_periods: int = 0
    matches: List[WinningMatch] = field(default_factory=list)

    @property
    def total_matches(self) -> int:
        return len(self.matches)

    @property
    def total_prize(self) -> int:
        return sum(m.level.amount for m in self.matches)

    def to_dict(self) -> dict:
        return {
            "ticket": self.ticket.to_dict(),
            "checkedPeriods": self.checked_periods,
            "matches": [m.to_dict() for m in self.matches],
            "totalMatches": self.total_matches,
            "totalPrize": self.total_prize,
        }


def count_matches(picked: Iterable[int], drawn: Iterable[int]) -> int:
    drawn_set = set(drawn)
    return sum(1 for n in picked if n in drawn_set)


def prize_level(game_code: str, red_matches: int, blue_matches: int) -> Optional[PrizeLevel]:
    for name, amount, combos in PRIZE_TABLES.get(game_code, []):
        if (red_matches, blue_matches) in combos:
            return PrizeLevel(name, amount)
    return None


def _validate_zone(label: str, balls: Sequence[int], spec) -> None:
    if len(balls) != spec.select_count:
        raise InvalidConstraintError(f"{label}数量错误，需要{spec.select_count}个")
    if any(not spec.contains(n) for n in balls):
        raise InvalidConstraintError(f"{label}号码超出范围({spec.pool_min}-{spec.pool_max})")
    if len(set(balls)) != len(balls):
        raise InvalidConstraintError(f"{label}号码重复")


def validate_ticket(game, ticket: Ticket) -> None:
    _validate_zone("红球", ticket.red_balls, game.red)
    _validate_zone("蓝球", ticket.blue_balls, game.blue)


def check_ticket(
    game, ticket: Ticket, records: Sequence[dict], periods: int = DEFAULT_CHECK_PERIODS
) -> WinningReport:
    """records 为从新到旧的开奖记录，只核对最近 periods 期"""
    validate_ticket(game, ticket)
    recent = list(records[:max(periods, 0)])
    report = WinningReport(ticket=ticket, checked_periods=len(recent))

    for rec in recent:
        red_balls = list(rec.get("red_balls") or [])
        blue_balls = list(rec.get("blue_balls") or [])
        red_matches = count_matches(ticket.red_balls, red_balls)
        blue_matches = count_matches(ticket.blue_balls, blue_balls)
        level = prize_level(game.code, red_matches, blue_matches)
        if level is None:
            continue
        report.matches.append(
            WinningMatch(
                period=str(rec.get("period", "")),
                date=str(rec.get("date", "")),
                red_balls=red_balls,
                blue_balls=blue_balls,
                red_matches=red_matches,
                blue_matches=blue_matches,
                level=level,
            )
        )
    return report
