#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
带约束的机选号码生成

功能：
- 按号码池（如红球 1-33 选 6）随机生成一组不重复、升序的号码
- 支持胆号（锁定，必出）与杀号（排除，必不出）
- 随机部分从剩余可选池中无放回抽样，不做“撞号重抽”，排除号码再多也不会卡住
- 随机源可注入（random.Random 兼容对象），便于测试复现
"""

from __future__ import annotations

import random
from dataclasses import dataclass, field
from enum import Enum
from typing import Dict, Iterable, List, Optional

from lucky.errors import InsufficientPoolError, InvalidConstraintError

# 单次最多生成注数（与小程序页面的 +/- 控件上限一致）
MAX_TICKETS = 20


@dataclass(frozen=True)
class DrawSpec:
    """一个号区的规则：号码范围 [pool_min, pool_max]，选 select_count 个"""

    pool_min: int
    pool_max: int
    select_count: int

    def __post_init__(self):
        if self.pool_max < self.pool_min:
            raise InvalidConstraintError(f"号码范围非法: {self.pool_min}-{self.pool_max}")
        if not 0 < self.select_count <= self.pool_size:
            raise InvalidConstraintError(
                f"选号个数 {self.select_count} 超出范围（1-{self.pool_size}）"
            )

    @property
    def pool_size(self) -> int:
        return self.pool_max - self.pool_min + 1

    def numbers(self) -> range:
        return range(self.pool_min, self.pool_max + 1)

    def contains(self, number: int) -> bool:
        return self.pool_min <= number <= self.pool_max


@dataclass(frozen=True)
class NumberConstraints:
    """胆号(locked) 与 杀号(excluded)，构造后不可变"""

    locked: frozenset = field(default_factory=frozenset)
    excluded: frozenset = field(default_factory=frozenset)

    def __post_init__(self):
        object.__setattr__(self, "locked", _to_number_set(self.locked))
        object.__setattr__(self, "excluded", _to_number_set(self.excluded))


def _to_int(value) -> int:
    """单个号码转整数：布尔值、带小数的数字不算号码"""
    if isinstance(value, bool):
        raise InvalidConstraintError(f"号码必须为整数: {value!r}")
    if isinstance(value, float):
        if not value.is_integer():
            raise InvalidConstraintError(f"号码必须为整数: {value!r}")
        return int(value)
    if isinstance(value, (int, str)):
        return int(value)
    raise TypeError(f"无法识别的号码: {value!r}")


def _to_number_set(values) -> frozenset:
    try:
        return frozenset(_to_int(n) for n in values)
    except InvalidConstraintError:
        raise
    except (TypeError, ValueError) as e:
        raise InvalidConstraintError(f"号码格式错误: {e}") from e


@dataclass
class Ticket:
    """一注号码：红球（前区）+ 蓝球（后区）"""

    red_balls: List[int]
    blue_balls: List[int]

    def to_dict(self) -> dict:
        return {"redBalls": list(self.red_balls), "blueBalls": list(self.blue_balls)}


def validate_constraints(spec: DrawSpec, constraints: NumberConstraints) -> None:
    """校验约束是否满足前置条件，不满足直接抛 InvalidConstraintError"""
    conflict = constraints.locked & constraints.excluded
    if conflict:
        raise InvalidConstraintError(f"号码不能同时为胆号和杀号: {sorted(conflict)}")

    out_of_range = sorted(
        n for n in constraints.locked | constraints.excluded if not spec.contains(n)
    )
    if out_of_range:
        raise InvalidConstraintError(
            f"号码超出范围({spec.pool_min}-{spec.pool_max}): {out_of_range}"
        )

    if len(constraints.locked) > spec.select_count:
        raise InvalidConstraintError(
            f"胆号最多 {spec.select_count} 个，当前 {len(constraints.locked)} 个"
        )


def draw(
    spec: DrawSpec,
    constraints: Optional[NumberConstraints] = None,
    rng: Optional[random.Random] = None,
) -> List[int]:
    """
    生成一组满足约束的号码（升序）。

    - 胆号全部入选；
    - 剩余个数从“号码池 - 胆号 - 杀号”中无放回均匀抽样；
    - 胆号已凑满时不消耗随机数。
    """
    if constraints is None:
        constraints = NumberConstraints()
    validate_constraints(spec, constraints)

    locked = constraints.locked
    needed = spec.select_count - len(locked)
    if needed == 0:
        return sorted(locked)

    eligible = [n for n in spec.numbers() if n not in locked and n not in constraints.excluded]
    if len(eligible) < needed:
        raise InsufficientPoolError(available=len(eligible), needed=needed)

    if rng is None:
        rng = random.Random()
    picked = rng.sample(eligible, needed)
    return sorted(locked.union(picked))


def generate_tickets(
    game,
    count: int,
    red: Optional[NumberConstraints] = None,
    blue: Optional[NumberConstraints] = None,
    rng: Optional[random.Random] = None,
) -> List[Ticket]:
    """按彩种规则生成 count 注号码，红/蓝区各自应用约束"""
    if not 1 <= count <= MAX_TICKETS:
        raise InvalidConstraintError(f"生成注数需在 1-{MAX_TICKETS} 之间，当前 {count}")
    if rng is None:
        rng = random.Random()

    tickets = []
    for _ in range(count):
        tickets.append(
            Ticket(
                red_balls=draw(game.red, red, rng),
                blue_balls=draw(game.blue, blue, rng),
            )
        )
    return tickets


def parse_numbers(raw, unique: bool = True) -> List[int]:
    """
    解析号码输入，如 '1,3,08' -> [1, 3, 8]；也接受 JSON 数组或单个数字。
    兼容中文逗号，非数字片段忽略；unique 时保持首次出现顺序去重。
    布尔值、带小数的数字抛 InvalidConstraintError。
    """
    if raw is None:
        return []
    if isinstance(raw, str):
        parts: Iterable = [p.strip() for p in raw.replace("，", ",").split(",") if p.strip()]
    elif isinstance(raw, (int, float)):
        parts = [raw]
    else:
        try:
            parts = list(raw)
        except TypeError as e:
            raise InvalidConstraintError(f"号码格式错误: {raw!r}") from e

    nums: List[int] = []
    for p in parts:
        try:
            n = _to_int(p)
        except InvalidConstraintError:
            raise
        except (TypeError, ValueError):
            continue
        if not unique or n not in nums:
            nums.append(n)
    return nums


class BallStatus(str, Enum):
    NORMAL = "normal"
    LOCKED = "locked"
    EXCLUDED = "excluded"


# 选号面板点击时的状态切换：lock 模式下点击只在 锁定/普通 间切换，exclude 模式同理
_TRANSITIONS = {
    "lock": {
        BallStatus.NORMAL: BallStatus.LOCKED,
        BallStatus.LOCKED: BallStatus.NORMAL,
        BallStatus.EXCLUDED: BallStatus.LOCKED,
    },
    "exclude": {
        BallStatus.NORMAL: BallStatus.EXCLUDED,
        BallStatus.EXCLUDED: BallStatus.NORMAL,
        BallStatus.LOCKED: BallStatus.EXCLUDED,
    },
}


def toggle_status(current: BallStatus, mode: str) -> BallStatus:
    try:
        return _TRANSITIONS[mode][BallStatus(current)]
    except (KeyError, ValueError):
        raise InvalidConstraintError(f"未知的选号模式或状态: {mode} / {current}")


class BallBoard:
    """一个号区的选号面板状态，每次交互后重新生成不可变的 NumberConstraints"""

    def __init__(self, spec: DrawSpec):
        self.spec = spec
        self.statuses: Dict[int, BallStatus] = {n: BallStatus.NORMAL for n in spec.numbers()}

    def toggle(self, number: int, mode: str = "lock") -> BallStatus:
        if number not in self.statuses:
            raise InvalidConstraintError(
                f"号码超出范围({self.spec.pool_min}-{self.spec.pool_max}): {number}"
            )
        new_status = toggle_status(self.statuses[number], mode)
        self.statuses[number] = new_status
        return new_status

    def clear(self) -> None:
        for n in self.statuses:
            self.statuses[n] = BallStatus.NORMAL

    def numbers_with(self, status: BallStatus) -> List[int]:
        return [n for n, s in self.statuses.items() if s == status]

    def constraints(self) -> NumberConstraints:
        return NumberConstraints(
            locked=self.numbers_with(BallStatus.LOCKED),
            excluded=self.numbers_with(BallStatus.EXCLUDED),
        )
