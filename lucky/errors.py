#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
幸运选号异常定义

- InvalidConstraintError: 调用方传入的约束不合法（胆号/杀号冲突、越界等），属于调用方错误
- InsufficientPoolError: 排除号码过多，剩余可选号码不足以凑满一注，需提示用户
- UnknownGameError: 不支持的彩种代码
- HistoryFetchError: 本地无数据且抓取开奖数据失败
"""


class LuckyError(Exception):
    """所有选号相关异常的基类"""


class InvalidConstraintError(LuckyError, ValueError):
    pass


class InsufficientPoolError(LuckyError):
    def __init__(self, available: int, needed: int):
        self.available = available
        self.needed = needed
        super().__init__(f"可选号码不足：剩余 {available} 个，还需 {needed} 个")


class UnknownGameError(LuckyError, KeyError):
    def __init__(self, code: str):
        self.code = code
        super().__init__(code)

    def __str__(self) -> str:
        return f"不支持的彩种: {self.code}（仅支持 ssq 双色球 / dlt 大乐透）"


class HistoryFetchError(LuckyError):
    pass
