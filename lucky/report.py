#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
输出：号码格式化、待选清单文本、号码分布图(PNG) 与 聚合数据(HJSON)
"""

import os
from datetime import datetime, timedelta, timezone

import hjson
import matplotlib

matplotlib.use("Agg")
import matplotlib.pyplot as plt  # noqa: E402

from lucky.stats import table_to_list  # noqa: E402

# 设置中文字体支持
plt.rcParams['font.sans-serif'] = ['SimHei', 'Arial Unicode MS', 'DejaVu Sans']
plt.rcParams['axes.unicode_minus'] = False


def format_numbers(numbers):
    return " ".join(f"{n:02d}" for n in numbers)


def format_ticket(ticket):
    return f"{format_numbers(ticket.red_balls)} | {format_numbers(ticket.blue_balls)}"


def format_pending_list(tickets):
    """待选清单复制文本，每注一行：第1注: 01 02 03 04 05 06 | 07"""
    return "".join(f"第{i}注: {format_ticket(t)}\n" for i, t in enumerate(tickets, 1))


def plot_distribution(game, red_table, blue_table, path, window=None):
    """绘制红/蓝球出现次数柱状图并保存为 PNG"""
    fig, (ax1, ax2) = plt.subplots(2, 1, figsize=(15, 10))
    suffix = f"（近{window}期）" if window else ""

    for ax, table, color, label in (
        (ax1, red_table, 'red', '红球' if game.code == 'ssq' else '前区'),
        (ax2, blue_table, 'blue', '蓝球' if game.code == 'ssq' else '后区'),
    ):
        nums = sorted(table)
        freqs = [table[n].frequency for n in nums]
        bars = ax.bar(nums, freqs, color=color, alpha=0.7)
        ax.set_title(f"{game.name}{label}出现频率分布{suffix}", fontsize=16, fontweight='bold')
        ax.set_xlabel(f"{label}号码", fontsize=12)
        ax.set_ylabel('出现次数', fontsize=12)
        ax.set_xticks(nums)
        ax.grid(True, alpha=0.3)

        for bar, freq in zip(bars, freqs):
            if freq > 0:
                ax.text(bar.get_x() + bar.get_width() / 2, bar.get_height() + 0.1,
                        str(freq), ha='center', va='bottom', fontsize=8)

    plt.tight_layout()
    directory = os.path.dirname(path)
    if directory:
        os.makedirs(directory, exist_ok=True)
    fig.savefig(path, dpi=150, bbox_inches='tight')
    plt.close(fig)
    return path


def export_distribution_hjson(game, window, red, blue, path, latest=None):
    """
    导出号码分布聚合数据（HJSON，带注释说明字段含义）
    red / blue 为 (分布表, 奇偶大小比) 二元组
    """
    red_table, red_ratios = red
    blue_table, blue_ratios = blue
    # 生成时间 UTC+8
    generated = datetime.now(timezone(timedelta(hours=8))).strftime('%Y年%m月%d日 %H:%M:%S')

    data = {
        "// 数据文件说明": f"{game.name}近{window}期号码分布统计",
        "metadata": {
            "game_code": game.code,
            "game_name": game.name,
            "period_count": window,
            "generated_time": generated,
            "timezone": "UTC+8",
            "latest_period": latest.get('period') if latest else None,
            "latest_date": latest.get('date') if latest else None,
        },
        "red_balls": {
            "// 数据结构": "number: 号码, frequency: 出现次数, currentMissing: 当前遗漏, maxMissing: 最大遗漏",
            "data": table_to_list(red_table),
            "// 比例说明": "奇偶、大小均按出现次数加权",
            "ratios": red_ratios.to_dict(),
            "big_threshold": game.red_big_threshold,
        },
        "blue_balls": {
            "data": table_to_list(blue_table),
            "ratios": blue_ratios.to_dict(),
            "big_threshold": game.blue_big_threshold,
        },
    }

    directory = os.path.dirname(path)
    if directory:
        os.makedirs(directory, exist_ok=True)
    with open(path, 'w', encoding='utf-8') as f:
        hjson.dump(data, f, ensure_ascii=False, indent=2)
    return path
