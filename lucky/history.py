#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
开奖历史数据抓取与本地存储

- 双色球：中国福利彩票官方 API（findDrawNotice）
- 大乐透：中国体育彩票官方 API（getHistoryPageListV1）

数据按期号从新到旧保存在 data/<彩种>_history.json，
每条记录：{period, date, red_balls: [...], blue_balls: [...]}
"""

import json
import os
import random
import re

import requests

from lucky.errors import HistoryFetchError
from lucky.stats import draws_from_records

DATA_DIR = os.environ.get("LUCKY_DATA_DIR", "data")

SSQ_API_URL = "https://www.cwl.gov.cn/cwl_admin/front/cwlkj/search/kjxx/findDrawNotice"
DLT_API_URL = "https://webapi.sporttery.cn/gateway/lottery/getHistoryPageListV1.qry"

PAGE_SIZE = 30

USER_AGENTS = [
    'Mozilla/5.0 (Windows NT 10.0; Win64; x64) AppleWebKit/537.36 (KHTML, like Gecko) Chrome/120.0.0.0 Safari/537.36',
    'Mozilla/5.0 (Macintosh; Intel Mac OS X 10_15_7) AppleWebKit/537.36 (KHTML, like Gecko) Chrome/120.0.0.0 Safari/537.36',
    'Mozilla/5.0 (Windows NT 10.0; Win64; x64; rv:120.0) Gecko/20100101 Firefox/120.0',
    'Mozilla/5.0 (Macintosh; Intel Mac OS X 10_15_7) AppleWebKit/605.1.15 (KHTML, like Gecko) Version/17.1 Safari/605.1.15',
]


def _extract_date(text):
    match = re.search(r'(\d{4}-\d{2}-\d{2})', str(text or ''))
    if not match:
        raise ValueError(f"日期格式异常: {text}")
    return match.group(1)


def _split_numbers(text):
    return [int(x) for x in re.split(r'[\s,+]+', str(text or '').strip()) if x]


def parse_ssq_item(item):
    """解析福彩 API 单条记录：red='01,02,03,04,05,06', blue='07'"""
    red_balls = _split_numbers(item.get('red'))
    blue_balls = _split_numbers(item.get('blue'))
    if len(red_balls) != 6 or len(blue_balls) != 1:
        raise ValueError(f"号码数量异常: {item.get('red')} + {item.get('blue')}")
    return {
        'period': str(item.get('code', '')),
        'date': _extract_date(item.get('date')),
        'red_balls': sorted(red_balls),
        'blue_balls': blue_balls,
    }


def parse_dlt_item(item):
    """解析体彩 API 单条记录：lotteryDrawResult='05 07 08 15 33 06 10'，前5后2"""
    numbers = _split_numbers(item.get('lotteryDrawResult'))
    if len(numbers) < 7:
        raise ValueError(f"号码数量异常: {item.get('lotteryDrawResult')}")
    return {
        'period': str(item.get('lotteryDrawNum', '')),
        'date': _extract_date(item.get('lotteryDrawTime')),
        'red_balls': sorted(numbers[:5]),
        'blue_balls': sorted(numbers[5:7]),
    }


class LotteryHistory:
    """单个彩种的开奖历史"""

    max_retries = 3
    max_consecutive_failures = 3

    def __init__(self, game, data_dir=None, session=None, silent=False):
        self.game = game
        self.data_dir = data_dir or DATA_DIR
        self.silent = silent
        self.records = []

        self.session = session or requests.Session()
        if session is None:
            self._setup_session()

    def _log(self, message):
        if not self.silent:
            print(message)

    def _setup_session(self):
        """配置session的连接池与请求头"""
        adapter = requests.adapters.HTTPAdapter(
            pool_connections=10,
            pool_maxsize=20,
            max_retries=3
        )
        self.session.mount('http://', adapter)
        self.session.mount('https://', adapter)
        self._update_headers()

    def _update_headers(self):
        """更新请求头，使用随机User-Agent"""
        headers = {
            'User-Agent': random.choice(USER_AGENTS),
            'Accept': 'application/json, text/javascript, */*; q=0.01',
            'Accept-Language': 'zh-CN,zh;q=0.9,en;q=0.8',
            'Connection': 'keep-alive',
            'Cache-Control': 'no-cache',
        }
        if self.game.code == 'dlt':
            headers['Referer'] = 'https://webapi.sporttery.cn/'
        self.session.headers.update(headers)

    @property
    def data_path(self):
        return os.path.join(self.data_dir, f"{self.game.code}_history.json")

    # ---------- 本地存储 ----------

    def load_data(self):
        """从文件加载数据，文件不存在或损坏时返回 False"""
        try:
            with open(self.data_path, 'r', encoding='utf-8') as f:
                self.records = json.load(f)
            self._log(f"从 {self.data_path} 加载了 {len(self.records)} 期数据")
            return True
        except FileNotFoundError:
            self._log(f"文件 {self.data_path} 不存在")
            return False
        except json.JSONDecodeError:
            self._log(f"文件 {self.data_path} 内容解析失败")
            return False

    def save_data(self):
        os.makedirs(self.data_dir, exist_ok=True)
        with open(self.data_path, 'w', encoding='utf-8') as f:
            json.dump(self.records, f, ensure_ascii=False, indent=2)
        self._log(f"数据已保存到 {self.data_path}")

    def merge_records(self, new_records):
        """合并新记录，按期号去重，期号越大越新；返回新增期数。期号非法的记录（含本地文件中的）丢弃"""
        all_records = {
            rec['period']: rec for rec in self.records
            if isinstance(rec, dict) and self.game.matches_period(rec.get('period'))
        }
        added = 0
        for rec in new_records:
            if not isinstance(rec, dict) or not self.game.matches_period(rec.get('period')):
                continue
            if rec['period'] not in all_records:
                added += 1
            all_records[rec['period']] = rec

        # 同一彩种期号位数固定，按字符串排序即可
        self.records = [all_records[p] for p in sorted(all_records, reverse=True)]
        return added

    def latest(self):
        return self.records[0] if self.records else None

    def page(self, page=1, page_size=20):
        """分页，返回 (本页记录, 总数)"""
        page = max(int(page), 1)
        page_size = max(int(page_size), 1)
        start = (page - 1) * page_size
        return self.records[start:start + page_size], len(self.records)

    def as_draws(self, zone='red'):
        return draws_from_records(self.records, zone)

    # ---------- 网络抓取 ----------

    def _fetch_ssq_page(self, page_no):
        params = {
            'name': 'ssq',
            'pageNo': page_no,
            'pageSize': PAGE_SIZE,
            'systemType': 'PC'
        }
        response = self.session.get(SSQ_API_URL, params=params, timeout=30)
        response.raise_for_status()
        data = response.json()
        if data.get('state') != 0:
            raise HistoryFetchError(f"API返回错误: {data.get('message', '未知错误')}")
        return data.get('result') or [], parse_ssq_item

    def _fetch_dlt_page(self, page_no):
        params = {
            'gameNo': '85',
            'provinceId': '0',
            'pageSize': PAGE_SIZE,
            'isVerify': 1,
            'pageNo': page_no
        }
        response = self.session.get(DLT_API_URL, params=params, timeout=30)
        response.raise_for_status()
        data = response.json()
        if str(data.get('errorCode')) != '0':
            raise HistoryFetchError(f"API返回错误: {data.get('errorMessage', '未知错误')}")
        return (data.get('value') or {}).get('list') or [], parse_dlt_item

    def fetch_page(self, page_no):
        """抓取并解析一页数据，单条解析失败只跳过该条"""
        if self.game.code == 'ssq':
            items, parser = self._fetch_ssq_page(page_no)
        else:
            items, parser = self._fetch_dlt_page(page_no)

        records = []
        for item in items:
            try:
                records.append(parser(item))
            except (ValueError, TypeError, AttributeError) as e:
                self._log(f"⚠️  解析记录时出错: {e}")
        return records

    def fetch_history(self, max_pages=10):
        """逐页抓取，单页失败重试，连续多页失败则停止"""
        self._log(f"开始抓取{self.game.name}开奖数据...")
        fetched = []
        consecutive_failures = 0

        for page_no in range(1, max_pages + 1):
            records = None
            for attempt in range(1, self.max_retries + 1):
                try:
                    if attempt > 1:
                        self._update_headers()
                    self._log(f"🌐 正在请求第 {page_no} 页 (尝试 {attempt}/{self.max_retries})")
                    records = self.fetch_page(page_no)
                    break
                except requests.exceptions.Timeout:
                    self._log(f"⏰ 网络超时 (页面 {page_no}, 尝试 {attempt})")
                except requests.exceptions.ConnectionError:
                    self._log(f"🔌 连接错误 (页面 {page_no}, 尝试 {attempt})")
                except requests.exceptions.HTTPError as e:
                    self._log(f"🌐 HTTP错误: {e} (页面 {page_no}, 尝试 {attempt})")
                except (HistoryFetchError, ValueError) as e:
                    self._log(f"❌ 抓取第 {page_no} 页时出错: {e} (尝试 {attempt})")

            if records is None:
                consecutive_failures += 1
                self._log(f"💥 第 {page_no} 页重试 {self.max_retries} 次后仍然失败，跳过此页")
                if consecutive_failures >= self.max_consecutive_failures:
                    self._log(f"🛑 连续 {consecutive_failures} 页失败，停止抓取")
                    break
                continue

            consecutive_failures = 0
            if not records:
                self._log(f"📭 第 {page_no} 页无数据，结束。")
                break
            fetched.extend(records)
            if len(records) < PAGE_SIZE:
                break

        self._log(f"🎉 数据抓取完成，共获取 {len(fetched)} 期开奖数据")
        return fetched

    def init_and_update(self, max_pages=10):
        """
        初始化并更新历史数据：
        1. 读取本地数据；
        2. 抓取最新数据并合并去重，有新增则保存；
        3. 抓取失败但本地有数据时继续使用本地数据，两者皆无则抛 HistoryFetchError。
        """
        self._log(f"\n=== 初始化并更新{self.game.name}历史数据 ===")
        self.load_data()

        # 本地已有数据时只需抓最近几页补齐
        pages = max_pages if not self.records else min(max_pages, 2)
        try:
            fetched = self.fetch_history(max_pages=pages)
        except requests.exceptions.RequestException as e:
            self._log(f"❌ 抓取失败: {e}")
            fetched = []

        added = self.merge_records(fetched)
        if added:
            self.save_data()
            self._log(f"✅ 新增 {added} 期，合计 {len(self.records)} 期")
        else:
            self._log("📭 没有新增期数，无需保存。")

        if not self.records:
            raise HistoryFetchError(f"{self.game.name}无可用历史数据")
        return added
