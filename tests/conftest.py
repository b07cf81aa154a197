import json

import pytest

from lucky.games import get_game


@pytest.fixture
def ssq():
    return get_game("ssq")


@pytest.fixture
def dlt():
    return get_game("dlt")


@pytest.fixture
def ssq_records():
    # 从新到旧
    return [
        {"period": "2025003", "date": "2025-01-07", "red_balls": [1, 2, 3, 4, 5, 6], "blue_balls": [7]},
        {"period": "2025002", "date": "2025-01-05", "red_balls": [1, 10, 17, 20, 30, 33], "blue_balls": [9]},
        {"period": "2025001", "date": "2025-01-02", "red_balls": [2, 11, 18, 21, 31, 32], "blue_balls": [7]},
    ]


@pytest.fixture
def data_dir(tmp_path, ssq_records):
    with open(tmp_path / "ssq_history.json", "w", encoding="utf-8") as f:
        json.dump(ssq_records, f, ensure_ascii=False)
    return tmp_path
