import pytest
import requests

from lucky.errors import HistoryFetchError
from lucky.history import PAGE_SIZE, LotteryHistory, parse_dlt_item, parse_ssq_item


class FakeResponse:
    def __init__(self, payload, status_code=200):
        self.payload = payload
        self.status_code = status_code

    def raise_for_status(self):
        if self.status_code >= 400:
            raise requests.exceptions.HTTPError(f"{self.status_code} Error")

    def json(self):
        return self.payload


class FakeSession:
    """按顺序返回预置响应；元素为异常实例时抛出"""

    def __init__(self, responses):
        self.responses = list(responses)
        self.headers = {}
        self.calls = []

    def get(self, url, params=None, timeout=None):
        self.calls.append((url, params))
        item = self.responses.pop(0)
        if isinstance(item, Exception):
            raise item
        return item


def ssq_item(code, red="01,02,03,04,05,06", blue="07", date="2025-01-07(二)"):
    return {"code": code, "date": date, "red": red, "blue": blue}


def test_parse_ssq_item():
    record = parse_ssq_item(ssq_item("2025003", red="06,05,04,03,02,01"))
    assert record == {
        "period": "2025003",
        "date": "2025-01-07",
        "red_balls": [1, 2, 3, 4, 5, 6],
        "blue_balls": [7],
    }


def test_parse_ssq_item_rejects_bad_numbers():
    with pytest.raises(ValueError):
        parse_ssq_item(ssq_item("2025003", red="01,02"))


@pytest.mark.parametrize("result", ["05 07 08 15 33 10 06", "05,07,08,15,33+10,06"])
def test_parse_dlt_item(result):
    record = parse_dlt_item(
        {"lotteryDrawNum": "25001", "lotteryDrawTime": "2025-01-01", "lotteryDrawResult": result}
    )
    assert record["period"] == "25001"
    assert record["red_balls"] == [5, 7, 8, 15, 33]
    assert record["blue_balls"] == [6, 10]


def test_merge_records_dedupes_and_sorts(ssq, ssq_records):
    history = LotteryHistory(ssq, session=FakeSession([]), silent=True)
    history.records = ssq_records[1:]

    added = history.merge_records([ssq_records[0], ssq_records[1], {"period": "25001"}])

    assert added == 1
    assert [r["period"] for r in history.records] == ["2025003", "2025002", "2025001"]
    assert history.latest()["period"] == "2025003"


def test_save_and_load(ssq, ssq_records, tmp_path):
    history = LotteryHistory(ssq, data_dir=str(tmp_path / "data"), session=FakeSession([]), silent=True)
    assert history.load_data() is False
    history.records = ssq_records
    history.save_data()

    reloaded = LotteryHistory(ssq, data_dir=str(tmp_path / "data"), session=FakeSession([]), silent=True)
    assert reloaded.load_data() is True
    assert reloaded.records == ssq_records


def test_page(ssq, ssq_records):
    history = LotteryHistory(ssq, session=FakeSession([]), silent=True)
    history.records = ssq_records
    records, total = history.page(2, 2)
    assert total == 3
    assert [r["period"] for r in records] == ["2025001"]
    assert [d.numbers for d in history.as_draws("blue")] == [(7,), (9,), (7,)]


def test_fetch_history_retries_and_skips_bad_items(ssq):
    payload = {"state": 0, "result": [ssq_item("2025002"), ssq_item("2025001", blue="")]}
    session = FakeSession([requests.exceptions.Timeout(), FakeResponse(payload)])
    history = LotteryHistory(ssq, session=session, silent=True)

    records = history.fetch_history(max_pages=5)

    assert [r["period"] for r in records] == ["2025002"]
    assert len(session.calls) == 2
    assert session.calls[0][1]["name"] == "ssq"
    assert "User-Agent" in session.headers


def test_fetch_history_dlt_pages(dlt):
    full_page = {
        "errorCode": "0",
        "value": {"list": [
            {"lotteryDrawNum": str(25100 - i), "lotteryDrawTime": "2025-01-01",
             "lotteryDrawResult": "01 02 03 04 05 06 07"}
            for i in range(PAGE_SIZE)
        ]},
    }
    last_page = {"errorCode": "0", "value": {"list": []}}
    session = FakeSession([FakeResponse(full_page), FakeResponse(last_page)])
    history = LotteryHistory(dlt, session=session, silent=True)

    records = history.fetch_history(max_pages=10)

    assert len(records) == PAGE_SIZE
    assert session.calls[1][1]["pageNo"] == 2


def test_fetch_history_stops_after_consecutive_failures(ssq):
    errors = [requests.exceptions.ConnectionError()] * 20
    session = FakeSession(errors)
    history = LotteryHistory(ssq, session=session, silent=True)

    assert history.fetch_history(max_pages=10) == []
    assert len(session.calls) == history.max_retries * history.max_consecutive_failures


def test_init_and_update_without_any_data(ssq, tmp_path):
    session = FakeSession([FakeResponse({}, status_code=500)] * 20)
    history = LotteryHistory(ssq, data_dir=str(tmp_path), session=session, silent=True)
    with pytest.raises(HistoryFetchError):
        history.init_and_update(max_pages=3)


def test_init_and_update_keeps_local_data_when_fetch_fails(ssq, data_dir):
    session = FakeSession([requests.exceptions.ConnectionError()] * 20)
    history = LotteryHistory(ssq, data_dir=str(data_dir), session=session, silent=True)
    assert history.init_and_update() == 0
    assert len(history.records) == 3


def test_init_and_update_saves_new_records(ssq, data_dir):
    payload = {"state": 0, "result": [ssq_item("2025004")]}
    history = LotteryHistory(
        ssq, data_dir=str(data_dir), session=FakeSession([FakeResponse(payload)]), silent=True
    )
    assert history.init_and_update() == 1

    reloaded = LotteryHistory(ssq, data_dir=str(data_dir), session=FakeSession([]), silent=True)
    reloaded.load_data()
    assert reloaded.latest()["period"] == "2025004"


def test_merge_records_drops_corrupt_local_entries(ssq, ssq_records):
    history = LotteryHistory(ssq, session=FakeSession([]), silent=True)
    history.records = [{"date": "2025-01-01"}, "oops", ssq_records[1]]

    assert history.merge_records([ssq_records[0]]) == 1
    assert [r["period"] for r in history.records] == ["2025003", "2025002"]


def test_init_and_update_with_corrupt_local_file(ssq, tmp_path):
    (tmp_path / "ssq_history.json").write_text('[{"date": "2025-01-01"}]', encoding="utf-8")
    payload = {"state": 0, "result": [ssq_item("2025004")]}
    history = LotteryHistory(
        ssq, data_dir=str(tmp_path), session=FakeSession([FakeResponse(payload)]), silent=True
    )

    assert history.init_and_update() == 1
    assert [r["period"] for r in history.records] == ["2025004"]
