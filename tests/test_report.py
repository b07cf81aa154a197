import hjson

from lucky.draw import Ticket
from lucky.report import export_distribution_hjson, format_pending_list, format_ticket, plot_distribution
from lucky.stats import zone_distribution


def test_format_ticket():
    assert format_ticket(Ticket([1, 5, 9, 12, 20, 33], [7])) == "01 05 09 12 20 33 | 07"


def test_format_pending_list():
    text = format_pending_list([Ticket([1, 2, 3, 4, 5], [1, 12]), Ticket([6, 7, 8, 9, 10], [2, 3])])
    assert text == "第1注: 01 02 03 04 05 | 01 12\n第2注: 06 07 08 09 10 | 02 03\n"
    assert format_pending_list([]) == ""


def test_export_distribution_hjson(ssq, ssq_records, tmp_path):
    red = zone_distribution(ssq, ssq_records, 30, "red")
    blue = zone_distribution(ssq, ssq_records, 30, "blue")
    path = tmp_path / "out" / "ssq.hjson"

    export_distribution_hjson(ssq, 30, red, blue, str(path), latest=ssq_records[0])

    with open(path, encoding="utf-8") as f:
        data = hjson.load(f)
    assert data["metadata"]["latest_period"] == "2025003"
    assert len(data["red_balls"]["data"]) == 33
    assert data["blue_balls"]["ratios"]["oddEven"] == "3:0"
    assert data["red_balls"]["big_threshold"] == 17


def test_plot_distribution(dlt, tmp_path):
    records = [{"period": "25001", "date": "2025-01-01", "red_balls": [1, 2, 3, 4, 5], "blue_balls": [1, 2]}]
    red = zone_distribution(dlt, records, 10, "red")
    blue = zone_distribution(dlt, records, 10, "blue")
    path = tmp_path / "dlt.png"

    plot_distribution(dlt, red[0], blue[0], str(path), window=10)

    assert path.exists() and path.stat().st_size > 0
