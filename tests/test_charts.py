from aggregation import ChartPoint
from charts import COLORS, bar_chart, donut_segments, line_chart


def _point(month: str, income: int, expenses: int) -> ChartPoint:
    return ChartPoint(
        month=month,
        label=month,
        income_cents=income,
        expense_cents=expenses,
        balance_cents=income - expenses,
    )


def test_empty_series_draws_nothing() -> None:
    assert line_chart([])["income"] == ""
    assert line_chart([])["zero_y"] is None
    assert bar_chart([]) == []
    assert donut_segments([]) == []


def test_line_chart_shares_scale_across_series() -> None:
    series = [_point("2024-01", 1000, 200), _point("2024-02", 0, 50)]
    chart = line_chart(series, width=100, height=100)

    income = chart["income"].split(" ")
    assert income[0] == "0.00,8.00"
    assert income[1].startswith("100.00,")
    # balance dips below zero in February, so the zero line is not the bottom edge
    assert 8.0 < chart["zero_y"] < 92.0
    assert [label["text"] for label in chart["labels"]] == ["2024-01", "2024-02"]


def test_single_point_line_spans_the_width() -> None:
    chart = line_chart([_point("2024-01", 500, 500)], width=100, height=40)
    assert chart["expenses"] == "0.00,8.00 100.00,8.00"
    assert chart["balance"] == "0.00,32.00 100.00,32.00"


def test_bar_heights_are_proportional() -> None:
    groups = bar_chart([_point("2024-01", 1000, 500)], width=100, height=116)
    income = groups[0]["income"]
    expenses = groups[0]["expenses"]
    assert income["height"] == 100.0
    assert expenses["height"] == 50.0
    assert expenses["x"] > income["x"]


def test_donut_segments_rotate_through_palette() -> None:
    breakdown = [
        {"name": f"c{i}", "amount_cents": 100, "percent": 100 / 7} for i in range(7)
    ]
    segments = donut_segments(breakdown)
    assert segments[0]["dashoffset"] == "25.000"
    assert segments[6]["color"] == COLORS[0]
    assert segments[1]["dasharray"].startswith("14.286 ")
