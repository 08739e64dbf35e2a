"""SVG geometry for the dashboard charts.

Templates draw the shapes; this module only turns derived series into
coordinates inside a fixed viewBox.
"""

from __future__ import annotations

from typing import Sequence

from aggregation import ChartPoint

COLORS = ["#0088FE", "#00C49F", "#FFBB28", "#FF8042", "#8884D8", "#82CA9D"]

PAD_TOP = 8.0
PAD_BOTTOM = 8.0
# Circumference of r=15.915 is 100, so dash lengths read as percentages.
DONUT_RADIUS = 15.915


def _y_scale(min_v: int, max_v: int, height: float):
    usable_h = height - PAD_TOP - PAD_BOTTOM

    def y(v: int) -> float:
        if max_v == min_v:
            return height / 2
        t = (v - min_v) / (max_v - min_v)
        return PAD_TOP + (1 - t) * usable_h

    return y


def _x_positions(count: int, width: float) -> list[float]:
    if count == 1:
        return [width / 2]
    step = width / (count - 1)
    return [idx * step for idx in range(count)]


def line_chart(
    series: Sequence[ChartPoint], *, width: float = 600.0, height: float = 240.0
) -> dict[str, object]:
    if not series:
        return {"income": "", "expenses": "", "balance": "", "labels": [], "zero_y": None}

    values = [0]
    for p in series:
        values.extend((p.income_cents, p.expense_cents, p.balance_cents))
    y = _y_scale(min(values), max(values), height)
    xs = _x_positions(len(series), width)

    def build_points(attr: str) -> str:
        coords = [(x, y(getattr(p, attr))) for x, p in zip(xs, series)]
        if len(coords) == 1:
            # polyline needs two vertices to be visible
            only_y = coords[0][1]
            coords = [(0.0, only_y), (width, only_y)]
        return " ".join(f"{cx:.2f},{cy:.2f}" for cx, cy in coords)

    return {
        "income": build_points("income_cents"),
        "expenses": build_points("expense_cents"),
        "balance": build_points("balance_cents"),
        "labels": [{"x": round(x, 2), "text": p.label} for x, p in zip(xs, series)],
        "zero_y": round(y(0), 2),
    }


def bar_chart(
    series: Sequence[ChartPoint],
    *,
    width: float = 600.0,
    height: float = 240.0,
    gap: float = 0.2,
) -> list[dict[str, object]]:
    if not series:
        return []
    max_v = max(max(p.income_cents, p.expense_cents) for p in series)
    y = _y_scale(0, max_v, height)
    baseline = y(0) if max_v else height - PAD_BOTTOM
    slot = width / len(series)
    bar_w = slot * (1 - gap) / 2
    groups: list[dict[str, object]] = []
    for idx, p in enumerate(series):
        left = idx * slot + slot * gap / 2
        bars = {}
        for offset, (key, value) in enumerate(
            (("income", p.income_cents), ("expenses", p.expense_cents))
        ):
            top = y(value) if max_v else baseline
            bars[key] = {
                "x": round(left + offset * bar_w, 2),
                "y": round(top, 2),
                "width": round(bar_w, 2),
                "height": round(baseline - top, 2),
            }
        groups.append(
            {"label": p.label, "label_x": round(idx * slot + slot / 2, 2), **bars}
        )
    return groups


def donut_segments(breakdown: Sequence[dict[str, object]]) -> list[dict[str, object]]:
    segments: list[dict[str, object]] = []
    consumed = 0.0
    for idx, item in enumerate(breakdown):
        percent = float(item["percent"])
        segments.append(
            {
                "name": item["name"],
                "amount_cents": item["amount_cents"],
                "percent": percent,
                "color": COLORS[idx % len(COLORS)],
                "dasharray": f"{percent:.3f} {100 - percent:.3f}",
                # segments start at 12 o'clock and run clockwise
                "dashoffset": f"{(25 - consumed) % 100:.3f}",
            }
        )
        consumed += percent
    return segments
