import pytest

from scorecard.models import RoiTirData
from scorecard.modules.ranking import histogram, investment_tier, rank_units, summarize, traffic_light


@pytest.mark.parametrize("score, light", [
    (0.95, "green"),
    (0.61, "green"),
    (0.60, "yellow"),
    (0.35, "yellow"),
    (0.3499, "red"),
    (0.0, "red"),
])
def test_traffic_light_boundaries(score, light):
    assert traffic_light(score) == light


def _roi(roi, tir_annual=0.0, tir_monthly=0.0):
    return RoiTirData(id="x", tir_annual=tir_annual, tir_monthly=tir_monthly, roi=roi, recovery_months=None)


@pytest.mark.parametrize("record, tier", [
    (_roi(2.09), "exceptional"),
    (_roi(1.0), "recovered"),
    (_roi(0.6), "on_track"),
    (_roi(0.1, tir_annual=0.05), "growing"),
    (_roi(0.1, tir_monthly=0.01), "growing"),
    (_roi(-0.2), "attention"),
])
def test_investment_tier(record, tier):
    assert investment_tier(record) == tier


def test_rank_units_orders_by_total(parsed):
    ranked = rank_units(parsed, "excel")

    assert [(r.rank, r.unit.id) for r in ranked] == [
        (1, "belisario"),
        (2, "la_fabulosa"),
        (3, "super_8"),
        (4, "cabra_andaluz"),
        (5, "100_fuegos"),
    ]
    assert [r.light for r in ranked] == ["green", "yellow", "red", "red", "red"]
    assert ranked[0].roi_tir.id == "belisario"
    assert ranked[1].roi_tir is None


def test_filters_keep_overall_rank(parsed):
    discos = rank_units(parsed, "excel", unit_type="disco")
    assert [(r.rank, r.unit.id) for r in discos] == [(2, "la_fabulosa"), (5, "100_fuegos")]

    found = rank_units(parsed, "excel", search="  cabra ")
    assert [(r.rank, r.unit.id) for r in found] == [(4, "cabra_andaluz")]

    assert rank_units(parsed, "excel", unit_type="restaurant", search="fuegos") == []


def test_normalized_mode_changes_order(parsed):
    by_id = {r.unit.id: r for r in rank_units(parsed, "normalized")}
    assert by_id["belisario"].score.score_total == pytest.approx(0.85)
    assert by_id["cabra_andaluz"].score.score_total == pytest.approx(0.1 / 0.575)


def test_histogram_buckets():
    assert histogram([0.0, 0.05, 0.1, 0.55, 0.99, 1.0]) == [2, 1, 0, 0, 0, 1, 0, 0, 0, 2]
    assert histogram([-0.1, 1.5]) == [0] * 10


def test_summarize(parsed):
    summary = summarize(rank_units(parsed, "excel"))

    assert summary.total == 5
    assert summary.average == pytest.approx((0.85 + 0.55 + 0.3 + 0.1 + 0.0) / 5)
    assert summary.best.unit.id == "belisario"
    assert summary.worst.unit.id == "100_fuegos"
    assert summary.lights == {"green": 1, "yellow": 1, "red": 3}
    assert sum(summary.histogram) == 5
    assert summary.histogram[8] == 1


def test_summarize_empty():
    summary = summarize([])
    assert summary.total == 0
    assert summary.best is None and summary.worst is None
    assert summary.histogram == [0] * 10
