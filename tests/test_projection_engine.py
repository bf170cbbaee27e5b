from __future__ import annotations

from datetime import date, datetime, timedelta

import pytest

from stockcast.core.projection.domain import (
    IncomingStockEntry,
    ProjectionInputError,
    ReorderUrgency,
)
from stockcast.core.projection.engine import (
    bucket_incoming_stock,
    classify_urgency,
    daily_growth_rate,
    run_projection,
)
from tests.test_utils import make_input


class TestRunProjection:
    def test_reference_scenario(self, today):
        """25k units, 170/day, 10% monthly growth, 84 day lead time."""
        result = run_projection(
            make_input(25000, 170, monthly_growth_rate=1.10, lead_time_days=84),
            today=today,
        )

        assert daily_growth_rate(1.10) == pytest.approx(1.003185, abs=1e-5)
        assert result.days_until_stock_out is not None
        assert 90 <= result.days_until_stock_out <= 140
        assert result.must_reorder_by is not None
        assert result.reorder_urgency in (ReorderUrgency.OK, ReorderUrgency.WARNING)

        assert result.daily_projection[0].inventory == 25000
        assert result.daily_projection[0].daily_sales == 170
        assert 183 <= result.daily_projection[30].daily_sales <= 192

    def test_low_stock_high_sales_is_critical(self, today):
        result = run_projection(make_input(200, 100, lead_time_days=84), today=today)

        assert result.days_until_stock_out == 2
        assert result.stock_out_date == date(2025, 1, 3)
        assert result.must_reorder_by == date(2024, 10, 11)
        assert result.reorder_urgency == ReorderUrgency.CRITICAL

    def test_warning_when_reorder_window_is_short(self, today):
        """Stock-out around day 93 with 84 day lead time leaves ~9 days to reorder."""
        result = run_projection(
            make_input(8000, 80, monthly_growth_rate=1.05, lead_time_days=84),
            today=today,
        )

        assert result.days_until_stock_out is not None
        assert 85 <= result.days_until_stock_out <= 105
        assert result.reorder_urgency == ReorderUrgency.WARNING

    def test_growing_sales_bring_stock_out_forward(self, today):
        result = run_projection(
            make_input(500, 50, monthly_growth_rate=1.05, lead_time_days=84),
            today=today,
        )

        assert result.days_until_stock_out is not None
        assert 8 <= result.days_until_stock_out <= 12
        assert result.reorder_urgency == ReorderUrgency.CRITICAL

    def test_well_stocked_product_has_no_stock_out(self, today):
        result = run_projection(
            make_input(50000, 30, monthly_growth_rate=1.02, lead_time_days=84, projection_days=365),
            today=today,
        )

        assert result.days_until_stock_out is None
        assert result.stock_out_date is None
        assert result.must_reorder_by is None
        assert result.reorder_urgency == ReorderUrgency.OK

    def test_sequence_covers_horizon_with_consecutive_dates(self, today):
        result = run_projection(make_input(1000, 10, projection_days=40), today=today)

        points = result.daily_projection
        assert len(points) == 40
        assert [p.day for p in points] == list(range(40))
        assert points[0].date == today
        for prev, cur in zip(points, points[1:]):
            assert cur.date - prev.date == timedelta(days=1)

    def test_default_horizon_is_365_days(self, today):
        result = run_projection(make_input(10, 0), today=today)
        assert len(result.daily_projection) == 365

    def test_repeated_runs_are_identical(self, today):
        projection_input = make_input(
            3000,
            42.5,
            monthly_growth_rate=1.07,
            incoming=[(today + timedelta(days=12), 800)],
        )

        assert run_projection(projection_input, today=today) == run_projection(
            projection_input, today=today
        )

    def test_today_accepts_datetime(self):
        result = run_projection(make_input(100, 1, projection_days=3), today=datetime(2025, 3, 9, 17, 45))
        assert result.daily_projection[0].date == date(2025, 3, 9)

    def test_today_defaults_to_current_date(self):
        before = date.today()
        result = run_projection(make_input(100, 1, projection_days=2))
        after = date.today()

        assert result.daily_projection[0].date in (before, after)

    def test_flat_growth_keeps_sales_constant(self, today):
        result = run_projection(make_input(100000, 37.25, monthly_growth_rate=1.0), today=today)
        assert {p.daily_sales for p in result.daily_projection} == {37.25}

    def test_growth_starts_after_day_one(self, today):
        result = run_projection(make_input(100000, 170, monthly_growth_rate=1.10), today=today)

        sales = [p.daily_sales for p in result.daily_projection]
        assert sales[0] == 170
        assert sales[1] == 170
        for prev, cur in zip(sales[1:], sales[2:]):
            assert cur > prev

    def test_declining_growth_slows_sales(self, today):
        result = run_projection(make_input(100000, 100, monthly_growth_rate=0.9), today=today)
        assert result.daily_projection[31].daily_sales == pytest.approx(90, abs=0.01)

    def test_zero_sales_never_runs_out(self, today):
        result = run_projection(make_input(5, 0, monthly_growth_rate=1.2), today=today)

        assert result.days_until_stock_out is None
        assert result.reorder_urgency == ReorderUrgency.OK
        assert all(p.inventory == 5 for p in result.daily_projection)

    def test_negative_inventory_stocks_out_on_day_zero(self, today):
        result = run_projection(make_input(-10, 5), today=today)

        assert result.days_until_stock_out == 0
        assert result.stock_out_date == today
        assert result.daily_projection[0].inventory == 0
        assert result.reorder_urgency == ReorderUrgency.CRITICAL

    def test_empty_inventory_without_sales_is_out_of_stock(self, today):
        result = run_projection(make_input(0, 0), today=today)
        assert result.days_until_stock_out == 0

    def test_display_inventory_is_floored_but_running_total_is_not(self, today):
        """Deep negative running stock must absorb later deliveries first."""
        result = run_projection(
            make_input(100, 100, incoming=[(today + timedelta(days=5), 250)], projection_days=10),
            today=today,
        )

        points = result.daily_projection
        assert result.days_until_stock_out == 1
        assert points[4].inventory == 0
        # running total is -400 before day 5's delivery of 250
        assert points[5].inventory == 0
        assert points[5].incoming_stock == 250

    def test_display_rounding_does_not_feed_back(self, today):
        """0.125/day would display as two decimals but must still drain 10 units in 80 days."""
        result = run_projection(make_input(10, 0.125, projection_days=100), today=today)

        points = result.daily_projection
        assert points[0].daily_sales == 0.13
        assert points[40].inventory == 5
        assert result.days_until_stock_out == 80

    def test_display_values_round_halves_up(self, today):
        result = run_projection(make_input(10.125, 0.125, projection_days=2), today=today)

        assert result.daily_projection[0].inventory == 10.13
        assert result.daily_projection[0].daily_sales == 0.13
        assert result.daily_projection[1].inventory == 10

    def test_incoming_stock_delays_stock_out(self, today):
        delivery_day = today + timedelta(days=30)
        without = run_projection(make_input(5000, 100), today=today)
        with_incoming = run_projection(
            make_input(5000, 100, incoming=[(delivery_day, 10000)]),
            today=today,
        )

        assert without.days_until_stock_out == 50
        assert with_incoming.days_until_stock_out == 150
        assert with_incoming.daily_projection[30].incoming_stock == 10000
        assert with_incoming.daily_projection[29].incoming_stock == 0

    def test_day_zero_delivery_counts_before_stock_out_check(self, today):
        result = run_projection(
            make_input(0, 10, incoming=[(today, 100)], projection_days=30),
            today=today,
        )

        assert result.daily_projection[0].inventory == 100
        assert result.daily_projection[0].incoming_stock == 100
        assert result.days_until_stock_out == 10

    def test_input_is_not_mutated(self, today):
        projection_input = make_input(100, 10, incoming=[(today + timedelta(days=2), 5)])
        before = list(projection_input.incoming_stock)

        run_projection(projection_input, today=today)

        assert projection_input.incoming_stock == before
        assert projection_input.current_inventory == 100

    def test_must_reorder_by_can_precede_today(self, today):
        result = run_projection(make_input(50, 10, lead_time_days=30), today=today)

        assert result.stock_out_date == today + timedelta(days=5)
        assert result.must_reorder_by == today - timedelta(days=25)

    def test_custom_warning_threshold(self, today):
        """Stock-out on day 110 with 84 day lead time: 26 days to reorder."""
        projection_input = make_input(11000, 100, lead_time_days=84)

        assert run_projection(projection_input, today=today).reorder_urgency == ReorderUrgency.OK
        assert (
            run_projection(projection_input, today=today, warning_threshold_days=30).reorder_urgency
            == ReorderUrgency.WARNING
        )

    @pytest.mark.parametrize("growth", [0.0, -1.0])
    def test_non_positive_growth_is_rejected(self, today, growth):
        with pytest.raises(ProjectionInputError):
            run_projection(make_input(100, 1, monthly_growth_rate=growth), today=today)

    @pytest.mark.parametrize("growth", [float("nan"), float("inf")])
    def test_non_finite_growth_is_rejected(self, today, growth):
        with pytest.raises(ProjectionInputError, match="finite"):
            run_projection(make_input(100, 1, monthly_growth_rate=growth), today=today)

    @pytest.mark.parametrize(
        "current_inventory, avg_daily_sales",
        [(float("nan"), 1), (100, float("nan")), (float("inf"), 1), (100, float("inf"))],
    )
    def test_non_finite_stock_or_sales_is_rejected(self, today, current_inventory, avg_daily_sales):
        with pytest.raises(ProjectionInputError, match="must be finite"):
            run_projection(make_input(current_inventory, avg_daily_sales), today=today)

    def test_lead_time_beyond_calendar_is_rejected(self, today):
        with pytest.raises(ProjectionInputError, match="lead_time_days=800000"):
            run_projection(make_input(200, 100, lead_time_days=800000), today=today)

    def test_huge_lead_time_without_stock_out_is_accepted(self, today):
        result = run_projection(make_input(10, 0, lead_time_days=800000), today=today)
        assert result.must_reorder_by is None

    def test_horizon_past_last_date_is_rejected(self):
        with pytest.raises(ProjectionInputError, match="last representable date"):
            run_projection(make_input(100, 1), today=date(9999, 12, 1))

    def test_horizon_ending_on_last_date_is_accepted(self):
        result = run_projection(make_input(100, 1, projection_days=31), today=date(9999, 12, 1))
        assert result.daily_projection[-1].date == date.max

    def test_empty_horizon_is_rejected(self, today):
        with pytest.raises(ProjectionInputError):
            run_projection(make_input(100, 1, projection_days=0), today=today)

    def test_negative_warning_threshold_is_rejected(self, today):
        with pytest.raises(ProjectionInputError):
            run_projection(make_input(100, 1), today=today, warning_threshold_days=-1)


def test_engine_module_is_documented():
    from stockcast.core.projection import engine

    assert engine.__doc__ is not None
    assert engine.__doc__.startswith("Day-by-day inventory projection.")


class TestBucketIncomingStock:
    def test_same_day_entries_are_summed_and_past_entries_dropped(self, today):
        entries = [
            IncomingStockEntry(delivery_date=today + timedelta(days=3), quantity=100),
            IncomingStockEntry(delivery_date=today + timedelta(days=3), quantity=50.5),
            IncomingStockEntry(delivery_date=today - timedelta(days=1), quantity=999),
            IncomingStockEntry(delivery_date=today, quantity=7),
        ]

        assert bucket_incoming_stock(entries, today) == {0: 7, 3: 150.5}

    def test_datetime_entries_use_calendar_day(self, today):
        entries = [
            IncomingStockEntry(delivery_date=datetime(2025, 1, 2, 23, 59), quantity=10),
            IncomingStockEntry(delivery_date=datetime(2025, 1, 2, 0, 1), quantity=5),
        ]

        assert bucket_incoming_stock(entries, today) == {1: 15}


class TestClassifyUrgency:
    @pytest.mark.parametrize(
        "days_until_stock_out, expected",
        [
            (None, ReorderUrgency.OK),
            (0, ReorderUrgency.CRITICAL),
            (84, ReorderUrgency.CRITICAL),
            (85, ReorderUrgency.WARNING),
            (98, ReorderUrgency.WARNING),
            (99, ReorderUrgency.OK),
        ],
    )
    def test_thresholds_relative_to_lead_time(self, days_until_stock_out, expected):
        assert classify_urgency(days_until_stock_out, lead_time_days=84) == expected

    def test_zero_warning_threshold_leaves_only_critical_and_ok(self):
        assert classify_urgency(85, lead_time_days=84, warning_threshold_days=0) == ReorderUrgency.OK
        assert classify_urgency(84, lead_time_days=84, warning_threshold_days=0) == ReorderUrgency.CRITICAL
