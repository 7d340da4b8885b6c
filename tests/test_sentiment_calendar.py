import pandas as pd
import pytest

from sentiment_calendar import (
    CALENDAR_COLUMNS, NoDataError, annotate, build_calendar, densify_calendar, fill_gaps, interpret,
)
from viz import save_calendar_csv


def _daily(days, values):
    return pd.DataFrame({"day": pd.to_datetime(days), "sentiment": values})


class TestDensifyCalendar:

    def test_dense_contiguous_days(self):
        cal = densify_calendar(_daily(["2022-06-30", "2022-06-24", "2022-07-03"], [1.0, 2.0, 3.0]))
        assert len(cal) == 10
        steps = cal["day"].diff().dropna()
        assert (steps == pd.Timedelta(days=1)).all()
        assert cal["day"].is_unique

    def test_missing_days_are_nan_not_zero(self):
        cal = densify_calendar(_daily(["2022-06-24", "2022-06-26"], [10.0, -30.0]))
        assert cal["sentiment"].isna().tolist() == [False, True, False]

    def test_single_day(self):
        cal = densify_calendar(_daily(["2022-06-24"], [4.0]))
        assert cal["day"].tolist() == [pd.Timestamp("2022-06-24")]

    def test_no_days(self):
        with pytest.raises(NoDataError, match="No data"):
            densify_calendar(_daily([], []))

    def test_duplicate_days_rejected(self):
        with pytest.raises(ValueError, match="duplicate"):
            densify_calendar(_daily(["2022-06-24", "2022-06-24"], [1.0, 2.0]))


class TestFillGaps:

    def test_linear_by_day_count(self):
        cal = densify_calendar(_daily(["2022-01-01", "2022-01-05"], [0.0, 8.0]))
        out = fill_gaps(cal)
        assert out["sentiment"].tolist() == pytest.approx([0.0, 2.0, 4.0, 6.0, 8.0])
        assert out["interpolated"].tolist() == [False, True, True, True, False]

    def test_values_between_brackets(self):
        cal = densify_calendar(_daily(["2022-01-01", "2022-01-04", "2022-01-09"], [5.0, -7.0, 3.0]))
        out = fill_gaps(cal)
        assert ((out["sentiment"].iloc[1:3] <= 5.0) & (out["sentiment"].iloc[1:3] >= -7.0)).all()
        assert ((out["sentiment"].iloc[4:8] <= 3.0) & (out["sentiment"].iloc[4:8] >= -7.0)).all()

    def test_boundary_runs_become_zero(self):
        cal = pd.DataFrame({
            "day": pd.date_range("2022-01-01", periods=5, freq="D"),
            "sentiment": [float("nan"), 4.0, float("nan"), 6.0, float("nan")],
        })
        out = fill_gaps(cal)
        assert out["sentiment"].tolist() == [0.0, 4.0, 5.0, 6.0, 0.0]

    def test_does_not_mutate_input(self):
        cal = densify_calendar(_daily(["2022-01-01", "2022-01-03"], [1.0, 3.0]))
        fill_gaps(cal)
        assert cal["sentiment"].isna().sum() == 1


class TestInterpret:

    def test_interpolated_minus_ten_is_neutral(self, articles, lexicon):
        cal = build_calendar(articles, lexicon)
        assert cal.loc[1, "tooltip"] == "2022-06-25: -10.00 (Neutral)"

    @pytest.mark.parametrize("value,label", [
        (11, "Positive"), (-11, "Negative"), (0, "Neutral"),
        (10, "Neutral"), (-10, "Neutral"), (10.01, "Positive"), (-10.01, "Negative"),
    ])
    def test_strict_thresholds(self, value, label):
        assert interpret(value) == label


class TestAnnotate:

    def test_derived_fields(self):
        cal = pd.DataFrame({"day": pd.to_datetime(["2022-06-24"]), "sentiment": [-12.346]})
        row = annotate(cal).iloc[0]
        assert row["interpretation"] == "Negative"
        assert row["tooltip"] == "2022-06-24: -12.35 (Negative)"
        assert row["id"] == "day-2022-06-24"
        assert (row["year"], row["month"], row["week"], row["dow"]) == (2022, 6, 25, 4)

    def test_iso_week_at_year_boundary(self):
        cal = pd.DataFrame({"day": pd.to_datetime(["2021-01-01", "2024-12-30"]), "sentiment": [0.0, 0.0]})
        out = annotate(cal)
        # Jan 1 2021 is in ISO week 53 of 2020; Dec 30 2024 in week 1 of 2025
        assert out["week"].tolist() == [53, 1]
        assert out["year"].tolist() == [2021, 2024]
        assert (out["week"] >= 1).all()


class TestBuildCalendar:

    def test_end_to_end(self, articles, lexicon):
        cal = build_calendar(articles, lexicon)
        assert list(cal.columns) == CALENDAR_COLUMNS
        assert cal["day"].tolist() == list(pd.date_range("2022-06-24", "2022-06-26", freq="D"))
        assert cal["sentiment"].tolist() == pytest.approx([10.0, -10.0, -30.0])
        assert cal["interpretation"].tolist() == ["Neutral", "Neutral", "Negative"]
        assert cal["interpolated"].tolist() == [False, True, False]

    def test_empty_corpus(self, articles, lexicon):
        with pytest.raises(NoDataError):
            build_calendar(articles.iloc[0:0], lexicon)

    def test_single_day_corpus(self, articles, lexicon):
        cal = build_calendar(articles.iloc[:2], lexicon)
        assert len(cal) == 1
        assert cal["sentiment"].iloc[0] == pytest.approx(10.0)

    def test_idempotent_output(self, articles, lexicon, tmp_path):
        a = save_calendar_csv(build_calendar(articles, lexicon), str(tmp_path / "a.csv"))
        b = save_calendar_csv(build_calendar(articles, lexicon), str(tmp_path / "b.csv"))
        assert open(a, "rb").read() == open(b, "rb").read()

    def test_input_order_does_not_matter(self, articles, lexicon):
        fwd = build_calendar(articles, lexicon)
        rev = build_calendar(articles.iloc[::-1].reset_index(drop=True), lexicon)
        pd.testing.assert_frame_equal(fwd, rev)
