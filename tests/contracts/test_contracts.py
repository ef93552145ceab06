"""Tests for table contracts.

These tests verify that contracts reject malformed tables directly, without
defensive logic downstream.
"""

import numpy as np
import pandas as pd
import pytest

from airmonitor.contracts import (
    ContractViolation,
    FailurePolicy,
    assert_metadata,
    assert_monitor,
    assert_timeseries,
    require,
)
from airmonitor.contracts.invariants import MONITOR_INVARIANTS
from tests.helpers.fake_tables import make_data, make_meta

pytestmark = [pytest.mark.unit, pytest.mark.contracts]


class TestRequire:
    """Test the enforcement primitive."""

    def test_require_passes_on_true(self):
        require(True, "never raised")

    def test_require_raises_contract_violation(self):
        with pytest.raises(ContractViolation, match="boom"):
            require(False, "boom")

    def test_contract_violation_is_runtime_error(self):
        assert issubclass(ContractViolation, RuntimeError)

    def test_fail_fast_policy(self):
        assert FailurePolicy.FAIL_FAST == "fail_fast"

    def test_invariants_document_every_table(self):
        assert set(MONITOR_INVARIANTS) == {"metadata", "timeseries", "binding"}


class TestTimeseriesContract:
    """Validation passes iff datetime is hourly UTC and cells are finite or missing."""

    def test_valid_table_passes(self):
        assert_timeseries(make_data({"a": [1.0, None, 3.0], "b": [None, None, None]}))

    def test_zero_row_table_passes(self):
        assert_timeseries(make_data({}, periods=0))

    def test_not_a_dataframe(self):
        with pytest.raises(ContractViolation, match="expected DataFrame"):
            assert_timeseries({"datetime": []})

    def test_missing_datetime(self):
        data = make_data({"a": [1.0, 2.0]}).drop(columns="datetime")
        with pytest.raises(ContractViolation, match="missing 'datetime'"):
            assert_timeseries(data)

    def test_datetime_not_first(self):
        data = make_data({"a": [1.0, 2.0]})[["a", "datetime"]]
        with pytest.raises(ContractViolation, match="first column is 'a'"):
            assert_timeseries(data)

    def test_naive_datetime(self):
        data = make_data({"a": [1.0, 2.0]})
        data["datetime"] = data["datetime"].dt.tz_localize(None)
        with pytest.raises(ContractViolation, match="expected tz-aware UTC"):
            assert_timeseries(data)

    def test_non_utc_zone(self):
        data = make_data({"a": [1.0, 2.0]})
        data["datetime"] = data["datetime"].dt.tz_convert("America/Denver")
        with pytest.raises(ContractViolation, match="expected UTC"):
            assert_timeseries(data)

    def test_gap_in_hourly_axis(self):
        data = make_data({"a": [1.0, 2.0, 3.0]})
        data = data.drop(index=1).reset_index(drop=True)
        with pytest.raises(ContractViolation, match="not hourly"):
            assert_timeseries(data)

    def test_descending_axis(self):
        data = make_data({"a": [1.0, 2.0, 3.0]}).iloc[::-1].reset_index(drop=True)
        with pytest.raises(ContractViolation, match="not hourly"):
            assert_timeseries(data)

    def test_infinite_value(self):
        data = make_data({"a": [1.0, np.inf]})
        with pytest.raises(ContractViolation, match="non-finite"):
            assert_timeseries(data)

    def test_text_value(self):
        data = make_data({"a": [1.0, 2.0]})
        data["a"] = ["1.0", "x"]
        with pytest.raises(ContractViolation, match="expected numeric"):
            assert_timeseries(data)

    def test_object_column_of_numbers_passes(self):
        data = make_data({"a": [1.0, 2.0, 3.0]})
        data["a"] = pd.Series([1.0, None, 3], dtype=object)
        assert_timeseries(data)

    def test_object_column_with_text_cell(self):
        data = make_data({"a": [1.0, 2.0]})
        data["a"] = pd.Series([1.0, "NA"], dtype=object)
        with pytest.raises(ContractViolation, match="expected numeric"):
            assert_timeseries(data)

    def test_object_column_with_infinity(self):
        data = make_data({"a": [1.0, 2.0]})
        data["a"] = pd.Series([None, float("-inf")], dtype=object)
        with pytest.raises(ContractViolation, match="non-finite"):
            assert_timeseries(data)

    def test_duplicate_columns(self):
        data = make_data({"a": [1.0, 2.0], "b": [1.0, 2.0]})
        data.columns = ["datetime", "a", "a"]
        with pytest.raises(ContractViolation, match="duplicate column"):
            assert_timeseries(data)


class TestMetadataContract:

    def test_valid_metadata_passes(self):
        assert_metadata(make_meta(["a", "b"]))

    def test_missing_id_column(self):
        with pytest.raises(ContractViolation, match="deviceDeploymentID"):
            assert_metadata(make_meta(["a"]).drop(columns="deviceDeploymentID"))

    def test_duplicate_ids(self):
        with pytest.raises(ContractViolation, match="'a'"):
            assert_metadata(make_meta(["a", "a"]))

    def test_null_id(self):
        meta = make_meta(["a", "b"])
        meta.loc[1, "deviceDeploymentID"] = None
        with pytest.raises(ContractViolation):
            assert_metadata(meta)


class TestBindingContract:
    """One metadata row per time-series column."""

    def test_bound_pair_passes(self):
        assert_monitor(make_meta(["a", "b"]), make_data({"b": [1.0], "a": [2.0]}))

    def test_ordered_binding_requires_same_order(self):
        with pytest.raises(ContractViolation, match="order"):
            assert_monitor(
                make_meta(["a", "b"]), make_data({"b": [1.0], "a": [2.0]}), ordered=True
            )

    def test_meta_row_without_data_column(self):
        with pytest.raises(ContractViolation, match=r"without data column \['b'\]"):
            assert_monitor(make_meta(["a", "b"]), make_data({"a": [1.0]}))

    def test_data_column_without_meta_row(self):
        with pytest.raises(ContractViolation, match=r"without meta row \['z'\]"):
            assert_monitor(make_meta(["a"]), make_data({"a": [1.0], "z": [2.0]}))

    def test_empty_pair_passes(self):
        meta = make_meta([])
        data = pd.DataFrame({"datetime": pd.Series(dtype="datetime64[ns, UTC]")})
        assert_monitor(meta, data)
