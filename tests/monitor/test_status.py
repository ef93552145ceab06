"""Tests for get_current_status() and create_geojson()."""

import json

import numpy as np
import pandas as pd
import pytest

from airmonitor.monitor import Monitor
from airmonitor.monitor.status import LAST_VALID_DATETIME, LAST_VALID_VALUE, last_valid_index
from tests.helpers.fake_tables import make_data, make_meta

pytestmark = [pytest.mark.unit, pytest.mark.monitor]


class TestLastValidIndex:

    def test_last_valid_not_last_row(self):
        values = np.array([[1.0], [np.nan], [3.0], [np.nan]])

        assert last_valid_index(values).tolist() == [2]

    def test_no_valid_values(self):
        values = np.array([[np.nan, 1.0], [np.nan, np.nan]])

        assert last_valid_index(values).tolist() == [-1, 0]

    def test_zero_rows(self):
        assert last_valid_index(np.empty((0, 3))).tolist() == [-1, -1, -1]


class TestCurrentStatus:

    def test_reports_last_valid_value_and_time(self, make_monitor):
        monitor = make_monitor({"a": [1.0, None, 3.0, None]})
        status = monitor.get_current_status()

        assert status.loc[0, LAST_VALID_VALUE] == 3.0
        assert status.loc[0, LAST_VALID_DATETIME] == monitor.data["datetime"].iloc[2]

    def test_all_missing_series_is_null_not_first_row(self, three_monitor):
        status = three_monitor.get_current_status()
        row = status.set_index("deviceDeploymentID").loc["c"]

        assert pd.isna(row[LAST_VALID_DATETIME])
        assert np.isnan(row[LAST_VALID_VALUE])

    def test_aligned_with_metadata_order(self, three_monitor):
        reordered = three_monitor.select(["b", "a"])
        status = reordered.get_current_status()

        assert status["deviceDeploymentID"].tolist() == ["b", "a"]
        assert status[LAST_VALID_VALUE].tolist() == [30.0, 6.0]

    def test_metadata_columns_kept_and_input_untouched(self, three_monitor):
        columns = list(three_monitor.meta.columns)
        status = three_monitor.get_current_status()

        assert list(status.columns) == columns + [LAST_VALID_DATETIME, LAST_VALID_VALUE]
        assert list(three_monitor.meta.columns) == columns

    def test_datetime_column_is_utc(self, three_monitor):
        status = three_monitor.get_current_status()

        assert str(status[LAST_VALID_DATETIME].dt.tz) == "UTC"

    def test_zero_rows(self, make_monitor):
        monitor = make_monitor({"a": [1.0]}).trim_date("UTC")
        status = monitor.get_current_status()

        assert pd.isna(status.loc[0, LAST_VALID_DATETIME])

    def test_empty_monitor(self):
        status = Monitor().get_current_status()

        assert len(status) == 0
        assert LAST_VALID_VALUE in status.columns


class TestGeoJSON:

    def test_feature_collection(self, three_monitor):
        geojson = three_monitor.create_geojson()

        assert geojson["type"] == "FeatureCollection"
        assert len(geojson["features"]) == 3
        # Serializable as-is
        json.dumps(geojson)

    def test_feature_content(self, make_monitor):
        monitor = make_monitor(
            {"a": [12.0, 15.25, None]},
            start="2024-07-01 18:00",
            longitude=[-121.5],
            latitude=[38.5],
        )
        feature = monitor.create_geojson()["features"][0]

        assert feature["geometry"] == {"type": "Point", "coordinates": [-121.5, 38.5]}
        props = feature["properties"]
        assert props["deviceDeploymentID"] == "a"
        assert props["locationName"] == "Site a"
        assert props["timezone"] == "America/Los_Angeles"
        assert props["last_validTime"] == "2024-07-01 19:00:00"
        assert props["last_validLocalTimestamp"] == "2024-07-01 12:00:00 PDT"
        assert props["last_validTimeISO"] == "2024-07-01T12:00:00-07:00"
        assert props["last_PM2.5"] == "15.2"

    def test_value_digits(self, make_monitor):
        monitor = make_monitor({"a": [7.0]})

        assert monitor.create_geojson(value_digits=2)["features"][0]["properties"]["last_PM2.5"] == "7.00"

    def test_value_digits_from_config(self, make_config):
        monitor = Monitor(make_meta(["a"]), make_data({"a": [7.0]}), config=make_config(VALUE_DIGITS=0))

        assert monitor.create_geojson()["features"][0]["properties"]["last_PM2.5"] == "7"

    def test_missing_values_are_null(self, make_monitor):
        monitor = make_monitor({"a": [None]}, longitude=[None])
        feature = monitor.create_geojson()["features"][0]

        assert feature["geometry"]["coordinates"][0] is None
        assert feature["properties"]["last_validTime"] is None
        assert feature["properties"]["last_validLocalTimestamp"] is None
        assert feature["properties"]["last_validTimeISO"] is None
        assert feature["properties"]["last_PM2.5"] is None

    def test_offset_timestamp_falls_back_to_utc(self, make_monitor):
        monitor = make_monitor({"a": [5.0]}, start="2024-01-15 08:00", timezone=["Mars/Olympus"])
        props = monitor.create_geojson()["features"][0]["properties"]

        assert props["last_validLocalTimestamp"] is None
        assert props["last_validTimeISO"] == "2024-01-15T08:00:00+00:00"
