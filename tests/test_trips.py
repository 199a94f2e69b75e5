"""Tests for the trip history fetcher."""
import numpy as np
import pandas as pd
import pytest

from ecobici.exceptions import ArchiveError, ColumnNotFoundError, DownloadError
from ecobici.trips import OUTPUT_COLUMNS, fetch_trips, process_trips

from conftest import TEST_BASE_URL, build_zip, make_error_response, make_response


@pytest.fixture
def trips_client(client, trips_zip_bytes):
    """Client serving the sample trip archive."""
    client.session.get.return_value = make_response(trips_zip_bytes)
    return client


@pytest.fixture
def normalized_trips():
    """Trip history with already normalized columns."""
    return pd.DataFrame({
        "id_usuario": [7, 8, 9, 10],
        "fecha_origen_recorrido": [
            "2024-03-05 08:10:00",
            "2024-03-06 10:00:00",
            "bad value",
            "2024-02-29 23:59:00",
        ],
        "fecha_destino_recorrido": [
            "2024-03-05 08:25:30",
            "",
            "2024-03-07 10:00:00",
            "2024-03-01 00:04:00",
        ],
        "long_estacion_origen": [-58.40, -58.42, -58.44, -58.46],
        "long_estacion_destino": [-58.41, -58.43, -58.45, -58.47],
        "duracion_recorrido": [1, 2, 3, 4],
    })


class TestProcessTrips:
    """Test trip derivations on normalized data."""

    def test_output_columns(self, normalized_trips):
        """Test the projection keeps exactly the trip record fields."""
        result = process_trips(normalized_trips, 3)
        assert list(result.columns) == OUTPUT_COLUMNS

    def test_duration(self, normalized_trips):
        """Test duration in seconds and NaN for unparseable timestamps."""
        result = process_trips(normalized_trips, 3)

        assert result["id_usuario"].tolist() == [7, 8]
        assert result.loc[0, "duracion_segundos"] == 930
        assert np.isnan(result.loc[1, "duracion_segundos"])
        assert pd.isna(result.loc[1, "fecha_destino"])

    def test_month_filter(self, normalized_trips):
        """Test origin month filter, crossing into the next month."""
        result = process_trips(normalized_trips, 2)

        assert result["id_usuario"].tolist() == [10]
        assert result.loc[0, "duracion_segundos"] == 300
        assert (result["fecha_origen"].dt.month == 2).all()

    def test_unparseable_origin_never_matches(self, normalized_trips):
        for month in range(1, 13):
            result = process_trips(normalized_trips, month)
            assert 9 not in result["id_usuario"].tolist()

    def test_weekday_label(self, normalized_trips):
        result = process_trips(normalized_trips, 3)
        assert result["dia_label"].tolist() == ["martes", "miércoles"]

    def test_index_reset(self, normalized_trips):
        result = process_trips(normalized_trips, 2)
        assert result.index.tolist() == [0]

    def test_missing_timestamp_column(self, normalized_trips):
        """Test a clear error when a year's schema lacks a field."""
        df = normalized_trips.drop(columns=["fecha_destino_recorrido"])

        with pytest.raises(ColumnNotFoundError, match="fecha_destino_recorrido"):
            process_trips(df, 3)

    def test_missing_projected_column(self, normalized_trips):
        df = normalized_trips.drop(columns=["long_estacion_destino"])

        with pytest.raises(ColumnNotFoundError) as exc_info:
            process_trips(df, 3)

        assert exc_info.value.missing == ["long_estacion_destino"]


class TestFetchTrips:
    """Test fetch_trips end to end with a mocked portal."""

    def test_scenario(self, trips_client, isolated_tempdir):
        """Test the March 2024 trip from an archive with a readme first."""
        df = fetch_trips(2024, 3, client=trips_client)

        assert len(df) == 2
        first = df.iloc[0]
        assert first["id_usuario"] == 7
        assert first["duracion_segundos"] == 930
        assert first["dia_label"] == "martes"
        assert first["fecha_origen"] == pd.Timestamp("2024-03-05 08:10:00")
        assert first["long_estacion_origen"] == pytest.approx(-58.40)
        assert first["long_estacion_destino"] == pytest.approx(-58.41)

        # second March trip has an unparseable destination
        assert np.isnan(df.iloc[1]["duracion_segundos"])
        assert list(isolated_tempdir.iterdir()) == []

    def test_requests_yearly_archive(self, trips_client, isolated_tempdir):
        """Test the archive URL and the wide timeout."""
        fetch_trips(2024, 4, client=trips_client)

        args, kwargs = trips_client.session.get.call_args
        assert args[0] == f"{TEST_BASE_URL}/recorridos-realizados-2024.zip"
        assert kwargs["timeout"] == 300

    def test_other_month(self, trips_client, isolated_tempdir):
        df = fetch_trips(2024, 4, client=trips_client)
        assert df["id_usuario"].tolist() == [8]
        assert df["duracion_segundos"].tolist() == [600.0]

    def test_month_without_trips(self, trips_client, isolated_tempdir):
        df = fetch_trips(2024, 12, client=trips_client)
        assert df.empty
        assert list(df.columns) == OUTPUT_COLUMNS

    def test_missing_year(self, client, isolated_tempdir):
        """Test an unpublished year aborts with DownloadError."""
        client.session.get.return_value = make_error_response(404)

        with pytest.raises(DownloadError):
            fetch_trips(1999, 1, client=client)

        assert list(isolated_tempdir.iterdir()) == []

    def test_archive_without_csv(self, client, tmp_path, isolated_tempdir):
        archive = build_zip(tmp_path / "a.zip", {"readme.txt": "sin datos"})
        client.session.get.return_value = make_response(archive.read_bytes())

        with pytest.raises(ArchiveError):
            fetch_trips(2024, 1, client=client)

    def test_english_labels(self, trips_client, isolated_tempdir):
        trips_client.config.label_locale = "en"

        df = fetch_trips(2024, 3, client=trips_client)

        assert df.iloc[0]["dia_label"] == "Tuesday"
