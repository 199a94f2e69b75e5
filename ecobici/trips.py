"""
Trip history fetcher

Downloads the yearly Ecobici trip archive, computes trip durations and
weekday labels, and returns the trips of a single month.
"""
import logging
from typing import Optional

import pandas as pd

from .archive import load_csv_from_zip
from .client import EcobiciClient
from .columns import clean_names, require_columns
from .config import EcobiciConfig
from .features import parse_timestamp, weekday_label

logger = logging.getLogger(__name__)


TIMESTAMP_COLUMNS = ["fecha_origen_recorrido", "fecha_destino_recorrido"]
PASSTHROUGH_COLUMNS = ["id_usuario", "long_estacion_origen", "long_estacion_destino"]

OUTPUT_COLUMNS = [
    "id_usuario",
    "fecha_origen",
    "fecha_destino",
    "duracion_segundos",
    "dia_label",
    "long_estacion_origen",
    "long_estacion_destino",
]


def process_trips(df: pd.DataFrame, month: int, locale: str = "es") -> pd.DataFrame:
    """
    Derive trip columns and keep the trips that started in month

    Args:
        df: Trip history with normalized column names
        month: Calendar month (1-12) of the trip origin
        locale: Locale of the weekday labels

    Returns:
        DataFrame with exactly OUTPUT_COLUMNS

    Raises:
        ColumnNotFoundError: If a source column is missing
    """
    require_columns(df, TIMESTAMP_COLUMNS + PASSTHROUGH_COLUMNS, dataset="recorridos")

    origin = parse_timestamp(df["fecha_origen_recorrido"])
    destination = parse_timestamp(df["fecha_destino_recorrido"])

    unparsed = int(origin.isna().sum() + destination.isna().sum())
    if unparsed:
        logger.warning(f"{unparsed} trip timestamps could not be parsed")

    # Duration is computed here; the duration column shipped with the
    # source is not reliable across years
    processed = df.assign(
        fecha_origen=origin,
        fecha_destino=destination,
        duracion_segundos=(destination - origin).dt.total_seconds(),
        mes_origen=origin.dt.month,
        dia_label=weekday_label(origin, locale),
    )

    processed = processed[processed["mes_origen"] == month]

    return processed[OUTPUT_COLUMNS].reset_index(drop=True)


def fetch_trips(
    year: int,
    month: int,
    client: Optional[EcobiciClient] = None,
    config: Optional[EcobiciConfig] = None,
) -> pd.DataFrame:
    """
    Fetch the Ecobici trips of one month

    Args:
        year: Year of the dataset (e.g. 2024)
        month: Month (1-12) of the trip origin
        client: HTTP client to reuse (a new one is created and closed if omitted)
        config: Configuration used when no client is given

    Returns:
        DataFrame with id_usuario, fecha_origen, fecha_destino,
        duracion_segundos, dia_label, long_estacion_origen and
        long_estacion_destino

    Raises:
        DownloadError: If the archive cannot be downloaded
        ArchiveError: If the archive holds no CSV
        ColumnNotFoundError: If the year's schema lacks a needed column
    """
    owns_client = client is None
    if owns_client:
        client = EcobiciClient(config)

    try:
        url = client.trips_url(year)
        logger.info(
            f"Descargando y procesando recorridos de {year}... "
            f"(esto puede tardar debido al tamaño del archivo)"
        )

        df = load_csv_from_zip(url, client=client)
        df = clean_names(df)

        trips = process_trips(df, month, locale=client.config.label_locale)
        logger.info(f"Processed {len(trips)} trips for {year}, month {month}")
        return trips

    finally:
        if owns_client:
            client.close()
