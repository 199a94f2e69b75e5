"""
User registry fetcher

Downloads the yearly Ecobici user registry, normalizes its columns and
optionally filters it by registration month and adds derived features.
"""
import logging
from typing import Optional

import pandas as pd

from .client import EcobiciClient
from .columns import clean_names, require_columns
from .config import EcobiciConfig
from .features import enrich_users, parse_date

logger = logging.getLogger(__name__)


def filter_by_registration_month(df: pd.DataFrame, month: int) -> pd.DataFrame:
    """
    Keep rows whose fecha_alta falls in the given calendar month

    The fecha_alta column is left untouched; rows with an unparseable date
    never match.
    """
    require_columns(df, ["fecha_alta"], dataset="usuarios")

    registered = parse_date(df["fecha_alta"])
    return df[registered.dt.month == month]


def fetch_users(
    year: int,
    month: Optional[int] = None,
    enrich: bool = False,
    client: Optional[EcobiciClient] = None,
    config: Optional[EcobiciConfig] = None,
) -> pd.DataFrame:
    """
    Fetch the Ecobici user registry for a year

    Args:
        year: Year of the dataset (e.g. 2024)
        month: Registration month (1-12) to keep; None keeps the whole year
        enrich: Add genero, mes_nombre, hora, momento_dia, dia_semana
            and rango_etario columns
        client: HTTP client to reuse (a new one is created and closed if omitted)
        config: Configuration used when no client is given

    Returns:
        DataFrame with normalized column names

    Raises:
        DownloadError: If the file cannot be downloaded or parsed
        ColumnNotFoundError: If the year's schema lacks a needed column
    """
    owns_client = client is None
    if owns_client:
        client = EcobiciClient(config)

    try:
        url = client.users_url(year)
        logger.info(f"Descargando datos de usuarios del año {year}...")

        df = client.fetch_csv(url)
        df = clean_names(df)

        if month is not None:
            df = filter_by_registration_month(df, month)
            logger.info(f"Filtered to {len(df)} users registered in month {month}")

        if enrich:
            df = enrich_users(df, locale=client.config.label_locale)

        return df

    finally:
        if owns_client:
            client.close()
