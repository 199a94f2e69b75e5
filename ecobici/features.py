"""
Derived features for Ecobici datasets

Each helper takes a pandas Series and returns a new Series aligned on the
same index, so they can be combined with DataFrame.assign.
"""
import logging

import numpy as np
import pandas as pd

from .columns import require_columns
from .labels import month_names, weekday_names, weekday_order

logger = logging.getLogger(__name__)


# Source timestamps of the trip history
TIMESTAMP_FORMAT = "%Y-%m-%d %H:%M:%S"

# Accepted layouts for the registration time of day
HOUR_FORMATS = ["%H:%M:%S", "%H:%M", TIMESTAMP_FORMAT]

GENDER_LABELS = {
    "MALE": "Masculino",
    "FEMALE": "Femenino",
}
GENDER_OTHER = "Otro"

# (start hour inclusive, end hour exclusive, label)
TIME_OF_DAY = [
    (0, 6, "Madrugada"),
    (6, 12, "Mañana"),
    (12, 18, "Tarde"),
]
TIME_OF_DAY_OTHER = "Noche"

# (age upper bound exclusive, label); numbered so they sort as text
AGE_BRACKETS = [
    (15, "1. Menores de 15"),
    (20, "2. 15 a 20"),
    (25, "3. 20 a 25"),
    (30, "4. 25 a 30"),
    (35, "5. 30 a 35"),
    (40, "6. 35 a 40"),
    (45, "7. 40 a 45"),
    (50, "8. 45 a 50"),
    (55, "9. 50 a 55"),
]
AGE_BRACKET_OTHER = "10. Mayores de 55"
AGE_BRACKET_LABELS = [label for _, label in AGE_BRACKETS] + [AGE_BRACKET_OTHER]

USER_FEATURE_COLUMNS = ["fecha_alta", "hora_alta", "genero_usuario", "edad_usuario"]


def _as_float_array(values: pd.Series) -> np.ndarray:
    """Numeric view of values with NaN for anything missing or non-numeric"""
    return pd.to_numeric(values, errors="coerce").to_numpy(dtype="float64", na_value=np.nan)


def parse_date(values: pd.Series) -> pd.Series:
    """
    Parse dates, leaving NaT where a value cannot be parsed

    Each value is read as ISO 8601 on its own, so date-only and date-time
    values can be mixed in one column.
    """
    if pd.api.types.is_datetime64_any_dtype(values):
        return values
    return pd.to_datetime(values, format="ISO8601", errors="coerce")


def parse_timestamp(values: pd.Series, fmt: str = TIMESTAMP_FORMAT) -> pd.Series:
    """Parse timestamps with a fixed format; mismatches become NaT"""
    if pd.api.types.is_datetime64_any_dtype(values):
        return values
    return pd.to_datetime(values, format=fmt, errors="coerce")


def gender_label(values: pd.Series) -> pd.Series:
    """
    Map source gender codes to Spanish labels

    Only the exact codes MALE and FEMALE are recognized; everything else,
    nulls included, becomes "Otro".
    """
    return values.map(GENDER_LABELS).fillna(GENDER_OTHER).astype(object)


def hour_of_day(values: pd.Series) -> pd.Series:
    """Extract the hour (0-23) from a time of day column as nullable integers"""
    if pd.api.types.is_datetime64_any_dtype(values):
        return values.dt.hour.astype("Int64")
    if pd.api.types.is_timedelta64_dtype(values):
        return values.dt.components.hours.astype("Int64")

    text = values.astype("string").str.strip()
    parsed = pd.Series(pd.NaT, index=values.index, dtype="datetime64[ns]")

    for fmt in HOUR_FORMATS:
        parsed = parsed.fillna(pd.to_datetime(text, format=fmt, errors="coerce"))

    if parsed.isna().all() and text.notna().any():
        logger.warning(
            f"No time of day could be parsed from {text.notna().sum()} values "
            f"(dtype {values.dtype}); every hour is missing"
        )

    return parsed.dt.hour.astype("Int64")


def time_of_day(hours: pd.Series) -> pd.Series:
    """Bucket hours into Madrugada / Mañana / Tarde / Noche"""
    h = _as_float_array(hours)
    conditions = [(h >= start) & (h < end) for start, end, _ in TIME_OF_DAY]
    labels = [label for _, _, label in TIME_OF_DAY]

    return pd.Series(
        np.select(conditions, labels, default=TIME_OF_DAY_OTHER),
        index=hours.index,
        dtype=object,
    )


def age_bracket(ages: pd.Series) -> pd.Series:
    """
    Bucket ages into ten ordered brackets

    Brackets are half-open [lower, upper). Ages below 15 (negative ones
    included) fall into the first bracket; ages of 55 and over, and ages
    that are missing or not numeric, fall into "10. Mayores de 55".
    """
    a = _as_float_array(ages)
    # np.select picks the first matching condition
    conditions = [a < upper for upper, _ in AGE_BRACKETS]
    labels = [label for _, label in AGE_BRACKETS]

    return pd.Series(
        np.select(conditions, labels, default=AGE_BRACKET_OTHER),
        index=ages.index,
        dtype=object,
    )


def month_label(dates: pd.Series, locale: str = "es") -> pd.Series:
    """Full month name as an ordered categorical (January first)"""
    names = month_names(locale)
    codes = (dates.dt.month - 1).fillna(-1).astype(int)

    return pd.Series(
        pd.Categorical.from_codes(codes, categories=names, ordered=True),
        index=dates.index,
    )


def weekday_label(dates: pd.Series, locale: str = "es") -> pd.Series:
    """Full weekday name as an ordered categorical (Sunday first)"""
    names = dict(enumerate(weekday_names(locale)))
    labels = dates.dt.dayofweek.map(names)

    return pd.Series(
        pd.Categorical(labels, categories=weekday_order(locale), ordered=True),
        index=dates.index,
    )


def enrich_users(df: pd.DataFrame, locale: str = "es") -> pd.DataFrame:
    """
    Add derived user columns

    Adds genero, mes_nombre, hora, momento_dia, dia_semana and
    rango_etario. Expects normalized column names.

    Args:
        df: Normalized user registry
        locale: Locale of the month and weekday names

    Returns:
        Copy of df with the derived columns appended

    Raises:
        ColumnNotFoundError: If a source column is missing
    """
    require_columns(df, USER_FEATURE_COLUMNS, dataset="usuarios")

    registered = parse_date(df["fecha_alta"])
    hours = hour_of_day(df["hora_alta"])

    enriched = df.assign(
        genero=gender_label(df["genero_usuario"]),
        mes_nombre=month_label(registered, locale),
        hora=hours,
        momento_dia=time_of_day(hours),
        dia_semana=weekday_label(registered, locale),
        rango_etario=age_bracket(df["edad_usuario"]),
    )

    logger.info(f"Enriched {len(enriched)} user rows")
    return enriched
