"""
Column name normalization

Source files change their headers from year to year (casing, accents,
spaces, camelCase). Every header is rewritten to lower snake_case before
any field is referenced.
"""
import logging
import re
import unicodedata
from typing import Iterable, List

import pandas as pd

from .exceptions import ColumnNotFoundError

logger = logging.getLogger(__name__)


_CAMEL_BOUNDARY = re.compile(r"(?<=[a-z0-9])(?=[A-Z])|(?<=[A-Z])(?=[A-Z][a-z])")
_NON_ALNUM = re.compile(r"[^a-z0-9]+")


def normalize_name(name) -> str:
    """
    Normalize a single column name

    Examples:
        "Fecha Alta" -> "fecha_alta"
        "géneroUsuario" -> "genero_usuario"
        "  % ocupación " -> "percent_ocupacion"
    """
    text = str(name)
    text = unicodedata.normalize("NFKD", text).encode("ascii", "ignore").decode("ascii")
    text = text.replace("%", " percent ").replace("#", " number ")
    text = _CAMEL_BOUNDARY.sub("_", text)
    text = _NON_ALNUM.sub("_", text.lower()).strip("_")

    if not text:
        return "x"
    if text[0].isdigit():
        return f"x{text}"
    return text


def normalize_names(names: Iterable) -> List[str]:
    """Normalize column names, suffixing duplicates with _2, _3, ..."""
    result = []
    used = set()

    for name in names:
        base = normalize_name(name)
        candidate = base
        suffix = 1

        while candidate in used:
            suffix += 1
            candidate = f"{base}_{suffix}"

        used.add(candidate)
        result.append(candidate)

    return result


def clean_names(df: pd.DataFrame) -> pd.DataFrame:
    """Return a copy of df with normalized column names"""
    renamed = df.copy()
    renamed.columns = normalize_names(df.columns)

    changed = [f"{a} -> {b}" for a, b in zip(df.columns, renamed.columns) if a != b]
    if changed:
        logger.debug(f"Renamed columns: {', '.join(changed)}")

    return renamed


def require_columns(df: pd.DataFrame, columns: Iterable[str], dataset: str = "dataset") -> None:
    """
    Check that the normalized columns used downstream exist

    Raises:
        ColumnNotFoundError: Naming every missing column
    """
    missing = [c for c in columns if c not in df.columns]
    if missing:
        logger.error(f"Missing columns in {dataset}: {missing}")
        raise ColumnNotFoundError(missing, available=df.columns, dataset=dataset)
