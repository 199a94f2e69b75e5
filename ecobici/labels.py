"""
Month and weekday names

Names are pinned per locale instead of read from the system locale so
output does not depend on the machine running the fetch.
"""
from typing import Dict, List

# January first
MONTH_NAMES: Dict[str, List[str]] = {
    "es": [
        "enero", "febrero", "marzo", "abril", "mayo", "junio",
        "julio", "agosto", "septiembre", "octubre", "noviembre", "diciembre",
    ],
    "en": [
        "January", "February", "March", "April", "May", "June",
        "July", "August", "September", "October", "November", "December",
    ],
}

# Monday first, matching pandas' dayofweek (Monday=0)
WEEKDAY_NAMES: Dict[str, List[str]] = {
    "es": ["lunes", "martes", "miércoles", "jueves", "viernes", "sábado", "domingo"],
    "en": ["Monday", "Tuesday", "Wednesday", "Thursday", "Friday", "Saturday", "Sunday"],
}

SUPPORTED_LOCALES = sorted(MONTH_NAMES)


def _check_locale(locale: str) -> None:
    if locale not in MONTH_NAMES:
        raise ValueError(
            f"Unsupported label locale: {locale}. "
            f"Must be one of {SUPPORTED_LOCALES}"
        )


def month_names(locale: str = "es") -> List[str]:
    """Month names in calendar order"""
    _check_locale(locale)
    return list(MONTH_NAMES[locale])


def weekday_names(locale: str = "es") -> List[str]:
    """Weekday names indexed by pandas' dayofweek"""
    _check_locale(locale)
    return list(WEEKDAY_NAMES[locale])


def weekday_order(locale: str = "es") -> List[str]:
    """Weekday names in display order, Sunday first"""
    names = weekday_names(locale)
    return names[-1:] + names[:-1]
