"""Errors raised by the Ecobici fetchers."""
from typing import Iterable, Optional


class EcobiciError(Exception):
    """Base class for all Ecobici fetcher errors."""


class DownloadError(EcobiciError):
    """A dataset could not be downloaded.

    The message shown to the user is fixed; the transport error that caused
    it is kept on ``cause`` (and chained as ``__cause__``) for diagnostics.
    """

    default_message = (
        "No se pudo descargar el archivo. Verifica tu conexión o si el año "
        "solicitado existe en el portal de datos."
    )

    def __init__(self, message: Optional[str] = None, cause: Optional[BaseException] = None):
        self.message = message or self.default_message
        self.cause = cause
        super().__init__(self.message)


class ArchiveError(EcobiciError):
    """A downloaded archive is unreadable or holds no CSV."""


class ColumnNotFoundError(EcobiciError, KeyError):
    """A normalized column expected downstream is missing from the dataset."""

    def __init__(self, missing: Iterable[str], available: Iterable[str] = (), dataset: str = "dataset"):
        self.missing = list(missing)
        self.available = list(available)
        self.dataset = dataset
        super().__init__(
            f"Expected column(s) {', '.join(self.missing)} not found in {dataset}. "
            f"Available columns: {', '.join(self.available) or '(none)'}"
        )

    def __str__(self) -> str:
        # KeyError.__str__ would repr() the message
        return self.args[0]
