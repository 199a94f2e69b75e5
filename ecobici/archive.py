"""
ZIP archive loader

Downloads an archive into a per-call temporary directory, extracts the
first CSV entry, parses it and removes every temporary file on exit.
"""
import logging
import zipfile
from pathlib import Path
from tempfile import TemporaryDirectory
from typing import List, Optional

import pandas as pd

from .client import EcobiciClient
from .exceptions import ArchiveError

logger = logging.getLogger(__name__)


DOWNLOAD_ERROR_MESSAGE = "Error al descargar el archivo ZIP. Verifique la conexión o el año."
NO_CSV_MESSAGE = "No se encontró ningún CSV dentro del ZIP."


def find_csv_entry(names: List[str]) -> Optional[str]:
    """
    Pick the first archive entry whose name ends in ".csv"

    The suffix match is case-sensitive.
    """
    for name in names:
        if name.endswith(".csv"):
            return name
    return None


def load_csv_from_zip(
    url: str,
    client: Optional[EcobiciClient] = None,
    timeout: Optional[int] = None,
) -> pd.DataFrame:
    """
    Download a ZIP archive and read the first CSV inside it

    Args:
        url: Archive URL
        client: HTTP client (a new one is created and closed if omitted)
        timeout: Download timeout in seconds (defaults to config.archive_timeout)

    Returns:
        DataFrame with the types inferred by pandas

    Raises:
        DownloadError: If the archive cannot be downloaded
        ArchiveError: If the file is not a ZIP or holds no CSV entry
    """
    owns_client = client is None
    if owns_client:
        client = EcobiciClient()

    try:
        with TemporaryDirectory(prefix="ecobici_") as temp_dir:
            temp_path = Path(temp_dir)
            zip_path = temp_path / "archive.zip"
            extract_dir = temp_path / "extracted"

            client.download_file(
                url,
                zip_path,
                timeout=timeout or client.config.archive_timeout,
                error_message=DOWNLOAD_ERROR_MESSAGE,
            )

            try:
                with zipfile.ZipFile(zip_path) as archive:
                    names = archive.namelist()
                    csv_name = find_csv_entry(names)

                    if csv_name is None:
                        logger.error(f"No CSV entry in {url}: {names}")
                        raise ArchiveError(NO_CSV_MESSAGE)

                    logger.info(f"Extracting {csv_name} from {url}")
                    csv_path = Path(archive.extract(csv_name, path=extract_dir))
            except zipfile.BadZipFile as e:
                logger.error(f"Invalid ZIP archive from {url}: {e}")
                raise ArchiveError(f"El archivo descargado no es un ZIP válido: {url}") from e

            # Neither file outlives this block, even if parsing fails
            try:
                df = pd.read_csv(csv_path, low_memory=False)
            finally:
                csv_path.unlink(missing_ok=True)
                zip_path.unlink(missing_ok=True)

        logger.info(f"Read {len(df)} rows from {csv_name}")
        return df

    finally:
        if owns_client:
            client.close()
