"""HTTP client for the Buenos Aires open data portal."""
import io
import logging
from pathlib import Path
from typing import Optional

import pandas as pd
import requests

from .config import EcobiciConfig, get_config
from .exceptions import DownloadError

logger = logging.getLogger(__name__)


class EcobiciClient:
    """Client for downloading Ecobici datasets."""

    def __init__(self, config: Optional[EcobiciConfig] = None):
        """Initialize Ecobici client.

        Args:
            config: Ecobici configuration (loaded from the environment if omitted)
        """
        self.config = config or get_config()
        self.session = self._create_session()

    def _create_session(self) -> requests.Session:
        """Create requests session.

        The portal serves static files, so failed requests are not retried.
        """
        session = requests.Session()
        session.headers.update({"User-Agent": self.config.user_agent})
        return session

    def users_url(self, year: int) -> str:
        """Get URL of the yearly user registry."""
        return self.config.users_url(year)

    def trips_url(self, year: int) -> str:
        """Get URL of the yearly trip history archive."""
        return self.config.trips_url(year)

    def fetch_csv(self, url: str, timeout: Optional[int] = None) -> pd.DataFrame:
        """Download a CSV file and parse it into a DataFrame.

        Args:
            url: CSV file URL
            timeout: Request timeout in seconds (defaults to config.timeout)

        Returns:
            DataFrame with the types inferred by pandas

        Raises:
            DownloadError: If the request or the parsing fails
        """
        logger.info(f"Fetching CSV from {url}")

        try:
            response = self.session.get(url, timeout=timeout or self.config.timeout)
            response.raise_for_status()
            df = pd.read_csv(io.BytesIO(response.content), low_memory=False)
        except (requests.RequestException, ValueError) as e:
            # pandas parser errors are ValueError subclasses
            logger.error(f"Failed to fetch {url}: {e}")
            raise DownloadError(cause=e) from e

        logger.info(f"Fetched {len(df)} rows from {url}")
        return df

    def download_file(
        self,
        url: str,
        output_path: Path,
        timeout: Optional[int] = None,
        error_message: Optional[str] = None,
    ) -> Path:
        """Download a file in binary streaming mode.

        Args:
            url: File URL
            output_path: Local path to save file
            timeout: Request timeout in seconds (defaults to config.timeout)
            error_message: User-facing message of the DownloadError raised on failure

        Returns:
            Path to downloaded file

        Raises:
            DownloadError: If the download fails
        """
        logger.info(f"Downloading {url} to {output_path}")

        output_path.parent.mkdir(parents=True, exist_ok=True)

        try:
            with self.session.get(url, timeout=timeout or self.config.timeout, stream=True) as response:
                response.raise_for_status()

                with open(output_path, 'wb') as f:
                    for chunk in response.iter_content(chunk_size=self.config.chunk_size):
                        if chunk:
                            f.write(chunk)
        except (requests.RequestException, OSError) as e:
            logger.error(f"Failed to download {url}: {e}")
            raise DownloadError(error_message, cause=e) from e

        logger.info(f"Downloaded {output_path.stat().st_size} bytes from {url}")
        return output_path

    def close(self):
        """Close the HTTP session."""
        self.session.close()

    def __enter__(self) -> "EcobiciClient":
        return self

    def __exit__(self, *exc_info):
        self.close()
