"""
Configuration for the Ecobici fetchers
"""
from pydantic import field_validator
from pydantic_settings import BaseSettings

from . import __version__
from .labels import SUPPORTED_LOCALES


class EcobiciConfig(BaseSettings):
    """Ecobici open data configuration"""

    # Buenos Aires open data portal
    base_url: str = (
        "https://cdn.buenosaires.gob.ar/datosabiertos/datasets/"
        "transporte-y-obras-publicas/bicicletas-publicas"
    )

    # HTTP configuration
    timeout: int = 60
    archive_timeout: int = 300  # yearly trip archives are several hundred MB
    chunk_size: int = 8192
    user_agent: str = f"ecobici-data/{__version__}"

    # Month and weekday labels ("es" or "en")
    label_locale: str = "es"

    class Config:
        env_file = ".env"
        env_file_encoding = "utf-8"
        env_prefix = "ECOBICI_"

    @field_validator("label_locale")
    @classmethod
    def check_label_locale(cls, value: str) -> str:
        """Reject locales without pinned month and weekday names"""
        if value not in SUPPORTED_LOCALES:
            raise ValueError(
                f"Unsupported label locale: {value}. "
                f"Must be one of {SUPPORTED_LOCALES}"
            )
        return value

    def users_url(self, year: int) -> str:
        """Yearly user registry CSV"""
        return f"{self.base_url.rstrip('/')}/usuarios_ecobici_{year}.csv"

    def trips_url(self, year: int) -> str:
        """Yearly trip history ZIP"""
        return f"{self.base_url.rstrip('/')}/recorridos-realizados-{year}.zip"


def get_config() -> EcobiciConfig:
    """Get Ecobici configuration instance"""
    return EcobiciConfig()
