"""
Pytest fixtures for Ecobici fetcher tests.

Provides fixtures for:
- A client whose HTTP session is mocked (no network access)
- Sample user registry and trip history files
- ZIP archives built on disk
"""
import os
import tempfile
import zipfile
from pathlib import Path
from typing import Dict
from unittest.mock import MagicMock

import pytest
import requests

from ecobici.client import EcobiciClient
from ecobici.config import EcobiciConfig


TEST_BASE_URL = "https://example.test/bicicletas-publicas"

USERS_CSV = """ID_usuario,Genero_Usuario,Edad_Usuario,Fecha_Alta,Hora_Alta
101,FEMALE,52,2024-06-10,14:30:00
102,MALE,24,2024-06-15,08:05:00
103,OTHER,15,2024-03-01,02:59:59
104,,55,2024-01-20,23:10:00
105,female,14,2024-06-30,18:00:00
"""

TRIPS_CSV = """Id_recorrido,duracion_recorrido,fecha_origen_recorrido,id_estacion_origen,long_estacion_origen,lat_estacion_origen,fecha_destino_recorrido,id_estacion_destino,long_estacion_destino,lat_estacion_destino,id_usuario,modelo_bicicleta,Género
1,930,2024-03-05 08:10:00,10,-58.40,-34.60,2024-03-05 08:25:30,20,-58.41,-34.61,7,ICONIC,FEMALE
2,600,2024-04-01 09:00:00,11,-58.42,-34.62,2024-04-01 09:10:00,21,-58.43,-34.63,8,FIT,MALE
3,0,2024-03-31 23:50:00,12,-58.44,-34.64,not a date,22,-58.45,-34.65,9,FIT,OTHER
"""


def pytest_configure(config):
    """Configure pytest markers."""
    config.addinivalue_line(
        "markers", "integration: mark test as integration test (downloads from the live portal)"
    )


def pytest_collection_modifyitems(config, items):
    """Skip integration tests unless ECOBICI_RUN_INTEGRATION=1."""
    if os.getenv("ECOBICI_RUN_INTEGRATION") == "1":
        return

    skip = pytest.mark.skip(reason="set ECOBICI_RUN_INTEGRATION=1 to run")
    for item in items:
        if "integration" in item.keywords:
            item.add_marker(skip)


def make_response(data: bytes) -> MagicMock:
    """Build a mocked requests response serving data."""
    response = MagicMock()
    response.content = data
    response.iter_content.return_value = [data[:10], data[10:]]
    response.raise_for_status.return_value = None
    response.__enter__.return_value = response
    return response


def make_error_response(status_code: int = 404) -> MagicMock:
    """Build a mocked requests response failing with an HTTP error."""
    response = make_response(b"")
    response.status_code = status_code
    response.raise_for_status.side_effect = requests.HTTPError(f"{status_code} Client Error")
    return response


def build_zip(path: Path, entries: Dict[str, str]) -> Path:
    """Write a ZIP archive with the given entry names and text contents."""
    with zipfile.ZipFile(path, "w") as archive:
        for name, content in entries.items():
            archive.writestr(name, content)
    return path


@pytest.fixture
def ecobici_config():
    """Create Ecobici configuration for testing."""
    return EcobiciConfig(base_url=TEST_BASE_URL, timeout=5, archive_timeout=300)


@pytest.fixture
def client(ecobici_config):
    """Create Ecobici client with a mocked HTTP session."""
    client = EcobiciClient(ecobici_config)
    client.session = MagicMock()
    return client


@pytest.fixture
def isolated_tempdir(tmp_path, monkeypatch):
    """Point the process temporary directory at an empty folder."""
    temp_root = tmp_path / "system_tmp"
    temp_root.mkdir()
    monkeypatch.setattr(tempfile, "tempdir", str(temp_root))
    return temp_root


@pytest.fixture
def trips_zip_bytes(tmp_path):
    """Trip history archive with a readme before the CSV entry."""
    path = build_zip(
        tmp_path / "recorridos.zip",
        {
            "readme.txt": "Recorridos realizados 2024",
            "recorridos-realizados-2024.csv": TRIPS_CSV,
        },
    )
    return path.read_bytes()


@pytest.fixture
def users_csv_bytes():
    """User registry CSV with raw, mixed-case headers."""
    return USERS_CSV.encode("utf-8")
