"""
Configuración centralizada del sistema de backup de RethinkDB
"""
import logging
import os
from pathlib import Path
from dotenv import load_dotenv, find_dotenv


def _env_flag(name: str, default: bool) -> bool:
    """Interpreta una variable de entorno booleana"""
    value = os.getenv(name)
    if value is None:
        return default
    return value.strip().lower() in ('1', 'true', 'yes', 'on')


def _env_seconds(name: str):
    """Lee una cantidad de segundos desde el entorno (None si no está definida)"""
    value = os.getenv(name)
    if not value:
        return None
    try:
        seconds = float(value)
    except ValueError:
        return None
    return seconds if seconds > 0 else None


class Config:
    """Configuración centralizada del sistema"""

    ENV_FILE = find_dotenv(usecwd=True)

    # Cargar variables de entorno desde la raíz real del proyecto
    load_dotenv(ENV_FILE)

    # BASE_DIR debe ser la raíz donde está main.py
    BASE_DIR = Path(ENV_FILE).parent if ENV_FILE else Path(__file__).resolve().parents[1]

    BACKUP_DIR = Path(os.getenv("BACKUP_DIR")) if os.getenv("BACKUP_DIR") else (BASE_DIR / "Backups")
    LOG_DIR = Path(os.getenv("LOG_DIR")) if os.getenv("LOG_DIR") else (BASE_DIR / "Logs")
    CONFIG_FILE = BASE_DIR / "config.json"

    # Herramienta externa de dump
    DUMP_BINARY = os.getenv("RETHINKDB_BINARY", "rethinkdb")
    DUMP_TIMEOUT = _env_seconds("DUMP_TIMEOUT")  # None = sin límite

    ARCHIVE_MIME = "application/x-tar"
    ARCHIVE_SUFFIX = ".tar.gz"

    LOG_LEVEL = logging.INFO
    LOG_FORMAT = '%(asctime)s - %(name)s - %(levelname)s - %(message)s'
    LOG_TO_FILE = _env_flag("LOG_TO_FILE", True)

    DEFAULT_CONFIG = {
        "backups": [
            {
                "name": "cluster-principal",
                "connection": "localhost:28015",
                "output_name": "principal",
                "databases": [],
                "tables": [],
                "password": "${RETHINKDB_PASSWORD}",
                "password_file": "",
                "tls_cert": "",
                "clients": 0,
                "temp_dir": "",
                "date_format": "iso",
                "move_command": "unix",
                "destination": "",
                "enabled": True
            }
        ]
    }

    @classmethod
    def ensure_directories(cls):
        """Crea los directorios necesarios si no existen"""
        cls.BACKUP_DIR.mkdir(parents=True, exist_ok=True)
        if cls.LOG_TO_FILE:
            cls.LOG_DIR.mkdir(parents=True, exist_ok=True)
