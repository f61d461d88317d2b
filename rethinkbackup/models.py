"""
Modelos de datos del sistema
"""
import os
from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Optional, Tuple
from .config import Config
from .exceptions import ConfigurationError


class DateFormat(Enum):
    """Formatos reconocidos para el prefijo de fecha del archivo"""
    SHORT = "%Y%m%d%H%M"        # YYYYMMDDHHMM
    ISO = "%Y-%m-%d-%H-%M"      # YYYY-MM-DD-HH-MM

    def render(self, moment: datetime) -> str:
        """Formatea el instante con este layout"""
        return moment.strftime(self.value)

    @classmethod
    def from_name(cls, name: str) -> "DateFormat":
        """
        Obtiene el formato a partir de su nombre ("short", "iso") o layout

        Raises:
            ConfigurationError: si el nombre no corresponde a ningún formato
        """
        text = (name or "").strip()
        for member in cls:
            if text.upper() == member.name or text == member.value:
                return member
        raise ConfigurationError("date format required")


class MoveCommand(Enum):
    """Utilidad de sistema usada para mover el archivo resultante"""
    UNIX = ("mv",)
    WINDOWS = ("cmd", "/c", "move")  # move es un builtin de cmd.exe

    @property
    def binary(self) -> str:
        """Programa que se busca en el PATH"""
        return self.value[0]

    @property
    def argv_prefix(self) -> Tuple[str, ...]:
        """Tokens que van antes de origen y destino"""
        return self.value

    @classmethod
    def from_name(cls, name: str) -> "MoveCommand":
        """
        Obtiene el comando a partir de un alias de configuración

        Raises:
            ConfigurationError: si el alias no es reconocido
        """
        aliases = {
            'unix': cls.UNIX, 'posix': cls.UNIX, 'linux': cls.UNIX,
            'mac': cls.UNIX, 'mv': cls.UNIX,
            'windows': cls.WINDOWS, 'move': cls.WINDOWS,
        }
        member = aliases.get((name or "").strip().lower())
        if member is None:
            raise ConfigurationError("move command required")
        return member

    @classmethod
    def for_platform(cls) -> "MoveCommand":
        """Comando apropiado para el sistema operativo actual"""
        return cls.WINDOWS if os.name == 'nt' else cls.UNIX


def _as_names(value) -> Tuple[str, ...]:
    """Un nombre suelto cuenta como lista de un solo elemento"""
    if not value:
        return ()
    if isinstance(value, str):
        return (value,)
    return tuple(value)


@dataclass(frozen=True)
class DumpOptions:
    """Opciones del comando `rethinkdb dump` (inmutables)"""
    connection: str
    output_name: str
    date_format: Optional[DateFormat] = None
    databases: Tuple[str, ...] = ()
    tables: Tuple[str, ...] = ()
    password: str = ""
    password_file: str = ""
    tls_cert: str = ""
    clients: int = 0
    temp_dir: str = ""
    move_command: Optional[MoveCommand] = field(default_factory=MoveCommand.for_platform)

    def __post_init__(self):
        """Normaliza las secuencias a tuplas"""
        object.__setattr__(self, 'databases', _as_names(self.databases))
        object.__setattr__(self, 'tables', _as_names(self.tables))


@dataclass
class ResultFile:
    """Archivo tar.gz producido por el comando de dump"""
    path: str
    mime: str = Config.ARCHIVE_MIME
    move_command: Optional[MoveCommand] = None
    executed_command: str = ""
    command_output: str = ""

    def file_name(self) -> str:
        """Solo el componente de nombre de archivo de `path`"""
        return os.path.basename(self.path)


@dataclass
class ProcessOutput:
    """Resultado crudo de un proceso hijo"""
    returncode: int
    stdout: str = ""
    stderr: str = ""

    @property
    def ok(self) -> bool:
        return self.returncode == 0


@dataclass
class BackupJob:
    """Trabajo de backup definido en config.json"""
    name: str
    options: DumpOptions
    destination: str = ""
    enabled: bool = True

    def __post_init__(self):
        """Validación después de inicialización"""
        if not self.name:
            raise ValueError("El nombre del trabajo de backup es obligatorio")


@dataclass
class BackupResult:
    """Resultado de una operación de backup"""
    job_name: str
    success: bool
    result_file: Optional[ResultFile] = None
    error: Optional[str] = None
    duration_seconds: float = 0.0

    @property
    def output_file(self) -> Optional[str]:
        return self.result_file.path if self.result_file else None

    def __str__(self):
        if self.success:
            return f"✓ {self.job_name}: {self.output_file} ({self.duration_seconds:.2f}s)"
        else:
            return f"✗ {self.job_name}: {self.error}"
