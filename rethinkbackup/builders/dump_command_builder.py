"""
Construcción y validación de los argumentos de `rethinkdb dump`
"""
from datetime import datetime
from typing import List, Optional
from ..config import Config
from ..exceptions import ConfigurationError
from ..models import DateFormat, DumpOptions, MoveCommand

REDACTED = "******"

# Flags cuyo valor nunca debe aparecer en logs ni diagnósticos
SECRET_FLAGS = ('-p',)


def validate_options(options: DumpOptions) -> None:
    """
    Verifica que las opciones estén correctamente especificadas

    Las reglas se evalúan en orden y la primera que falla corta la validación.

    Args:
        options: Opciones del dump

    Raises:
        ConfigurationError: si falta un dato obligatorio o hay una contradicción
    """
    if not options.connection:
        raise ConfigurationError("connection required")

    if not options.output_name:
        raise ConfigurationError("output name required")

    if not isinstance(options.date_format, DateFormat):
        raise ConfigurationError("date format required")

    if options.password and options.password_file:
        raise ConfigurationError("mutually exclusive credentials")

    if not isinstance(options.move_command, MoveCommand):
        raise ConfigurationError("move command required")


def artifact_name(options: DumpOptions, moment: datetime) -> str:
    """
    Nombre del archivo que genera el dump

    Args:
        options: Opciones del dump (ya validadas)
        moment: Instante usado para el prefijo de fecha

    Returns:
        `<fecha>_backup_<output_name>.tar.gz`
    """
    timestamp = options.date_format.render(moment)
    return f"{timestamp}_backup_{options.output_name}{Config.ARCHIVE_SUFFIX}"


def export_specs(options: DumpOptions) -> List[str]:
    """Especificaciones `-e` en el orden en que se pasan al dump"""
    if options.tables and options.databases:
        # Tabla afuera, base de datos adentro
        return [f"{database}.{table}"
                for table in options.tables
                for database in options.databases]
    if options.tables:
        return list(options.tables)
    if options.databases:
        return list(options.databases)
    return []


def build_dump_arguments(options: DumpOptions, moment: Optional[datetime] = None) -> List[str]:
    """
    Convierte las opciones en la lista de argumentos del dump

    Cada flag y su valor son elementos separados de la lista, para pasarla
    directamente a subprocess sin pasar por un shell.

    Args:
        options: Opciones del dump
        moment: Instante para el nombre del archivo (por defecto, ahora)

    Returns:
        Lista de argumentos (sin el binario)

    Raises:
        ConfigurationError: si las opciones no son válidas
    """
    validate_options(options)
    moment = moment or datetime.now()

    args = ['dump', '-c', options.connection, '-f', artifact_name(options, moment)]

    for spec in export_specs(options):
        args.extend(['-e', spec])

    if options.password:
        args.extend(['-p', options.password])

    if options.password_file:
        args.extend(['--password-file', options.password_file])

    if options.tls_cert:
        args.extend(['--tls-cert', options.tls_cert])

    if options.clients:
        args.extend(['--clients', str(options.clients)])

    if options.temp_dir:
        args.extend(['--temp-dir', options.temp_dir])

    return args


def redact_arguments(args: List[str]) -> List[str]:
    """Copia de los argumentos con los valores secretos ocultos"""
    redacted = list(args)
    for index, token in enumerate(redacted[:-1]):
        if token in SECRET_FLAGS:
            redacted[index + 1] = REDACTED
    return redacted
