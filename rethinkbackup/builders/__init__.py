"""
Construcción de comandos para herramientas externas
"""
from .dump_command_builder import (
    artifact_name,
    build_dump_arguments,
    export_specs,
    redact_arguments,
    validate_options,
)

__all__ = [
    'artifact_name',
    'build_dump_arguments',
    'export_specs',
    'redact_arguments',
    'validate_options'
]
