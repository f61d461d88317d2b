"""
Servicios de la aplicación
"""
from .backup_service import BackupService
from .dump_service import DumpService
from .process_runner import run_process
from .relocation_service import RelocationService

__all__ = [
    'BackupService',
    'DumpService',
    'RelocationService',
    'run_process'
]
