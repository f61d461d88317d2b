"""
Excepciones del dominio de backup

Toda falla esperada del núcleo (construcción de argumentos, ejecución del
dump, movimiento del archivo) se expresa con una de estas clases. Las que
ocurren después de crear el ResultFile lo adjuntan en ``result`` para que
el llamador pueda inspeccionar lo que se intentó.
"""
from typing import Optional


class ReBackupError(Exception):
    """Base para todas las fallas del sistema de backup"""

    def __init__(self, message: str, result=None, stderr: str = ""):
        super().__init__(message)
        self.result = result
        self.stderr = stderr


class ConfigurationError(ReBackupError):
    """Opciones faltantes, inválidas o contradictorias (antes de lanzar procesos)"""


class BinaryNotFoundError(ReBackupError):
    """La herramienta externa no está en el PATH"""

    def __init__(self, binary: str):
        super().__init__(f"La herramienta {binary} no está instalada o no está en el PATH")
        self.binary = binary


class ExecutionError(ReBackupError):
    """El proceso de dump no pudo iniciar o terminó con error"""

    def __init__(self, message: str, result=None, stderr: str = "",
                 returncode: Optional[int] = None):
        super().__init__(message, result=result, stderr=stderr)
        self.returncode = returncode


class RelocationError(ReBackupError):
    """El comando de movimiento no pudo iniciar o terminó con error"""

    def __init__(self, message: str, result=None, stderr: str = "",
                 returncode: Optional[int] = None):
        super().__init__(message, result=result, stderr=stderr)
        self.returncode = returncode


class CancelledError(ReBackupError):
    """El proceso hijo fue abortado por timeout o cancelación"""
