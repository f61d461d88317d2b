"""
Movimiento del archivo de backup a su carpeta de destino
"""
import os
import shutil
import threading
from typing import Optional
from ..exceptions import BinaryNotFoundError, CancelledError, RelocationError
from ..logger import LoggerService
from ..models import MoveCommand, ResultFile
from .process_runner import run_process


class RelocationService:
    """Mueve el tar.gz con la utilidad de sistema (mv / move)"""

    def __init__(self):
        self.logger = LoggerService.get_logger("RelocationService")

    def relocate(self, result: ResultFile, destination_folder: str,
                 timeout: Optional[float] = None,
                 cancel_event: Optional[threading.Event] = None) -> ResultFile:
        """
        Mueve el archivo resultante conservando su nombre

        No se valida que la carpeta exista: el propio comando de movimiento
        reporta ese error.

        Args:
            result: Resultado del dump
            destination_folder: Carpeta de destino
            timeout: Segundos máximos para el comando
            cancel_event: Evento para abortar el comando

        Returns:
            El mismo ResultFile, ya apuntando al destino

        Raises:
            BinaryNotFoundError: si la utilidad de movimiento no está en el PATH
            RelocationError: si el comando no inicia o termina con error
            CancelledError: si se alcanzó el timeout o se canceló
        """
        move_command = result.move_command or MoveCommand.for_platform()
        binary = shutil.which(move_command.binary)
        if not binary:
            raise BinaryNotFoundError(move_command.binary)

        source = result.path
        destination = os.path.join(destination_folder, result.file_name())
        argv = [binary, *move_command.argv_prefix[1:], source, destination]

        result.executed_command = " ".join(argv)
        self.logger.info(f"Moviendo {source} -> {destination}")

        try:
            output = run_process(argv, timeout=timeout, cancel_event=cancel_event)
        except CancelledError as e:
            result.command_output = e.stderr
            e.result = result
            raise
        except OSError as e:
            result.command_output = ""
            raise RelocationError(f"No se pudo iniciar {binary}: {e}", result=result) from e

        if not output.ok:
            result.command_output = output.stderr
            self.logger.error(f"Movimiento fallido (código {output.returncode}): {output.stderr.strip()}")
            raise RelocationError(
                f"El movimiento terminó con código {output.returncode}",
                result=result,
                stderr=output.stderr,
                returncode=output.returncode
            )

        result.command_output = output.stdout
        result.path = destination
        return result
