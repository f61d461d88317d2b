"""
Ejecutor del dump de RethinkDB
"""
import shutil
import threading
from datetime import datetime
from typing import Callable, Optional
from ..builders.dump_command_builder import (
    artifact_name,
    build_dump_arguments,
    redact_arguments,
)
from ..config import Config
from ..exceptions import BinaryNotFoundError, CancelledError, ExecutionError
from ..logger import LoggerService
from ..models import DumpOptions, ResultFile
from .process_runner import run_process


class DumpService:
    """Lanza `rethinkdb dump` y describe el archivo resultante"""

    def __init__(self, binary: Optional[str] = None,
                 clock: Callable[[], datetime] = datetime.now):
        """
        Inicializa el ejecutor

        Args:
            binary: Nombre o ruta del binario de RethinkDB
            clock: Fuente de la hora actual (inyectable para tests)
        """
        self.binary = binary or Config.DUMP_BINARY
        self.clock = clock
        self.logger = LoggerService.get_logger("DumpService")

    def execute(self, options: DumpOptions,
                timeout: Optional[float] = None,
                cancel_event: Optional[threading.Event] = None) -> ResultFile:
        """
        Ejecuta el dump con las opciones indicadas

        Args:
            options: Opciones del dump
            timeout: Segundos máximos para el proceso hijo
            cancel_event: Evento para abortar el proceso hijo

        Returns:
            ResultFile con la ruta relativa del tar.gz y los diagnósticos

        Raises:
            BinaryNotFoundError: si el binario no está en el PATH
            ConfigurationError: si las opciones no son válidas
            ExecutionError: si el proceso no inicia o termina con error
            CancelledError: si se alcanzó el timeout o se canceló
        """
        binary = shutil.which(self.binary)
        if not binary:
            raise BinaryNotFoundError(self.binary)

        # Un solo instante para el argumento -f y para la ruta del resultado
        moment = self.clock()
        args = build_dump_arguments(options, moment)

        result = ResultFile(
            path=artifact_name(options, moment),
            move_command=options.move_command
        )
        result.executed_command = " ".join([binary] + redact_arguments(args))

        self.logger.info(f"Iniciando dump de {options.connection} -> {result.path}")
        self.logger.debug(f"Comando: {result.executed_command}")

        try:
            output = run_process([binary] + args, timeout=timeout, cancel_event=cancel_event)
        except CancelledError as e:
            result.command_output = e.stderr
            e.result = result
            self.logger.error(f"Dump abortado: {e}")
            raise
        except OSError as e:
            result.command_output = ""
            self.logger.error(f"No se pudo iniciar el dump: {e}")
            raise ExecutionError(f"No se pudo iniciar {binary}: {e}", result=result) from e

        if not output.ok:
            result.command_output = output.stderr
            self.logger.error(f"Dump fallido (código {output.returncode}): {output.stderr.strip()}")
            raise ExecutionError(
                f"El dump terminó con código {output.returncode}",
                result=result,
                stderr=output.stderr,
                returncode=output.returncode
            )

        result.command_output = output.stdout
        self.logger.info(f"Dump exitoso: {result.path}")
        return result
