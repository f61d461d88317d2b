"""
Ejecución de procesos externos con captura de salida
"""
import os
import subprocess
import threading
import time
from typing import List, Optional
from ..exceptions import CancelledError
from ..models import ProcessOutput


def run_process(argv: List[str],
                timeout: Optional[float] = None,
                cancel_event: Optional[threading.Event] = None,
                poll_interval: float = 0.2) -> ProcessOutput:
    """
    Lanza un proceso hijo y espera a que termine

    El hijo hereda el entorno completo; stdout y stderr se capturan por
    separado. Un código de salida distinto de cero no es una excepción aquí.

    Args:
        argv: Binario y argumentos
        timeout: Segundos máximos de ejecución (None = sin límite)
        cancel_event: Evento que, al activarse, aborta el proceso
        poll_interval: Cada cuánto se revisan timeout y cancelación

    Returns:
        ProcessOutput con código de salida y salidas capturadas

    Raises:
        OSError: si el proceso no pudo iniciarse
        CancelledError: si se alcanzó el timeout o se canceló
    """
    process = subprocess.Popen(
        argv,
        stdout=subprocess.PIPE,
        stderr=subprocess.PIPE,
        text=True,
        env=os.environ.copy()
    )

    if timeout is None and cancel_event is None:
        stdout, stderr = process.communicate()
        return ProcessOutput(process.returncode, stdout or "", stderr or "")

    deadline = time.monotonic() + timeout if timeout is not None else None

    while True:
        wait = poll_interval
        if deadline is not None:
            wait = max(0.0, min(wait, deadline - time.monotonic()))
        try:
            stdout, stderr = process.communicate(timeout=wait)
            return ProcessOutput(process.returncode, stdout or "", stderr or "")
        except subprocess.TimeoutExpired:
            pass

        if cancel_event is not None and cancel_event.is_set():
            reason = "Proceso cancelado"
        elif deadline is not None and time.monotonic() >= deadline:
            reason = f"Timeout: el proceso superó {timeout:g}s"
        else:
            continue

        process.kill()
        stdout, stderr = process.communicate()
        raise CancelledError(reason, stderr=stderr or "")
