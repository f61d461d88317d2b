"""
Servicio principal que orquesta los backups
"""
import time
from pathlib import Path
from typing import List, Optional
from ..config import Config
from ..exceptions import ReBackupError
from ..logger import LoggerService
from ..models import BackupJob, BackupResult
from ..repositories.config_repository import ConfigRepository
from .dump_service import DumpService
from .relocation_service import RelocationService


class BackupService:
    """Servicio principal que orquesta los backups"""

    def __init__(self, config_repo: ConfigRepository,
                 dump_service: Optional[DumpService] = None,
                 relocation_service: Optional[RelocationService] = None):
        """
        Inicializa el servicio de backup

        Args:
            config_repo: Repositorio de configuración
            dump_service: Ejecutor del dump (opcional)
            relocation_service: Servicio de movimiento (opcional)
        """
        self.config_repo = config_repo
        self.logger = LoggerService.get_logger("BackupService")
        self.dump_service = dump_service or DumpService()
        self.relocation_service = relocation_service or RelocationService()
        self._jobs = None

    @property
    def jobs(self) -> List[BackupJob]:
        """Trabajos de config.json (se cargan la primera vez que se piden)"""
        if self._jobs is None:
            self._jobs = self.config_repo.get_jobs()
        return self._jobs

    def backup_all(self) -> List[BackupResult]:
        """
        Realiza backup de todos los trabajos habilitados

        Returns:
            Lista de resultados de backup
        """
        self.logger.info("=" * 70)
        self.logger.info("INICIANDO PROCESO DE BACKUP")
        self.logger.info("=" * 70)

        results = []
        for job in self.jobs:
            if not job.enabled:
                self.logger.info(f"Trabajo deshabilitado: {job.name}")
                continue
            results.append(self.run_job(job))

        self._print_summary(results)
        return results

    def backup_job(self, job_name: str) -> BackupResult:
        """
        Realiza backup de un trabajo específico

        Args:
            job_name: Nombre del trabajo en config.json

        Returns:
            Resultado del backup
        """
        for job in self.jobs:
            if job.name == job_name:
                if not job.enabled:
                    self.logger.warning(f"Trabajo deshabilitado: {job_name}")
                    return BackupResult(
                        job_name=job_name,
                        success=False,
                        error="Trabajo deshabilitado en configuración"
                    )
                return self.run_job(job)

        error_msg = f"Trabajo no encontrado en configuración: {job_name}"
        self.logger.error(error_msg)
        return BackupResult(job_name=job_name, success=False, error=error_msg)

    def run_job(self, job: BackupJob) -> BackupResult:
        """
        Ejecuta dump y, si hay destino, mueve el archivo

        Args:
            job: Trabajo de backup

        Returns:
            Resultado del backup (nunca lanza errores del dominio)
        """
        self.logger.info("-" * 70)
        self.logger.info(f"Iniciando backup de {job.name}...")
        start_time = time.time()
        result_file = None

        try:
            result_file = self.dump_service.execute(job.options, timeout=Config.DUMP_TIMEOUT)
            if job.destination:
                Path(job.destination).mkdir(parents=True, exist_ok=True)
                result_file = self.relocation_service.relocate(result_file, job.destination)
        except ReBackupError as e:
            duration = time.time() - start_time
            detail = e.stderr.strip() if e.stderr else ""
            error = f"{e}: {detail}" if detail else str(e)
            self.logger.error(f"Backup fallido: {error}")
            return BackupResult(
                job_name=job.name,
                success=False,
                result_file=e.result,
                error=error,
                duration_seconds=duration
            )
        except OSError as e:
            # Carpeta de destino que no se pudo crear
            duration = time.time() - start_time
            error = f"No se pudo preparar el destino {job.destination}: {e}"
            self.logger.error(f"Backup fallido: {error}")
            return BackupResult(
                job_name=job.name,
                success=False,
                result_file=result_file,
                error=error,
                duration_seconds=duration
            )

        result = BackupResult(
            job_name=job.name,
            success=True,
            result_file=result_file,
            duration_seconds=time.time() - start_time
        )
        self.logger.info(f"Backup exitoso: {result.output_file} ({result.duration_seconds:.2f}s)")
        return result

    def _print_summary(self, results: List[BackupResult]):
        """
        Imprime resumen de la operación de backup

        Args:
            results: Lista de resultados
        """
        success_count = sum(1 for r in results if r.success)
        failed_count = len(results) - success_count
        total_time = sum(r.duration_seconds for r in results)

        self.logger.info("=" * 70)
        self.logger.info("RESUMEN DEL PROCESO DE BACKUP")
        self.logger.info("=" * 70)

        for result in results:
            status = "✓ EXITOSO" if result.success else "✗ FALLIDO"
            self.logger.info(f"{status}: {result.job_name} ({result.duration_seconds:.2f}s)")
            if result.success and result.output_file:
                file_path = Path(result.output_file)
                if file_path.exists():
                    size_mb = file_path.stat().st_size / (1024 * 1024)
                    self.logger.info(f"  Archivo: {file_path.name} ({size_mb:.2f} MB)")
            if not result.success:
                self.logger.error(f"  Error: {result.error}")

        self.logger.info("-" * 70)
        self.logger.info(f"Total de trabajos procesados: {len(results)}")
        self.logger.info(f"Backups exitosos: {success_count}")
        self.logger.info(f"Backups fallidos: {failed_count}")
        self.logger.info(f"Tiempo total: {total_time:.2f}s")
        self.logger.info("=" * 70)

        if failed_count > 0:
            self.logger.warning(
                f"ATENCIÓN: {failed_count} backup(s) fallaron. "
                "Revisa los errores arriba."
            )
