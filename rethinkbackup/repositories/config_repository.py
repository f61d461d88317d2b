"""
Repositorio para manejar configuración (Dependency Inversion)
"""
import json
import os
from pathlib import Path
from typing import Dict, List, Optional
from ..config import Config
from ..exceptions import ConfigurationError
from ..logger import LoggerService
from ..models import BackupJob, DateFormat, DumpOptions, MoveCommand


class ConfigRepository:
    """Repositorio para manejar configuración"""

    def __init__(self, config_file: Optional[Path] = None):
        """
        Inicializa el repositorio de configuración

        Args:
            config_file: Ruta al archivo de configuración (opcional)
        """
        self.config_file = config_file or Config.CONFIG_FILE
        self.logger = LoggerService.get_logger("ConfigRepository")
        self._raw_config = None

    def load(self) -> Dict:
        """
        Carga configuración desde archivo JSON

        Returns:
            Diccionario con la configuración
        """
        if not self.config_file.exists():
            self.logger.warning(f"El archivo de configuración no existe: {self.config_file}")
            self._raw_config = Config.DEFAULT_CONFIG
            return self._raw_config

        try:
            with open(self.config_file, "r", encoding='utf-8') as f:
                self._raw_config = json.load(f)
            self.logger.info(f"Configuración cargada exitosamente: {self.config_file}")
            return self._raw_config
        except json.JSONDecodeError as e:
            self.logger.error(f"Error al parsear JSON: {e}")
            self._raw_config = Config.DEFAULT_CONFIG
            return self._raw_config
        except OSError as e:
            self.logger.error(f"Error al cargar la configuración: {str(e)}")
            self._raw_config = Config.DEFAULT_CONFIG
            return self._raw_config

    def save(self, config: Dict) -> bool:
        """
        Guarda configuración en archivo JSON

        Args:
            config: Diccionario con la configuración

        Returns:
            True si se guardó exitosamente
        """
        try:
            self.config_file.parent.mkdir(parents=True, exist_ok=True)
            with open(self.config_file, "w", encoding='utf-8') as f:
                json.dump(config, f, indent=4, ensure_ascii=False)
            self.logger.info(f"Configuración guardada exitosamente: {self.config_file}")
            return True
        except OSError as e:
            self.logger.error(f"Error al guardar la configuración: {str(e)}")
            return False

    def get_jobs(self) -> List[BackupJob]:
        """
        Obtiene la lista de trabajos de backup

        Las entradas inválidas se registran en el log y se omiten.

        Returns:
            Lista de objetos BackupJob
        """
        if self._raw_config is None:
            self.load()

        jobs = []
        for job_dict in self._raw_config.get('backups', []):
            try:
                jobs.append(self.job_from_dict(job_dict))
            except (ConfigurationError, ValueError, TypeError, AttributeError) as e:
                self.logger.error(
                    f"Error al cargar el trabajo {job_dict.get('name', '?')}: {str(e)}"
                )
        return jobs

    def job_from_dict(self, job_dict: Dict) -> BackupJob:
        """
        Convierte una entrada de config.json en un BackupJob

        Raises:
            ConfigurationError: si el formato de fecha o el comando de movimiento no existen
        """
        move_name = job_dict.get('move_command')
        options = DumpOptions(
            connection=job_dict.get('connection') or '',
            output_name=job_dict.get('output_name') or '',
            date_format=DateFormat.from_name(job_dict.get('date_format') or ''),
            databases=job_dict.get('databases') or (),
            tables=job_dict.get('tables') or (),
            password=self._resolve_credential(job_dict.get('password') or ''),
            password_file=self._resolve_credential(job_dict.get('password_file') or ''),
            tls_cert=job_dict.get('tls_cert') or '',
            clients=int(job_dict.get('clients') or 0),
            temp_dir=job_dict.get('temp_dir') or '',
            move_command=MoveCommand.from_name(move_name) if move_name else MoveCommand.for_platform()
        )
        return BackupJob(
            name=job_dict.get('name') or '',
            options=options,
            destination=job_dict.get('destination') or str(Config.BACKUP_DIR),
            enabled=job_dict.get('enabled', True)
        )

    def _resolve_credential(self, value: str) -> str:
        """
        Resuelve credencial desde variable de entorno si es necesario

        Args:
            value: Valor que puede contener referencia a variable de entorno

        Returns:
            Valor resuelto
        """
        if value.startswith("${") and value.endswith("}"):
            env_var = value[2:-1]
            resolved = os.getenv(env_var, "")
            if not resolved:
                self.logger.warning(f"Variable de entorno no encontrada: {env_var}")
            return resolved
        return value

    def create_example_config(self) -> bool:
        """
        Crea un archivo de configuración de ejemplo

        Returns:
            True si se creó exitosamente
        """
        return self.save(Config.DEFAULT_CONFIG)
