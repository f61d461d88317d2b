#!/usr/bin/env python3
"""
Sistema de Backup Automático de clusters RethinkDB
Punto de entrada principal

Uso:
    python main.py                          # Ejecutar todos los backups de config.json
    python main.py --job nombre             # Backup de un trabajo específico
    python main.py -c host:28015 -o app     # Backup ad-hoc sin config.json
    python main.py --init                   # Crear archivos de configuración
    python main.py --help                   # Ayuda
"""
import sys
import argparse
from pathlib import Path

# Agregar la raíz del proyecto al path
sys.path.insert(0, str(Path(__file__).parent))

from rethinkbackup.builders.dump_command_builder import validate_options
from rethinkbackup.config import Config
from rethinkbackup.exceptions import ConfigurationError
from rethinkbackup.logger import LoggerService
from rethinkbackup.models import BackupJob, DateFormat, DumpOptions, MoveCommand
from rethinkbackup.repositories.config_repository import ConfigRepository
from rethinkbackup.services.backup_service import BackupService


def parse_arguments(argv=None):
    """
    Parsea argumentos de línea de comandos

    Returns:
        Namespace con los argumentos parseados
    """
    parser = argparse.ArgumentParser(
        description='Sistema de Backup Automático de clusters RethinkDB',
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Ejemplos:
  python main.py                                  # Todos los trabajos de config.json
  python main.py --job principal                  # Un trabajo específico
  python main.py -c localhost:28015 -o app \\
      --database ventas --move-to /backups/       # Backup ad-hoc
  python main.py --init                           # Crear archivos de configuración
        """
    )

    parser.add_argument('--config', type=Path, metavar='ARCHIVO',
                        help=f'Archivo de configuración (default: {Config.CONFIG_FILE})')
    parser.add_argument('--job', type=str, metavar='NOMBRE',
                        help='Ejecutar solo el trabajo indicado')
    parser.add_argument('--init', action='store_true',
                        help='Crear archivos de configuración de ejemplo')

    adhoc = parser.add_argument_group('backup ad-hoc')
    adhoc.add_argument('-c', '--connection', help='host:puerto del cluster')
    adhoc.add_argument('-o', '--output-name', help='Nombre base del archivo')
    adhoc.add_argument('--database', action='append', default=[], metavar='DB',
                       help='Base de datos a exportar (repetible)')
    adhoc.add_argument('--table', action='append', default=[], metavar='TABLA',
                       help='Tabla a exportar (repetible)')
    adhoc.add_argument('--password-file', default='', metavar='ARCHIVO')
    adhoc.add_argument('--tls-cert', default='', metavar='ARCHIVO')
    adhoc.add_argument('--clients', type=int, default=0, metavar='N')
    adhoc.add_argument('--temp-dir', default='', metavar='DIR')
    adhoc.add_argument('--date-format', default='iso', choices=['iso', 'short'])
    adhoc.add_argument('--move-command', default=None, choices=['unix', 'windows'])
    adhoc.add_argument('--move-to', default='', metavar='DIR',
                       help='Carpeta destino del archivo (opcional)')

    return parser.parse_args(argv)


def initialize_config(config_repo: ConfigRepository) -> bool:
    """
    Inicializa archivos de configuración si no existen

    Returns:
        True si se creó algún archivo
    """
    logger = LoggerService.get_logger("Init")
    created_files = []

    if not config_repo.config_file.exists():
        if config_repo.create_example_config():
            created_files.append(str(config_repo.config_file))

    env_example = Config.BASE_DIR / ".env.example"
    if not env_example.exists():
        env_content = """# Variables de entorno para el backup de RethinkDB
# Copia este archivo como .env y completa los valores

RETHINKDB_PASSWORD=tu_password_seguro
RETHINKDB_BINARY=rethinkdb
BACKUP_DIR=/var/backups/rethinkdb
DUMP_TIMEOUT=3600
LOG_TO_FILE=true
"""
        try:
            with open(env_example, 'w', encoding='utf-8') as f:
                f.write(env_content)
            created_files.append(str(env_example))
        except OSError as e:
            logger.error(f"Error creando .env.example: {e}")

    if created_files:
        logger.info("=" * 70)
        logger.info("ARCHIVOS DE CONFIGURACIÓN CREADOS")
        logger.info("=" * 70)
        for file in created_files:
            logger.info(f"  - {file}")
        logger.info("")
        logger.info("IMPORTANTE:")
        logger.info("1. Copia .env.example como .env y completa las credenciales")
        logger.info("2. Edita config.json con tus clusters")
        logger.info("3. Ejecuta nuevamente este script")
        logger.info("=" * 70)
        return True

    return False


def adhoc_job(args) -> BackupJob:
    """
    Construye un trabajo a partir de los argumentos de línea de comandos

    Raises:
        ConfigurationError: si el formato o el comando de movimiento no son válidos
    """
    move_command = (MoveCommand.from_name(args.move_command)
                    if args.move_command else MoveCommand.for_platform())
    options = DumpOptions(
        connection=args.connection or '',
        output_name=args.output_name or '',
        date_format=DateFormat.from_name(args.date_format),
        databases=args.database,
        tables=args.table,
        password_file=args.password_file,
        tls_cert=args.tls_cert,
        clients=args.clients,
        temp_dir=args.temp_dir,
        move_command=move_command
    )
    return BackupJob(name=args.output_name or 'adhoc', options=options,
                     destination=args.move_to)


def main(argv=None) -> int:
    """Función principal"""
    args = parse_arguments(argv)
    config_repo = ConfigRepository(args.config)

    if args.init:
        initialize_config(config_repo)
        return 0

    Config.ensure_directories()
    logger = LoggerService.get_logger("Main")

    # Modo ad-hoc (no usa los trabajos de config.json)
    if args.connection:
        try:
            job = adhoc_job(args)
            validate_options(job.options)
        except ConfigurationError as e:
            logger.error(f"Configuración inválida: {e}")
            return 2
        backup_service = BackupService(config_repo)
        result = backup_service.run_job(job)
        return 0 if result.success else 1

    if not config_repo.config_file.exists():
        print(f"Error: No se encontró {config_repo.config_file}")
        print("Ejecuta: python main.py --init")
        return 1

    backup_service = BackupService(config_repo)

    # Modo trabajo específico
    if args.job:
        logger.info(f"Realizando backup de: {args.job}")
        result = backup_service.backup_job(args.job)
        if result.success:
            logger.info(f"✓ Backup exitoso: {result.output_file}")
            return 0
        logger.error(f"✗ Backup fallido: {result.error}")
        return 1

    results = backup_service.backup_all()
    failed = sum(1 for r in results if not r.success)
    return 1 if failed > 0 else 0


if __name__ == "__main__":
    try:
        sys.exit(main())
    except KeyboardInterrupt:
        print("\nPrograma interrumpido por el usuario")
        sys.exit(0)
