"""
Tests unitarios para modelos, construcción de argumentos y configuración
"""
import json
import os
import unittest
from datetime import datetime
from pathlib import Path
import tempfile
import shutil
import sys
from unittest import mock

# Agregar la raíz del proyecto al path
sys.path.insert(0, str(Path(__file__).parent.parent))
os.environ.setdefault("LOG_TO_FILE", "false")

from rethinkbackup.config import Config
from rethinkbackup.builders.dump_command_builder import (
    artifact_name,
    build_dump_arguments,
    redact_arguments,
)
from rethinkbackup.exceptions import ConfigurationError
from rethinkbackup.models import (
    BackupJob,
    BackupResult,
    DateFormat,
    DumpOptions,
    MoveCommand,
    ResultFile,
)
from rethinkbackup.repositories.config_repository import ConfigRepository

MOMENT = datetime(2023, 1, 1, 0, 0)


def make_options(**overrides):
    values = dict(
        connection="localhost:28015",
        output_name="mydb",
        date_format=DateFormat.ISO,
        move_command=MoveCommand.UNIX,
    )
    values.update(overrides)
    return DumpOptions(**values)


def export_tokens(args):
    """Pares (-e, valor) en orden"""
    return [args[i + 1] for i, token in enumerate(args) if token == '-e']


class TestModels(unittest.TestCase):
    """Tests para modelos de datos"""

    def test_date_format_render(self):
        """Test los dos layouts de fecha"""
        self.assertEqual(DateFormat.SHORT.render(MOMENT), "202301010000")
        self.assertEqual(DateFormat.ISO.render(datetime(2024, 5, 6, 7, 8)), "2024-05-06-07-08")

    def test_date_format_from_name(self):
        """Test obtener formato por nombre o layout"""
        self.assertIs(DateFormat.from_name("iso"), DateFormat.ISO)
        self.assertIs(DateFormat.from_name("SHORT"), DateFormat.SHORT)
        self.assertIs(DateFormat.from_name("%Y%m%d%H%M"), DateFormat.SHORT)
        with self.assertRaises(ConfigurationError):
            DateFormat.from_name("rfc3339")

    def test_move_command_aliases(self):
        """Test alias del comando de movimiento"""
        self.assertIs(MoveCommand.from_name("posix"), MoveCommand.UNIX)
        self.assertIs(MoveCommand.from_name("Windows"), MoveCommand.WINDOWS)
        self.assertEqual(MoveCommand.UNIX.binary, "mv")
        self.assertEqual(MoveCommand.WINDOWS.argv_prefix, ("cmd", "/c", "move"))
        with self.assertRaises(ConfigurationError):
            MoveCommand.from_name("cp")

    def test_dump_options_are_immutable(self):
        """Test que las opciones no se pueden modificar"""
        options = make_options(databases=["d1"])
        self.assertEqual(options.databases, ("d1",))
        with self.assertRaises(Exception):
            options.connection = "otro:28015"

    def test_single_table_string_is_not_split(self):
        """Test una tabla suelta no se parte en caracteres"""
        options = make_options(tables="users")
        self.assertEqual(options.tables, ("users",))
        args = build_dump_arguments(options, MOMENT)
        self.assertEqual(export_tokens(args), ["users"])

    def test_single_database_string_is_not_split(self):
        """Test una base de datos suelta no se parte en caracteres"""
        options = make_options(databases="ventas")
        self.assertEqual(options.databases, ("ventas",))
        args = build_dump_arguments(options, MOMENT)
        self.assertEqual(export_tokens(args), ["ventas"])

    def test_result_file_name(self):
        """Test nombre de archivo sin directorio"""
        result = ResultFile(path="2023-01-01-00-00_backup_mydb.tar.gz")
        self.assertEqual(result.file_name(), "2023-01-01-00-00_backup_mydb.tar.gz")
        self.assertEqual(result.mime, "application/x-tar")
        self.assertEqual(result.executed_command, "")
        self.assertEqual(result.command_output, "")

        nested = ResultFile(path="work/2023-01-01-00-00_backup_mydb.tar.gz")
        self.assertEqual(nested.file_name(), "2023-01-01-00-00_backup_mydb.tar.gz")

    def test_backup_job_validation(self):
        """Test validación de BackupJob"""
        with self.assertRaises(ValueError):
            BackupJob(name="", options=make_options())

    def test_backup_result_creation(self):
        """Test creación de BackupResult"""
        result = BackupResult(
            job_name="principal",
            success=True,
            result_file=ResultFile(path="/backups/x.tar.gz"),
            duration_seconds=5.5
        )
        self.assertEqual(result.output_file, "/backups/x.tar.gz")
        self.assertIn("principal", str(result))


class TestDumpCommandBuilder(unittest.TestCase):
    """Tests para la validación y construcción de argumentos"""

    def test_minimal_arguments(self):
        """Test argumentos mínimos en orden"""
        args = build_dump_arguments(make_options(), MOMENT)
        self.assertEqual(args, [
            'dump',
            '-c', 'localhost:28015',
            '-f', '2023-01-01-00-00_backup_mydb.tar.gz',
        ])

    def test_single_connection_and_file_tokens(self):
        """Test exactamente un -c y un -f"""
        args = build_dump_arguments(
            make_options(date_format=DateFormat.SHORT, tables=["t1"]), MOMENT
        )
        self.assertEqual(args.count('-c'), 1)
        self.assertEqual(args.count('-f'), 1)
        self.assertEqual(args[args.index('-c') + 1], 'localhost:28015')
        self.assertEqual(args[args.index('-f') + 1], '202301010000_backup_mydb.tar.gz')

    def test_tables_and_databases_cross_product(self):
        """Test tabla afuera, base de datos adentro"""
        args = build_dump_arguments(
            make_options(tables=["t1", "t2"], databases=["d1", "d2"]), MOMENT
        )
        self.assertEqual(export_tokens(args), ["d1.t1", "d2.t1", "d1.t2", "d2.t2"])

    def test_only_tables(self):
        """Test solo tablas en orden de entrada"""
        args = build_dump_arguments(make_options(tables=["t1", "t2"]), MOMENT)
        self.assertEqual(export_tokens(args), ["t1", "t2"])

    def test_only_databases(self):
        """Test solo bases de datos en orden de entrada"""
        args = build_dump_arguments(make_options(databases=["d2", "d1"]), MOMENT)
        self.assertEqual(export_tokens(args), ["d2", "d1"])

    def test_no_exports(self):
        """Test sin -e exporta todo"""
        args = build_dump_arguments(make_options(), MOMENT)
        self.assertNotIn('-e', args)

    def test_optional_flags_order(self):
        """Test flags opcionales en orden fijo"""
        args = build_dump_arguments(make_options(
            password_file="/etc/rethink/pass",
            tls_cert="/etc/rethink/cert.pem",
            clients=4,
            temp_dir="/tmp/rethink",
        ), MOMENT)
        self.assertEqual(args[5:], [
            '--password-file', '/etc/rethink/pass',
            '--tls-cert', '/etc/rethink/cert.pem',
            '--clients', '4',
            '--temp-dir', '/tmp/rethink',
        ])

    def test_password_is_separate_token(self):
        """Test valores con espacios no se parten"""
        args = build_dump_arguments(make_options(password="a b;c"), MOMENT)
        self.assertEqual(args[-2:], ['-p', 'a b;c'])

    def test_zero_clients_is_omitted(self):
        """Test clients=0 significa valor por defecto"""
        args = build_dump_arguments(make_options(clients=0), MOMENT)
        self.assertNotIn('--clients', args)

    def test_validation_order(self):
        """Test cada regla con su mensaje, en orden"""
        cases = [
            (make_options(connection="", output_name=""), "connection required"),
            (make_options(output_name="", date_format=None), "output name required"),
            (make_options(date_format=None, password="x", password_file="y"), "date format required"),
            (make_options(date_format="iso"), "date format required"),
            (make_options(password="x", password_file="y", move_command=None),
             "mutually exclusive credentials"),
            (make_options(move_command=None), "move command required"),
        ]
        for options, message in cases:
            with self.subTest(message=message):
                with self.assertRaises(ConfigurationError) as ctx:
                    build_dump_arguments(options, MOMENT)
                self.assertEqual(str(ctx.exception), message)

    def test_artifact_name(self):
        """Test formato del nombre del archivo"""
        self.assertEqual(
            artifact_name(make_options(output_name="ventas"), datetime(2024, 12, 31, 23, 59)),
            "2024-12-31-23-59_backup_ventas.tar.gz"
        )

    def test_redact_arguments(self):
        """Test que la contraseña no aparece en diagnósticos"""
        args = build_dump_arguments(make_options(password="s3cret"), MOMENT)
        redacted = redact_arguments(args)
        self.assertNotIn("s3cret", redacted)
        self.assertEqual(redacted[-2:], ['-p', '******'])
        self.assertIn("s3cret", args)


class TestConfigRepository(unittest.TestCase):
    """Tests para ConfigRepository"""

    def setUp(self):
        """Setup para tests"""
        self.temp_dir = tempfile.mkdtemp()
        self.config_file = Path(self.temp_dir) / "test_config.json"
        self.repo = ConfigRepository(self.config_file)

    def tearDown(self):
        """Cleanup después de tests"""
        if Path(self.temp_dir).exists():
            shutil.rmtree(self.temp_dir)
        os.environ.pop("TEST_RETHINK_PASSWORD", None)

    def test_load_nonexistent_config(self):
        """Test cargar configuración inexistente"""
        config = self.repo.load()
        self.assertIn('backups', config)

    def test_load_invalid_json(self):
        """Test JSON inválido usa la configuración por defecto"""
        self.config_file.write_text("{no es json", encoding='utf-8')
        config = self.repo.load()
        self.assertIn('backups', config)

    def test_save_and_get_jobs(self):
        """Test guardar y obtener trabajos"""
        os.environ["TEST_RETHINK_PASSWORD"] = "desde-env"
        self.assertTrue(self.repo.save({
            "backups": [{
                "name": "principal",
                "connection": "db1:28015",
                "output_name": "principal",
                "databases": ["d1"],
                "tables": ["t1", "t2"],
                "password": "${TEST_RETHINK_PASSWORD}",
                "clients": 3,
                "date_format": "short",
                "move_command": "windows",
                "destination": "/backups/",
                "enabled": False
            }]
        }))

        jobs = ConfigRepository(self.config_file).get_jobs()
        self.assertEqual(len(jobs), 1)
        job = jobs[0]
        self.assertEqual(job.name, "principal")
        self.assertFalse(job.enabled)
        self.assertEqual(job.destination, "/backups/")
        self.assertEqual(job.options.password, "desde-env")
        self.assertEqual(job.options.tables, ("t1", "t2"))
        self.assertEqual(job.options.clients, 3)
        self.assertIs(job.options.date_format, DateFormat.SHORT)
        self.assertIs(job.options.move_command, MoveCommand.WINDOWS)

    def test_invalid_entries_are_skipped(self):
        """Test entradas con formato desconocido se omiten"""
        self.config_file.write_text(json.dumps({
            "backups": [
                {"name": "malo", "connection": "x", "output_name": "x", "date_format": "nope"},
                {"name": "bueno", "connection": "x", "output_name": "x", "date_format": "iso"},
            ]
        }), encoding='utf-8')
        jobs = self.repo.get_jobs()
        self.assertEqual([job.name for job in jobs], ["bueno"])

    def test_null_values_are_treated_as_empty(self):
        """Test valores null en el JSON no rompen la carga"""
        self.config_file.write_text(json.dumps({
            "backups": [
                {"name": "a", "connection": "x", "output_name": "a", "date_format": "iso",
                 "password": None, "password_file": None, "tls_cert": None,
                 "temp_dir": None, "tables": "users"},
                {"name": "b", "connection": "x", "output_name": "b", "date_format": "iso"},
            ]
        }), encoding='utf-8')
        jobs = self.repo.get_jobs()

        self.assertEqual([job.name for job in jobs], ["a", "b"])
        options = jobs[0].options
        self.assertEqual(options.password, "")
        self.assertEqual(options.password_file, "")
        self.assertEqual(options.tls_cert, "")
        self.assertEqual(options.temp_dir, "")
        self.assertEqual(options.tables, ("users",))

    def test_non_string_credential_is_skipped(self):
        """Test credencial que no es texto se omite"""
        self.config_file.write_text(json.dumps({
            "backups": [
                {"name": "a", "connection": "x", "output_name": "a", "date_format": "iso",
                 "password": 1234},
                {"name": "b", "connection": "x", "output_name": "b", "date_format": "iso"},
            ]
        }), encoding='utf-8')
        self.assertEqual([job.name for job in self.repo.get_jobs()], ["b"])

    def test_create_example_config(self):
        """Test crear configuración de ejemplo"""
        self.assertTrue(self.repo.create_example_config())
        self.assertTrue(self.config_file.exists())


class TestConfig(unittest.TestCase):
    """Tests para Config"""

    def setUp(self):
        self.temp_dir = Path(tempfile.mkdtemp())

    def tearDown(self):
        shutil.rmtree(self.temp_dir)

    def test_ensure_directories(self):
        """Test crea las carpetas de backups y logs"""
        backup_dir = self.temp_dir / "Backups"
        log_dir = self.temp_dir / "Logs"
        with mock.patch.object(Config, "BACKUP_DIR", backup_dir), \
                mock.patch.object(Config, "LOG_DIR", log_dir), \
                mock.patch.object(Config, "LOG_TO_FILE", True):
            Config.ensure_directories()
        self.assertTrue(backup_dir.is_dir())
        self.assertTrue(log_dir.is_dir())

    def test_ensure_directories_without_file_logging(self):
        """Test sin log a archivo no se crea la carpeta de logs"""
        backup_dir = self.temp_dir / "Backups"
        log_dir = self.temp_dir / "Logs"
        with mock.patch.object(Config, "BACKUP_DIR", backup_dir), \
                mock.patch.object(Config, "LOG_DIR", log_dir), \
                mock.patch.object(Config, "LOG_TO_FILE", False):
            Config.ensure_directories()
        self.assertTrue(backup_dir.is_dir())
        self.assertFalse(log_dir.exists())


def run_tests():
    """Ejecuta todos los tests"""
    loader = unittest.TestLoader()
    suite = loader.loadTestsFromModule(sys.modules[__name__])
    runner = unittest.TextTestRunner(verbosity=2)
    result = runner.run(suite)
    return result.wasSuccessful()


if __name__ == '__main__':
    success = run_tests()
    sys.exit(0 if success else 1)
