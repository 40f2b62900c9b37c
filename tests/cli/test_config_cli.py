import stat
import tempfile
import unittest
from pathlib import Path

import structlog
from click.testing import CliRunner
from tomlkit import dumps

import buildconfig.cli._configuration as config_module
from buildconfig.cli import cli
from buildconfig.cli._common import Context


class TestConfigCommands(unittest.TestCase):
    """Test storing cluster settings in the configuration file"""

    def setUp(self):
        self.tmpdir = tempfile.TemporaryDirectory()
        config_dir = Path(self.tmpdir.name) / ".config" / "buildconfig"
        self.original_config_dir = config_module.CONFIG_DIR
        self.original_config_file = config_module.CONFIG_FILE
        config_module.CONFIG_DIR = config_dir
        config_module.CONFIG_FILE = config_dir / "config.toml"
        self.runner = CliRunner()

    def tearDown(self):
        config_module.CONFIG_DIR = self.original_config_dir
        config_module.CONFIG_FILE = self.original_config_file
        self.tmpdir.cleanup()
        structlog.reset_defaults()

    def test_set_and_get(self):
        result = self.runner.invoke(
            cli, ["config", "set", "cluster.namespace", "payments"], prog_name="buildconfig"
        )
        self.assertEqual(result.exit_code, 0, result.output)
        self.assertIn("Set cluster.namespace = payments", result.output)

        result = self.runner.invoke(
            cli, ["config", "get", "cluster.namespace"], prog_name="buildconfig"
        )
        self.assertEqual(result.exit_code, 0, result.output)
        self.assertEqual(result.output.strip(), "payments")

    def test_token_is_not_echoed(self):
        result = self.runner.invoke(
            cli, ["config", "set", "cluster.token", "sha256~secret"], prog_name="buildconfig"
        )
        self.assertEqual(result.exit_code, 0, result.output)
        self.assertNotIn("sha256~secret", result.output)

        mode = stat.S_IMODE(config_module.CONFIG_FILE.stat().st_mode)
        self.assertEqual(mode, 0o600)

    def test_unknown_key(self):
        result = self.runner.invoke(
            cli, ["config", "set", "cluster.color", "blue"], prog_name="buildconfig"
        )
        self.assertEqual(result.exit_code, 2)
        self.assertIn("unknown key", result.output)
        self.assertFalse(config_module.CONFIG_FILE.exists())

    def test_get_missing_key(self):
        result = self.runner.invoke(
            cli, ["config", "get", "cluster.api_url"], prog_name="buildconfig"
        )
        self.assertEqual(result.exit_code, 1)
        self.assertIn("cluster.api_url is not set", result.output)

    def test_context_reads_saved_config(self):
        config_module.CONFIG_DIR.mkdir(parents=True)
        with open(config_module.CONFIG_FILE, "w") as f:
            f.write(
                dumps(
                    {
                        "cluster": {
                            "api_url": "https://api.example.com:6443",
                            "namespace": "payments",
                            "api_version": "v1",
                            "insecure": "true",
                        }
                    }
                )
            )

        ctx = Context.default()
        self.assertEqual(ctx.api_url, "https://api.example.com:6443")
        self.assertEqual(ctx.namespace, "payments")
        self.assertEqual(ctx.api_version, "v1")
        self.assertFalse(ctx.verify_tls)

    def test_cli_arguments_win_over_saved_config(self):
        config_module.CONFIG_DIR.mkdir(parents=True)
        with open(config_module.CONFIG_FILE, "w") as f:
            f.write(dumps({"cluster": {"namespace": "payments", "insecure": "false"}}))

        ctx = Context.default(namespace="web", debug=True)
        self.assertEqual(ctx.namespace, "web")
        self.assertTrue(ctx.verify_tls)
        self.assertTrue(ctx.debug)

    def test_defaults(self):
        ctx = Context.default()
        self.assertFalse(ctx.debug)
        self.assertTrue(ctx.verify_tls)
        self.assertTrue(ctx.api_url)


if __name__ == "__main__":
    unittest.main()
