import json
import os
import tempfile
import unittest
from pathlib import Path
from unittest import mock

from gog.auth.keyring_backend import (
    KEYRING_BACKEND_ENV,
    BackendInfo,
    BackendSource,
    KeyringBackend,
    normalize_keyring_backend,
    parse_keyring_backend,
    resolve_keyring_backend_info,
)


class ParseKeyringBackendTest(unittest.TestCase):
    def test_legal_values(self):
        for value, expected in (
            ("auto", KeyringBackend.AUTO),
            ("keychain", KeyringBackend.KEYCHAIN),
            ("file", KeyringBackend.FILE),
        ):
            self.assertEqual(parse_keyring_backend(value), expected)

    def test_default_is_auto(self):
        self.assertEqual(parse_keyring_backend("default"), KeyringBackend.AUTO)

    def test_trims_and_lowercases(self):
        self.assertEqual(parse_keyring_backend("  FiLe \n"), KeyringBackend.FILE)
        self.assertEqual(normalize_keyring_backend(" DEFAULT "), "auto")

    def test_invalid_raises(self):
        for value in ("nope", "", "keyring", "set"):
            with self.assertRaises(ValueError):
                parse_keyring_backend(value)

    def test_str_is_value(self):
        self.assertEqual(str(KeyringBackend.KEYCHAIN), "keychain")
        self.assertEqual(json.dumps({"v": KeyringBackend.FILE}), '{"v": "file"}')


class ResolveKeyringBackendInfoTest(unittest.TestCase):
    def setUp(self):
        self._tmp = tempfile.TemporaryDirectory()
        self.path = Path(self._tmp.name) / "config.json"

    def tearDown(self):
        self._tmp.cleanup()

    def _write(self, backend):
        self.path.write_text(json.dumps({"keyring_backend": backend}))

    def _resolve(self, env_value=""):
        with mock.patch.dict(os.environ, {KEYRING_BACKEND_ENV: env_value}):
            return resolve_keyring_backend_info(self.path)

    def test_default_when_nothing_set(self):
        self.assertEqual(self._resolve(), BackendInfo(KeyringBackend.AUTO, BackendSource.DEFAULT))

    def test_config_wins_over_default(self):
        self._write("file")
        self.assertEqual(self._resolve(), BackendInfo(KeyringBackend.FILE, BackendSource.CONFIG))

    def test_env_wins_over_config(self):
        self._write("file")
        self.assertEqual(self._resolve("keychain"), BackendInfo(KeyringBackend.KEYCHAIN, BackendSource.ENV))

    def test_whitespace_env_is_unset(self):
        self._write("keychain")
        self.assertEqual(self._resolve("   ").source, BackendSource.CONFIG)

    def test_env_is_normalized(self):
        self.assertEqual(self._resolve(" Default ").value, KeyringBackend.AUTO)

    def test_invalid_env_raises(self):
        self._write("file")
        with self.assertRaises(ValueError) as ctx:
            self._resolve("bogus")
        self.assertIn(KEYRING_BACKEND_ENV, str(ctx.exception))

    def test_invalid_config_raises(self):
        self._write("bogus")
        with self.assertRaises(ValueError):
            self._resolve()

    def test_reads_default_config_path(self):
        xdg = Path(self._tmp.name) / "xdg"
        (xdg / "gogcli").mkdir(parents=True)
        (xdg / "gogcli" / "config.json").write_text(json.dumps({"keyring_backend": "keychain"}))
        with mock.patch.dict(os.environ, {"XDG_CONFIG_HOME": str(xdg), KEYRING_BACKEND_ENV: ""}):
            info = resolve_keyring_backend_info()
        self.assertEqual(info, BackendInfo(KeyringBackend.KEYCHAIN, BackendSource.CONFIG))


if __name__ == "__main__":
    unittest.main()
