import io
import os
import tempfile
import unittest
from contextlib import redirect_stderr, redirect_stdout
from unittest import mock

from blockcrypt import cli
from blockcrypt.common.config import ENV_CIPHER, ENV_KEY, ENV_MODE, ENV_PADDING
from blockcrypt.common.utils import b64e

KEY_B64 = b64e(b"0123456789abcdef")


class TestCli(unittest.TestCase):
    def setUp(self):
        patcher = mock.patch.dict(os.environ)
        patcher.start()
        self.addCleanup(patcher.stop)
        for name in (ENV_CIPHER, ENV_MODE, ENV_PADDING, ENV_KEY):
            os.environ.pop(name, None)
        self.tmp = tempfile.TemporaryDirectory()
        self.addCleanup(self.tmp.cleanup)
        self.env_file = os.path.join(self.tmp.name, "none.env")

    def path(self, name):
        return os.path.join(self.tmp.name, name)

    def run_cli(self, *argv):
        out, err = io.StringIO(), io.StringIO()
        with redirect_stdout(out), redirect_stderr(err):
            code = cli.main(list(argv))
        return code, out.getvalue(), err.getvalue()

    def test_lists_ciphers_and_modes(self):
        code, out, _ = self.run_cli("ciphers")
        self.assertEqual(code, 0)
        self.assertIn("rijndael-128", out.split())
        code, out, _ = self.run_cli("modes")
        self.assertEqual(code, 0)
        self.assertIn("cbc", out.split())

    def test_file_round_trip(self):
        with open(self.path("plain.txt"), "wb") as f:
            f.write(b"attack at dawn")

        common = ["--key", KEY_B64, "--padding", "pkcs7", "--env-file", self.env_file]
        code, _, err = self.run_cli(
            "encrypt", *common, "--in", self.path("plain.txt"), "--out", self.path("blob.bin")
        )
        self.assertEqual(code, 0, err)
        code, _, err = self.run_cli(
            "decrypt", *common, "--in", self.path("blob.bin"), "--out", self.path("back.txt")
        )
        self.assertEqual(code, 0, err)

        with open(self.path("blob.bin"), "rb") as f:
            self.assertEqual(len(f.read()), 32)
        with open(self.path("back.txt"), "rb") as f:
            self.assertEqual(f.read(), b"attack at dawn")

    def test_base64_round_trip_with_env_config(self):
        os.environ[ENV_KEY] = KEY_B64
        os.environ[ENV_MODE] = "ctr"
        with open(self.path("plain.txt"), "wb") as f:
            f.write(b"stream me")

        code, _, err = self.run_cli(
            "encrypt", "--base64", "--env-file", self.env_file,
            "--in", self.path("plain.txt"), "--out", self.path("blob.b64"),
        )
        self.assertEqual(code, 0, err)
        code, _, err = self.run_cli(
            "decrypt", "--base64", "--env-file", self.env_file,
            "--in", self.path("blob.b64"), "--out", self.path("back.txt"),
        )
        self.assertEqual(code, 0, err)
        with open(self.path("back.txt"), "rb") as f:
            self.assertEqual(f.read(), b"stream me")

    def test_dotenv_in_working_directory_is_loaded(self):
        with open(self.path(".env"), "w") as f:
            f.write(f"{ENV_KEY}={KEY_B64}\n{ENV_PADDING}=pkcs7\n")
        with open(self.path("plain.txt"), "wb") as f:
            f.write(b"found via cwd")
        cwd = os.getcwd()
        os.chdir(self.tmp.name)
        self.addCleanup(os.chdir, cwd)

        code, _, err = self.run_cli("encrypt", "--base64", "--in", "plain.txt", "--out", "blob.b64")
        self.assertEqual(code, 0, err)
        self.assertEqual(os.environ.get(ENV_PADDING), "pkcs7")
        code, _, err = self.run_cli("decrypt", "--base64", "--in", "blob.b64", "--out", "back.txt")
        self.assertEqual(code, 0, err)
        with open(self.path("back.txt"), "rb") as f:
            self.assertEqual(f.read(), b"found via cwd")

    def test_crypt_error_exit_code(self):
        with open(self.path("plain.txt"), "wb") as f:
            f.write(b"data")
        code, _, err = self.run_cli(
            "encrypt", "--key", b64e(b"k" * 17), "--env-file", self.env_file,
            "--in", self.path("plain.txt"), "--out", self.path("blob.bin"),
        )
        self.assertEqual(code, 1)
        self.assertIn("[Error]", err)
        self.assertFalse(os.path.exists(self.path("blob.bin")))

    def test_bad_padding_option(self):
        code, _, err = self.run_cli(
            "encrypt", "--padding", "bogus", "--env-file", self.env_file,
            "--in", self.path("missing.txt"),
        )
        self.assertEqual(code, 1)
        self.assertIn("[Config Error]", err)

    def test_missing_input_file(self):
        code, _, err = self.run_cli(
            "encrypt", "--key", KEY_B64, "--env-file", self.env_file,
            "--in", self.path("missing.txt"),
        )
        self.assertEqual(code, 1)
        self.assertIn("[IO Error]", err)


if __name__ == "__main__":
    unittest.main()
