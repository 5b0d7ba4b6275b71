import os
import tempfile
import unittest
from unittest import mock

from pydantic import ValidationError

from blockcrypt.common.config import (
    ENV_CIPHER,
    ENV_KEY,
    ENV_MODE,
    ENV_PADDING,
    CipherConfig,
    PaddingType,
)
from blockcrypt.common.errors import InvalidEncoding

ENV_VARS = (ENV_CIPHER, ENV_MODE, ENV_PADDING, ENV_KEY)


class TestPaddingType(unittest.TestCase):
    def test_numbering(self):
        self.assertEqual(
            [int(p) for p in PaddingType],
            [0, 1, 2, 3, 4, 5, 6],
        )

    def test_parse_names_and_numbers(self):
        self.assertIs(PaddingType.parse("pkcs7"), PaddingType.PKCS7)
        self.assertIs(PaddingType.parse("ANSI-X923"), PaddingType.ANSI_X923)
        self.assertIs(PaddingType.parse("iso/iec 7816-4"), PaddingType.ISO_IEC_7816_4)
        self.assertIs(PaddingType.parse("3"), PaddingType.ISO10126)
        self.assertIs(PaddingType.parse(6), PaddingType.SPACE)
        self.assertIs(PaddingType.parse(PaddingType.ZERO), PaddingType.ZERO)

    def test_parse_rejects_unknown(self):
        with self.assertRaises(ValueError):
            PaddingType.parse("pkcs5")
        with self.assertRaises(ValueError):
            PaddingType.parse(7)


class TestCipherConfig(unittest.TestCase):
    def test_frozen(self):
        config = CipherConfig()
        with self.assertRaises(ValidationError):
            config.mode = "ecb"

    def test_names_normalised(self):
        config = CipherConfig(cipher=" Rijndael-128 ", mode="CBC", padding="zero")
        self.assertEqual(config.cipher, "rijndael-128")
        self.assertEqual(config.mode, "cbc")
        self.assertIs(config.padding, PaddingType.ZERO)


class TestFromEnv(unittest.TestCase):
    def setUp(self):
        patcher = mock.patch.dict(os.environ)
        patcher.start()
        self.addCleanup(patcher.stop)
        for name in ENV_VARS:
            os.environ.pop(name, None)
        self.tmp = tempfile.TemporaryDirectory()
        self.addCleanup(self.tmp.cleanup)
        self.missing_env = os.path.join(self.tmp.name, "missing.env")

    def test_defaults_when_unset(self):
        self.assertEqual(CipherConfig.from_env(self.missing_env), CipherConfig())

    def test_reads_environment(self):
        os.environ[ENV_CIPHER] = "tripledes"
        os.environ[ENV_MODE] = "ecb"
        os.environ[ENV_PADDING] = "2"
        os.environ[ENV_KEY] = "c2VjcmV0"  # "secret"
        config = CipherConfig.from_env(self.missing_env)
        self.assertEqual(config.cipher, "tripledes")
        self.assertEqual(config.mode, "ecb")
        self.assertIs(config.padding, PaddingType.PKCS7)
        self.assertEqual(config.key, b"secret")

    def test_reads_dotenv_file(self):
        path = os.path.join(self.tmp.name, ".env")
        with open(path, "w") as f:
            f.write(f"{ENV_MODE}=ctr\n{ENV_PADDING}=ansi_x923\n")
        config = CipherConfig.from_env(path)
        self.assertEqual(config.mode, "ctr")
        self.assertIs(config.padding, PaddingType.ANSI_X923)

    def test_environment_wins_over_dotenv(self):
        path = os.path.join(self.tmp.name, ".env")
        with open(path, "w") as f:
            f.write(f"{ENV_MODE}=ctr\n")
        os.environ[ENV_MODE] = "ecb"
        self.assertEqual(CipherConfig.from_env(path).mode, "ecb")

    def test_dotenv_found_from_working_directory(self):
        with open(os.path.join(self.tmp.name, ".env"), "w") as f:
            f.write(f"{ENV_CIPHER}=camellia\n")
        cwd = os.getcwd()
        os.chdir(self.tmp.name)
        self.addCleanup(os.chdir, cwd)
        self.assertEqual(CipherConfig.from_env().cipher, "camellia")

    def test_bad_key_encoding(self):
        os.environ[ENV_KEY] = "%%%"
        with self.assertRaises(InvalidEncoding):
            CipherConfig.from_env(self.missing_env)

    def test_bad_padding(self):
        os.environ[ENV_PADDING] = "bogus"
        with self.assertRaises(ValidationError):
            CipherConfig.from_env(self.missing_env)


if __name__ == "__main__":
    unittest.main()
