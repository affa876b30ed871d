# SPDX-License-Identifier: Apache-2.0
#
# Licensed under the Apache License, Version 2.0 (the "License");
# you may not use this file except in compliance with the License.
# You may obtain a copy of the License at
#
#     http://www.apache.org/licenses/LICENSE-2.0
#
# Unless required by applicable law or agreed to in writing, software
# distributed under the License is distributed on an "AS IS" BASIS,
# WITHOUT WARRANTIES OR CONDITIONS OF ANY KIND, either express or implied.
# See the License for the specific language governing permissions and
# limitations under the License.

from click.testing import CliRunner

from romextsign import romextsign_version
from romextsign.main import romextsign
from tests.constants import IMAGE_SIZE

# all available romextsign commands
COMMANDS = [
    "dumpinfo",
    "sign",
    "version",
]


def test_new_command():
    """Check that no new commands had been added,
    so that tests would be updated in such case"""
    for cmd in romextsign.commands:
        assert cmd in COMMANDS


def test_help():
    """Simple test for the help option,
    mostly just to see that it can be started"""
    runner = CliRunner()

    result_short = runner.invoke(romextsign, ["-h"])
    assert result_short.exit_code == 0

    result_long = runner.invoke(romextsign, ["--help"])
    assert result_long.exit_code == 0
    assert result_short.output == result_long.output


def test_version():
    """Check that some version info is produced"""
    runner = CliRunner()

    result = runner.invoke(romextsign, ["version"])
    assert result.exit_code == 0
    assert result.output == romextsign_version + "\n"

    result_help = runner.invoke(romextsign, ["version", "-h"])
    assert result_help.exit_code == 0
    assert result_help.output != result.output


def test_unknown():
    """Check that unknown command will be handled"""
    runner = CliRunner()

    result = runner.invoke(romextsign, ["unknown"])
    assert result.exit_code != 0


class TestSignCommand:
    runner = CliRunner()

    def test_sign(self, workdir):
        result = self.runner.invoke(
            romextsign, ["sign", str(workdir / "config.yaml")])
        assert result.exit_code == 0, result.output
        signed = workdir / "signed_rom_ext.bin"
        assert str(signed) in result.output
        assert signed.stat().st_size == IMAGE_SIZE

    def test_sign_outfile(self, workdir):
        outfile = workdir / "out" / "image.bin"
        outfile.parent.mkdir()
        result = self.runner.invoke(
            romextsign, ["sign", str(workdir / "config.yaml"),
                         "-o", str(outfile)])
        assert result.exit_code == 0, result.output
        assert outfile.stat().st_size == IMAGE_SIZE
        assert not (workdir / "signed_rom_ext.bin").exists()

    def test_sign_key_override(self, workdir, keys_dir):
        (workdir / "key.der").unlink()
        result = self.runner.invoke(
            romextsign, ["sign", str(workdir / "config.yaml"),
                         "-k", str(keys_dir / "another.der")])
        assert result.exit_code == 0, result.output

    def test_sign_missing_config(self, workdir):
        result = self.runner.invoke(
            romextsign, ["sign", str(workdir / "missing.yaml")])
        assert result.exit_code == 1
        assert "not found" in result.output

    def test_sign_missing_usage_constraints(self, workdir):
        (workdir / "usage_constraints.bin").unlink()
        result = self.runner.invoke(
            romextsign, ["sign", str(workdir / "config.yaml")])
        assert result.exit_code != 0
        assert "usage constraints" in result.output
        assert not (workdir / "signed_rom_ext.bin").exists()

    def test_sign_bad_key(self, workdir, keys_dir):
        result = self.runner.invoke(
            romextsign, ["sign", str(workdir / "config.yaml"),
                         "-k", str(keys_dir / "small.der")])
        assert result.exit_code != 0
        assert "Unsupported RSA key size" in result.output
        assert not (workdir / "signed_rom_ext.bin").exists()
