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

import json
import os

import pytest

from romextsign.codec import encode_scalar
from romextsign.config import ParsedConfig
from romextsign.errors import ConfigError, IoError, MalformedScalar
from tests.constants import CONFIG, IDENTIFIER, make_config, write_config


def test_load(tmp_path):
    path = write_config(tmp_path / "config.yaml", CONFIG)
    config = ParsedConfig.load(str(path))

    files = config.input_files
    assert files.image_path == os.path.join(str(tmp_path), "rom_ext.bin")
    assert files.private_key_der_path == os.path.join(str(tmp_path),
                                                      "key.der")
    assert files.usage_constraints_path == \
        os.path.join(str(tmp_path), "usage_constraints.bin")
    assert files.system_state_value_path is None
    assert config.peripheral_lockdown_info.value == 0x12345678
    assert config.scalars['manifest_identifier'] == IDENTIFIER
    assert config.scalars['image_version'] == "1"
    assert config.scalars['extension3_checksum'] == "0"


def test_load_json(tmp_path):
    path = tmp_path / "config.json"
    path.write_text(json.dumps(CONFIG))
    config = ParsedConfig.load(str(path))
    assert config.scalars['image_timestamp'] == "0x5f5e1000"


def test_absolute_paths_are_kept(tmp_path):
    files = dict(CONFIG["input_files"], image_path="/abs/rom_ext.bin",
                 system_state_value_path="state.bin")
    config = ParsedConfig.from_dict(make_config(input_files=files),
                                    str(tmp_path))
    assert config.input_files.image_path == "/abs/rom_ext.bin"
    assert config.input_files.system_state_value_path == \
        os.path.join(str(tmp_path), "state.bin")


def test_timestamp_is_optional():
    config = ParsedConfig.from_dict(make_config(image_timestamp=None))
    assert config.scalars['image_timestamp'] == "0"


def _config_text(identifier, version):
    return "\n".join([
        "input_files:",
        "  image_path: rom_ext.bin",
        "  private_key_der_path: key.der",
        "  usage_constraints_path: usage_constraints.bin",
        "peripheral_lockdown_info:",
        "  value: 0",
        "manifest_identifier: {}".format(identifier),
        "image_version: {}".format(version),
    ] + ["extension{}_{}: \"0\"".format(n, kind) for n in range(4)
         for kind in ("offset", "checksum")])


def test_quoted_scalars_keep_their_text(tmp_path):
    path = tmp_path / "config.yaml"
    path.write_text(_config_text('"0x1A"', '"010"'))
    config = ParsedConfig.load(str(path))
    assert config.scalars['manifest_identifier'] == "0x1A"
    assert config.scalars['image_version'] == "010"
    assert encode_scalar(config.scalars['image_version']) == \
        b"\x0a\x00\x00\x00"


@pytest.mark.parametrize("raw", ["3", "0x1A", "010", "0b101", "1_000", "1:30"])
def test_unquoted_scalars_rejected(tmp_path, raw):
    path = tmp_path / "config.yaml"
    path.write_text(_config_text('"0x1A"', raw))
    with pytest.raises(ConfigError):
        ParsedConfig.load(str(path))


@pytest.mark.parametrize("missing", [
    "input_files",
    "peripheral_lockdown_info",
    "manifest_identifier",
    "image_version",
    "extension0_offset",
    "extension3_checksum",
])
def test_missing_key(missing):
    with pytest.raises(ConfigError):
        ParsedConfig.from_dict(make_config(**{missing: None}))


@pytest.mark.parametrize("missing", [
    "image_path",
    "private_key_der_path",
    "usage_constraints_path",
])
def test_missing_input_file(missing):
    files = dict(CONFIG["input_files"])
    del files[missing]
    with pytest.raises(ConfigError):
        ParsedConfig.from_dict(make_config(input_files=files))


@pytest.mark.parametrize("value", [-1, 0x100000000, "1", None, True])
def test_bad_lockdown_value(value):
    with pytest.raises(ConfigError):
        ParsedConfig.from_dict(
            make_config(peripheral_lockdown_info={"value": value}))


@pytest.mark.parametrize("key, value", [
    ("image_version", "v1"),
    ("manifest_identifier", "-1"),
    ("extension1_offset", ""),
    ("image_timestamp", "0xfffffffffffffffff"),
])
def test_malformed_scalar(key, value):
    with pytest.raises(MalformedScalar):
        ParsedConfig.from_dict(make_config(**{key: value}))


@pytest.mark.parametrize("value", [1.5, [1], {"a": 1}])
def test_scalar_wrong_type(value):
    with pytest.raises(ConfigError):
        ParsedConfig.from_dict(make_config(image_version=value))


def test_not_a_mapping():
    with pytest.raises(ConfigError):
        ParsedConfig.from_dict(["not", "a", "mapping"])


def test_missing_file(tmp_path):
    with pytest.raises(IoError):
        ParsedConfig.load(str(tmp_path / "missing.yaml"))


def test_unparseable_file(tmp_path):
    path = tmp_path / "config.yaml"
    path.write_text("input_files: [unclosed")
    with pytest.raises(ConfigError):
        ParsedConfig.load(str(path))
