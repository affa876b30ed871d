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

import pytest
from cryptography.hazmat.primitives import serialization
from cryptography.hazmat.primitives.asymmetric import rsa

from tests.constants import CONFIG, IMAGE_SIZE, USAGE_CONSTRAINTS, write_config


def _write_key(path, key_size):
    key = rsa.generate_private_key(public_exponent=65537, key_size=key_size)
    path.write_bytes(key.private_bytes(
        encoding=serialization.Encoding.DER,
        format=serialization.PrivateFormat.TraditionalOpenSSL,
        encryption_algorithm=serialization.NoEncryption()))
    return path


@pytest.fixture(scope="session")
def keys_dir(tmp_path_factory):
    """RSA keys shared by the whole session, generating them is slow"""
    d = tmp_path_factory.mktemp("keys")
    _write_key(d / "key.der", 3072)
    _write_key(d / "another.der", 3072)
    _write_key(d / "small.der", 2048)
    return d


@pytest.fixture
def workdir(tmp_path, keys_dir):
    """A directory holding a zeroed image, policy blobs, a key and a config"""
    (tmp_path / "rom_ext.bin").write_bytes(bytes(IMAGE_SIZE))
    (tmp_path / "usage_constraints.bin").write_bytes(USAGE_CONSTRAINTS)
    (tmp_path / "key.der").write_bytes((keys_dir / "key.der").read_bytes())
    write_config(tmp_path / "config.yaml", CONFIG)
    return tmp_path
