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

"""
Signing configuration.

The configuration is a YAML document (plain JSON works as well) describing
the input files and the static manifest values:

    input_files:
      image_path: rom_ext.bin
      private_key_der_path: rom_ext_key.der
      usage_constraints_path: usage_constraints.bin
      system_state_value_path: system_state.bin   # optional
    peripheral_lockdown_info:
      value: 0
    manifest_identifier: "0x4552544f"
    image_version: "1"
    image_timestamp: "0"                          # optional
    extension0_offset: "0"
    extension0_checksum: "0"
    ...

Relative paths are resolved against the directory of the configuration file.
"""
import logging
import os.path
from collections import namedtuple

import yaml

from .codec import encode_scalar
from .errors import ConfigError, IoError, MalformedScalar
from .manifest import EXTENSION_COUNT

InputFiles = namedtuple('InputFiles', ['image_path', 'private_key_der_path',
                                       'usage_constraints_path',
                                       'system_state_value_path'])

PeripheralLockdownInfo = namedtuple('PeripheralLockdownInfo', ['value'])

EXTENSION_KEYS = []
for _n in range(EXTENSION_COUNT):
    EXTENSION_KEYS.append('extension{}_offset'.format(_n))
    EXTENSION_KEYS.append('extension{}_checksum'.format(_n))
del _n

SCALAR_KEYS = ['manifest_identifier', 'image_version',
               'image_timestamp'] + EXTENSION_KEYS
OPTIONAL_SCALARS = {
    'image_timestamp': '0',
}

logger = logging.getLogger(__name__)


class ParsedConfig(object):

    def __init__(self, input_files, peripheral_lockdown_info, scalars):
        self.input_files = input_files
        self.peripheral_lockdown_info = peripheral_lockdown_info
        self.scalars = dict(scalars)

    def __repr__(self):
        return "<ParsedConfig image={}, identifier={}, version={}>".format(
            self.input_files.image_path, self.scalars['manifest_identifier'],
            self.scalars['image_version'])

    @classmethod
    def from_dict(cls, data, base_dir=None):
        if not isinstance(data, dict):
            raise ConfigError("Configuration must be a mapping")

        files = _section(data, 'input_files')

        def path(key, required=True):
            value = files.get(key)
            if value is None:
                if required:
                    raise ConfigError("Missing input_files.{}".format(key))
                return None
            if not isinstance(value, str) or not value:
                raise ConfigError(
                    "input_files.{} must be a non-empty path".format(key))
            if base_dir is not None and not os.path.isabs(value):
                value = os.path.join(base_dir, value)
            return value

        input_files = InputFiles(
            image_path=path('image_path'),
            private_key_der_path=path('private_key_der_path'),
            usage_constraints_path=path('usage_constraints_path'),
            system_state_value_path=path('system_state_value_path',
                                         required=False))

        lockdown = _section(data, 'peripheral_lockdown_info')
        value = lockdown.get('value')
        if isinstance(value, bool) or not isinstance(value, int) \
                or not 0 <= value <= 0xffffffff:
            raise ConfigError(
                "peripheral_lockdown_info.value must be an unsigned 32-bit "
                "integer, got {!r}".format(value))

        scalars = {}
        for key in SCALAR_KEYS:
            if key not in data:
                if key in OPTIONAL_SCALARS:
                    scalars[key] = OPTIONAL_SCALARS[key]
                    continue
                raise ConfigError("Missing {}".format(key))
            scalars[key] = _scalar(key, data[key])

        return cls(input_files, PeripheralLockdownInfo(value), scalars)

    @classmethod
    def load(cls, path):
        try:
            with open(path) as f:
                data = yaml.safe_load(f)
        except FileNotFoundError as e:
            raise IoError("Config file not found: {}".format(e))
        except OSError as e:
            raise ConfigError("Failed to read config file {}: {}".format(
                path, e))
        except yaml.YAMLError as e:
            raise ConfigError("Failed to parse config file {}: {}".format(
                path, e))
        config = cls.from_dict(data, os.path.dirname(os.path.abspath(path)))
        logger.debug("Loaded %r from %s", config, path)
        return config


def _section(data, key):
    section = data.get(key)
    if not isinstance(section, dict):
        raise ConfigError("Missing or malformed section: {}".format(key))
    return section


def _scalar(key, value):
    # Unquoted YAML numbers have already been through the YAML 1.1 int
    # resolver (octal, binary, sexagesimal...), so only text is accepted.
    if not isinstance(value, str):
        raise ConfigError(
            "{} must be a quoted string, got {!r}".format(key, value))
    try:
        encode_scalar(value)
    except MalformedScalar as e:
        raise MalformedScalar("{}: {}".format(key, e))
    return value
