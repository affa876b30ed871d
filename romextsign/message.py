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
Construction of the message that gets signed.

The message is not simply the image: it is the system state value, followed
by the device usage value, followed by the signed region of the image. That
order is shared with the verifier and must not change.
"""
import logging

from . import manifest
from .errors import FieldOverflow, IoError

logger = logging.getLogger(__name__)


def build_message(system_state, device_usage, signed_region):
    return bytes(system_state) + bytes(device_usage) + bytes(signed_region)


def _read_blob(path, what):
    try:
        with open(path, 'rb') as f:
            return f.read()
    except OSError as e:
        raise IoError("Failed to read {} {}: {}".format(what, path, e))


def read_usage_constraints(path):
    blob = _read_blob(path, "usage constraints")
    logger.debug("Read %d bytes of usage constraints from %s", len(blob),
                 path)
    return blob


def system_state_value(path=None):
    """Return the system state value to authenticate.

    The value comes from the file given in the configuration; when none is
    configured the system state contributes nothing to the message.
    """
    if path is None:
        return bytes()
    return _read_blob(path, "system state value")


def device_usage_value(usage_constraints):
    """Derive the device usage value from the usage constraints blob.

    The value is the usage constraints region exactly as it is stored in the
    manifest: the blob, zero-filled up to the size of the region.
    """
    size = manifest.region_size('usage_constraints')
    if len(usage_constraints) > size:
        raise FieldOverflow(
            "Usage constraints are {} bytes, at most {} are allowed".format(
                len(usage_constraints), size))
    return bytes(usage_constraints) + bytes(size - len(usage_constraints))
