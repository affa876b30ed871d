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
Conversion of configuration values into manifest field bytes.
"""
import re

from .errors import MalformedScalar

U32_MAX = 0xffffffff
U64_MAX = 0xffffffffffffffff
PERIPHERAL_LOCKDOWN_INFO_SIZE = 16  # Bytes, 128-bit field

scalar_re = re.compile(r"0x[0-9a-fA-F]+|[0-9]+")


def encode_scalar(text):
    """Encode a decimal or 0x-prefixed hex unsigned integer string.

    Values that fit in 32 bits are returned as 4 little-endian bytes, larger
    ones (up to 64 bits) as 8 little-endian bytes.
    """
    if not isinstance(text, str) or not scalar_re.fullmatch(text):
        raise MalformedScalar(
            "{!r} is not a decimal or 0x-prefixed hex unsigned integer"
            .format(text))
    if text.startswith('0x'):
        value = int(text[2:], 16)
    else:
        value = int(text, 10)
    if value > U64_MAX:
        raise MalformedScalar("{} does not fit in 64 bits".format(text))
    size = 4 if value <= U32_MAX else 8
    return value.to_bytes(size, 'little')


def encode_peripheral_lockdown_info(value):
    """Encode the peripheral lockdown value into its 128-bit field."""
    if isinstance(value, bool) or not isinstance(value, int) \
            or not 0 <= value <= U32_MAX:
        raise MalformedScalar(
            "Peripheral lockdown info must be an unsigned 32-bit integer, "
            "got {!r}".format(value))
    return value.to_bytes(PERIPHERAL_LOCKDOWN_INFO_SIZE, 'little')


def int_to_le(value, size=None):
    """Little-endian bytes of a non-negative integer.

    Without a size the shortest encoding is used (at least one byte).
    """
    if size is None:
        size = max(1, (value.bit_length() + 7) // 8)
    return value.to_bytes(size, 'little')
