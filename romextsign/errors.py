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
Errors raised while patching and signing a ROM extension image.

Every error is terminal: the pipeline never retries, and nothing is written
to disk once one of these has been raised.
"""


class RomExtError(Exception):
    """Base class for all romextsign failures."""
    pass


class IoError(RomExtError):
    """An input file could not be read, or the output could not be written."""
    pass


class ConfigError(RomExtError):
    """A required configuration value is missing or malformed."""
    pass


class MalformedScalar(ConfigError):
    """A scalar value is not a decimal or 0x-prefixed unsigned integer."""
    pass


class FieldOverflow(RomExtError):
    """A write would exceed its manifest field or the image bounds."""
    pass


class SigningError(RomExtError):
    """The private key could not be used, or signing itself failed."""
    pass
