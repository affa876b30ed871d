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
Cryptographic key management for romextsign.
"""

from cryptography.exceptions import UnsupportedAlgorithm
from cryptography.hazmat.primitives import serialization
from cryptography.hazmat.primitives.asymmetric.rsa import RSAPrivateKey

from ..errors import IoError, SigningError
from .general import KeyClass
from .rsa import RSA, RSAUsageError, RSA_KEY_SIZES


class PasswordRequired(SigningError):
    """Raised to indicate that the key is password protected, but a
    password was not specified."""
    pass


def _parse_private(raw, passwd):
    try:
        return serialization.load_der_private_key(raw, password=passwd)
    except ValueError:
        # Not DER, give PEM a try.
        return serialization.load_pem_private_key(raw, password=passwd)


def load(path, passwd=None):
    """Load an RSA private key (DER or PEM) from the given path."""
    try:
        with open(path, 'rb') as f:
            raw = f.read()
    except OSError as e:
        raise IoError("Failed to read private key {}: {}".format(path, e))
    try:
        pk = _parse_private(raw, passwd)
    # cryptography raises TypeError when a password is needed but missing
    except TypeError:
        raise PasswordRequired("Private key {} is password protected"
                               .format(path))
    except (ValueError, UnsupportedAlgorithm) as e:
        raise SigningError("Failed to parse private key {}: {}".format(
            path, e))

    if isinstance(pk, RSAPrivateKey):
        return RSA(pk)
    raise SigningError("Unsupported key type: {}".format(type(pk).__name__))
