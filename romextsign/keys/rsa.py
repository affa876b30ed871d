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
RSA key management
"""

from cryptography.exceptions import UnsupportedAlgorithm
from cryptography.hazmat.primitives import hashes
from cryptography.hazmat.primitives.asymmetric import padding

from ..codec import int_to_le
from ..errors import SigningError
from .general import KeyClass

# Key sizes the boot ROM accepts
RSA_KEY_SIZES = [3072]


class RSAUsageError(SigningError):
    pass


class RSA(KeyClass):
    """
    Wrapper around an RSA private key.

    Signatures are RSASSA-PKCS1-v1_5 over SHA-256. The scheme is fixed: the
    boot ROM knows no other.
    """

    def __init__(self, key):
        if key.key_size not in RSA_KEY_SIZES:
            raise RSAUsageError(
                "Unsupported RSA key size: {} (supported: {})".format(
                    key.key_size, ', '.join(map(str, RSA_KEY_SIZES))))
        self.key = key

    def sig_type(self):
        return "PKCS1_v1_5_SHA256"

    def sig_len(self):
        return self.key.key_size // 8

    def _get_public(self):
        return self.key.public_key()

    def public_exponent_bytes(self):
        """Public exponent, little-endian, 4 bytes"""
        return int_to_le(self._get_public().public_numbers().e, 4)

    def modulus_bytes(self):
        """Modulus, little-endian, padded to the key size"""
        return int_to_le(self._get_public().public_numbers().n,
                         self.sig_len())

    def sign(self, payload):
        try:
            signature = self.key.sign(bytes(payload), padding.PKCS1v15(),
                                      hashes.SHA256())
        except (ValueError, TypeError, UnsupportedAlgorithm) as e:
            raise SigningError("Failed to sign: {}".format(e))
        if len(signature) != self.sig_len():
            raise SigningError(
                "Signature is {} bytes, expected {}".format(
                    len(signature), self.sig_len()))
        return signature
