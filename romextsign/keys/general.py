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
Base class for signing keys.

A key is the signer capability of the pipeline: anything that can sign a
message and describe its public half can be used in place of an RSA key.
"""


class KeyClass(object):
    def sig_type(self):
        """Return the type of this signature (as a string)"""
        raise NotImplementedError()

    def sig_len(self):
        raise NotImplementedError()

    def sign(self, payload):
        raise NotImplementedError()

    def public_exponent_bytes(self):
        raise NotImplementedError()

    def modulus_bytes(self):
        raise NotImplementedError()
