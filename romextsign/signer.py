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
ROM extension signing pipeline.

A run goes through five phases, strictly in order:

  1. load the configuration, image, key and policy blobs
  2. patch the static manifest fields from the configuration
  3. patch the public key material
  4. build the message and sign it
  5. embed the signature and write the output image

Any error aborts the run; nothing is written unless signing succeeded.
"""
import logging
from enum import IntEnum

from . import keys, manifest
from .codec import encode_peripheral_lockdown_info, encode_scalar, int_to_le
from .config import EXTENSION_KEYS, ParsedConfig
from .errors import RomExtError, SigningError
from .image import RawImage
from .message import (build_message, device_usage_value,
                      read_usage_constraints, system_state_value)

logger = logging.getLogger(__name__)

# Configuration key -> manifest field.
STATIC_SCALAR_FIELDS = {
    'manifest_identifier': 'identifier',
    'image_version': 'image_version',
    'image_timestamp': 'image_timestamp',
}
STATIC_SCALAR_FIELDS.update({key: key for key in EXTENSION_KEYS})

Phase = IntEnum('Phase', ['NEW', 'LOADED', 'STATIC_PATCHED', 'KEY_PATCHED',
                          'SIGNED', 'SAVED'])


class RomExtSigner(object):

    def __init__(self, config, key=None,
                 system_state=system_state_value,
                 device_usage=device_usage_value):
        self.config = config
        self.key = key
        self.system_state = system_state
        self.device_usage = device_usage
        self.image = None
        self.usage_constraints = None
        self.system_state_value = None
        self.message = None
        self.signature = None
        self.phase = Phase.NEW

    def __repr__(self):
        return "<RomExtSigner phase={}, image={!r}>".format(
            self.phase.name, self.image)

    def _enter(self, expected, new):
        if self.phase != expected:
            raise RomExtError("Cannot go to phase {} from phase {}".format(
                new.name, self.phase.name))
        logger.info("Phase %d: %s", new - 1, new.name.lower())

    def load(self):
        self._enter(Phase.NEW, Phase.LOADED)
        files = self.config.input_files
        image = RawImage.load(files.image_path)
        manifest.check_layout(len(image))
        if self.key is None:
            self.key = keys.load(files.private_key_der_path)
        self.usage_constraints = read_usage_constraints(
            files.usage_constraints_path)
        self.system_state_value = self.system_state(
            files.system_state_value_path)
        self.image = image
        self.phase = Phase.LOADED

    def patch_static_fields(self):
        self._enter(Phase.LOADED, Phase.STATIC_PATCHED)
        for key, field in STATIC_SCALAR_FIELDS.items():
            self.image.update_field(field,
                                    encode_scalar(self.config.scalars[key]))
        self.image.update_field('image_length', int_to_le(len(self.image), 4))
        self.image.update_field('usage_constraints', self.usage_constraints)
        self.image.update_field(
            'peripheral_lockdown_info',
            encode_peripheral_lockdown_info(
                self.config.peripheral_lockdown_info.value))
        self.phase = Phase.STATIC_PATCHED

    def patch_key_fields(self):
        self._enter(Phase.STATIC_PATCHED, Phase.KEY_PATCHED)
        self.image.update_field('signature_key_public_exponent',
                                self.key.public_exponent_bytes())
        self.image.update_field('signature_key_modulus',
                                self.key.modulus_bytes())
        self.phase = Phase.KEY_PATCHED

    def sign(self):
        self._enter(Phase.KEY_PATCHED, Phase.SIGNED)
        device_usage = self.device_usage(self.usage_constraints)
        self.message = build_message(self.system_state_value, device_usage,
                                     self.image.signed_region())
        logger.debug("Signing %d bytes with %s", len(self.message),
                     self.key.sig_type())
        signature = self.key.sign(self.message)
        if len(signature) != manifest.width_of('image_signature'):
            raise SigningError(
                "Signature is {} bytes, the manifest holds {}".format(
                    len(signature), manifest.width_of('image_signature')))
        self.signature = signature
        self.phase = Phase.SIGNED

    def save(self, path=None):
        self._enter(Phase.SIGNED, Phase.SAVED)
        self.image.update_field('image_signature', self.signature)
        outfile = self.image.save(path)
        self.phase = Phase.SAVED
        return outfile

    def run(self, path=None):
        self.load()
        self.patch_static_fields()
        self.patch_key_fields()
        self.sign()
        return self.save(path)


def sign_image(config, key=None, outfile=None, **kwargs):
    """Patch and sign the image described by config.

    config is either a ParsedConfig or a path to a configuration file. key
    overrides the private key named in the configuration. Returns the path
    of the signed image.
    """
    if not isinstance(config, ParsedConfig):
        config = ParsedConfig.load(config)
    return RomExtSigner(config, key, **kwargs).run(outfile)
