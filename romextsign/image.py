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
In-memory ROM extension image.

The image length is captured at load time and never changes afterwards: every
manifest offset depends on it.
"""
import logging
import os.path
import tempfile

from intelhex import IntelHex, IntelHexError

from . import manifest
from .errors import FieldOverflow, IoError

INTEL_HEX_EXT = "hex"
OUTPUT_PREFIX = "signed_"

logger = logging.getLogger(__name__)


class RawImage:

    def __init__(self, data, path=None, base_addr=None):
        self.data = bytearray(data)
        self.path = path
        self.base_addr = base_addr
        self.size = len(self.data)

    def __repr__(self):
        return "<RawImage path={}, size=0x{:x}, base_addr={}>".format(
            self.path, self.size,
            hex(self.base_addr) if self.base_addr is not None else "N/A")

    def __len__(self):
        return len(self.data)

    @classmethod
    def load(cls, path):
        """Load an image from a raw binary or Intel HEX file"""
        ext = os.path.splitext(path)[1][1:].lower()
        try:
            if ext == INTEL_HEX_EXT:
                ih = IntelHex(path)
                img = cls(ih.tobinarray(), path, ih.minaddr())
            else:
                with open(path, 'rb') as f:
                    img = cls(f.read(), path)
        except (OSError, IntelHexError) as e:
            raise IoError("Failed to read image {}: {}".format(path, e))
        logger.debug("Loaded %r", img)
        return img

    def _check_bounds(self, offset, size):
        if offset < 0 or size < 0 or offset + size > self.size:
            raise FieldOverflow(
                "Access to 0x{:x}..0x{:x} is outside the image (0x{:x} "
                "bytes)".format(offset, offset + size, self.size))

    def write_field(self, offset, data):
        """Overwrite len(data) bytes starting at offset.

        The buffer is left untouched if the write would not fit.
        """
        self._check_bounds(offset, len(data))
        self.data[offset:offset + len(data)] = data

    def read_field(self, offset, size):
        self._check_bounds(offset, size)
        return bytes(self.data[offset:offset + size])

    def update_field(self, name, data):
        """Write a named manifest field.

        Data shorter than the region allotted to the field is zero-filled, so
        that no stale bytes survive in the field.
        """
        allotted = manifest.region_size(name)
        if len(data) > allotted:
            raise FieldOverflow(
                "{} bytes do not fit in manifest field {} ({} bytes)".format(
                    len(data), name, allotted))
        data = bytes(data) + bytes(allotted - len(data))
        logger.debug("Updating %s at 0x%x (%d bytes)", name,
                     manifest.offset_of(name), len(data))
        self.write_field(manifest.offset_of(name), data)

    def get_field(self, name):
        return self.read_field(manifest.offset_of(name),
                               manifest.region_size(name))

    def signed_region(self):
        """Bytes covered by the signature, from the signed area start."""
        self._check_bounds(manifest.SIGNED_AREA_START, 0)
        return bytes(self.data[manifest.SIGNED_AREA_START:])

    def output_path(self):
        """Path of the signed image: the source name with a prefix."""
        if self.path is None:
            raise IoError("Image was not loaded from a file")
        head, tail = os.path.split(self.path)
        return os.path.join(head, OUTPUT_PREFIX + tail)

    def save(self, path=None):
        """Write the image, by default to output_path().

        Never writes over the file the image was loaded from. The data goes
        to a temporary file next to the output first, so a failed write
        leaves nothing at the output path.
        """
        if path is None:
            path = self.output_path()
        if self.path is not None and os.path.exists(path) and \
                os.path.samefile(path, self.path):
            raise IoError("Refusing to overwrite input image {}".format(path))
        ext = os.path.splitext(path)[1][1:].lower()
        tmp_path = None
        try:
            with tempfile.NamedTemporaryFile(
                    dir=os.path.dirname(os.path.abspath(path)),
                    prefix="." + os.path.basename(path) + ".",
                    suffix=".tmp", delete=False) as f:
                tmp_path = f.name
                if ext != INTEL_HEX_EXT:
                    f.write(self.data)
            if ext == INTEL_HEX_EXT:
                h = IntelHex()
                h.frombytes(bytes(self.data), offset=self.base_addr or 0)
                h.tofile(tmp_path, 'hex')
            os.replace(tmp_path, path)
        except OSError as e:
            if tmp_path is not None and os.path.exists(tmp_path):
                os.unlink(tmp_path)
            raise IoError("Failed to write image {}: {}".format(path, e))
        logger.info("Wrote %s (0x%x bytes)", path, self.size)
        return path
