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
Parse and print the manifest fields of a ROM extension image.
"""
import os.path

import yaml

from . import manifest
from .errors import IoError
from .image import RawImage

_LINE_LENGTH = 60
# Fields wider than this are printed as hex dumps rather than integers
_MAX_INT_FIELD = 8


def print_in_row(row_text):
    row_text = "#### " + row_text + " "
    fill = "#" * (_LINE_LENGTH - len(row_text))
    print(row_text + fill)


def print_bytes(data, indent):
    for j, b in enumerate(data):
        print("{0:#04x}".format(b), end=" ")
        if ((j + 1) % 8 == 0) and ((j + 1) != len(data)):
            print("\n", end=" " * indent)
    print()


def parse_manifest(img):
    """Return the manifest fields of img as a name -> value mapping.

    Integer fields are decoded from little-endian, wide fields are kept as
    bytes.
    """
    fields = {}
    for field in manifest.MANIFEST_FIELDS:
        data = img.get_field(field.name)
        if len(data) <= _MAX_INT_FIELD:
            fields[field.name] = int.from_bytes(data, 'little')
        else:
            fields[field.name] = data
    return fields


def dump_imginfo(imgfile, outfile=None, silent=False):
    """Parse a ROM extension image and print/save its manifest."""
    img = RawImage.load(imgfile)
    if len(img) < manifest.MANIFEST_SIZE:
        raise IoError("{} is too small to hold a manifest ({} bytes)".format(
            imgfile, len(img)))
    fields = parse_manifest(img)

    if outfile is not None:
        imgdata = {"image": {"size": len(img),
                             "signed_area_start": manifest.SIGNED_AREA_START},
                   "manifest": fields}
        try:
            with open(outfile, "w") as outf:
                yaml.dump(imgdata, outf, sort_keys=False)
        except OSError as e:
            raise IoError("Failed to write {}: {}".format(outfile, e))

    if silent:
        return fields

    print("Printing manifest of image:", os.path.basename(imgfile), "\n")
    print_in_row("Manifest (offset: 0x0)")
    for field in manifest.MANIFEST_FIELDS:
        if field.offset == manifest.SIGNED_AREA_START:
            print_in_row("Signed area (offset: {})".format(
                hex(manifest.SIGNED_AREA_START)))
        value = fields[field.name]
        label = "{} ({}):".format(field.name, hex(field.offset))
        print(label, " " * (44 - len(label)), sep="", end="")
        if isinstance(value, bytes):
            print()
            print(" " * 4, end="")
            print_bytes(value, 4)
        else:
            print(hex(value))
    print_in_row("Payload (offset: {})".format(hex(manifest.MANIFEST_SIZE)))
    print("size:", hex(len(img) - manifest.MANIFEST_SIZE))
    print_in_row("End of Image ")
    return fields
