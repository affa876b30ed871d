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
ROM extension manifest layout.

The manifest sits at the very start of the image. Offsets are shared with the
boot ROM and must match it bit for bit; new fields may only be appended.
"""
from collections import namedtuple

from .errors import FieldOverflow

Field = namedtuple('Field', ['name', 'offset', 'size'])

RSA_3072_SIZE = 384  # Bytes
USAGE_CONSTRAINTS_MAX_SIZE = 32  # Bytes
EXTENSION_COUNT = 4

# size is None for variable-width blobs; those may use all the space up to
# the next field.
MANIFEST_FIELDS = [
    Field('identifier',                    0x000, 4),
    Field('image_signature',               0x008, RSA_3072_SIZE),
    Field('image_length',                  0x188, 4),
    Field('image_version',                 0x18c, 4),
    Field('image_timestamp',               0x190, 8),
    Field('signature_key_public_exponent', 0x198, 4),
    Field('usage_constraints',             0x1a0, None),
    Field('peripheral_lockdown_info',      0x1c0, 16),
    Field('signature_key_modulus',         0x1d0, RSA_3072_SIZE),
]
for _n in range(EXTENSION_COUNT):
    MANIFEST_FIELDS.append(
        Field('extension{}_offset'.format(_n), 0x350 + 8 * _n, 4))
    MANIFEST_FIELDS.append(
        Field('extension{}_checksum'.format(_n), 0x354 + 8 * _n, 4))
del _n

FIELDS = {f.name: f for f in MANIFEST_FIELDS}

# Everything from here to the end of the image is covered by the signature.
SIGNED_AREA_START = FIELDS['image_length'].offset
MANIFEST_SIZE = 0x370

# Fields that are written after the message to sign has been built.
UNSIGNED_FIELDS = ('identifier', 'image_signature')


def _field(name):
    try:
        return FIELDS[name]
    except KeyError:
        raise KeyError("Unknown manifest field: {}".format(name))


def offset_of(name):
    return _field(name).offset


def width_of(name):
    """Return the field width in bytes, or None for variable-width blobs."""
    return _field(name).size


def region_size(name):
    """Return the number of bytes allotted to a field.

    Fixed-width fields own exactly their width. A variable-width field owns
    everything up to the next field in the layout.
    """
    field = _field(name)
    if field.size is not None:
        return field.size
    following = [f.offset for f in MANIFEST_FIELDS if f.offset > field.offset]
    return (min(following) if following else MANIFEST_SIZE) - field.offset


def field_end(name):
    return offset_of(name) + region_size(name)


def is_signed(name):
    return offset_of(name) >= SIGNED_AREA_START


def check_layout(image_size=None):
    """Check the layout invariants, optionally against an image size.

    Raises FieldOverflow if fields overlap, if a field meant to stay outside
    the signature reaches into the signed area, or if the manifest does not
    fit into the image.
    """
    ordered = sorted(MANIFEST_FIELDS, key=lambda f: f.offset)
    for prev, cur in zip(ordered, ordered[1:]):
        if field_end(prev.name) > cur.offset:
            raise FieldOverflow("Manifest fields {} and {} overlap".format(
                prev.name, cur.name))
    for name in UNSIGNED_FIELDS:
        if field_end(name) > SIGNED_AREA_START:
            raise FieldOverflow(
                "Field {} overlaps the signed area starting at 0x{:x}"
                .format(name, SIGNED_AREA_START))
    for field in MANIFEST_FIELDS:
        if field.name not in UNSIGNED_FIELDS and not is_signed(field.name):
            raise FieldOverflow(
                "Field {} is not covered by the signature".format(field.name))
    if field_end(ordered[-1].name) > MANIFEST_SIZE:
        raise FieldOverflow("Manifest fields exceed the manifest size")
    if image_size is not None and image_size < MANIFEST_SIZE:
        raise FieldOverflow(
            "Image is {} bytes, the manifest alone needs {} bytes".format(
                image_size, MANIFEST_SIZE))
