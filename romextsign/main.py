#! /usr/bin/env python3
#
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

import logging
import sys

import click

from romextsign import keys, romextsign_version
from romextsign.config import ParsedConfig
from romextsign.dumpinfo import dump_imginfo
from romextsign.errors import RomExtError
from romextsign.signer import sign_image

MIN_PYTHON_VERSION = (3, 7)
if sys.version_info < MIN_PYTHON_VERSION:
    sys.exit("Python %s.%s or newer is required by romextsign."
             % MIN_PYTHON_VERSION)


@click.argument('config')
@click.option('-k', '--key', metavar='filename',
              help='Private key (DER or PEM) to sign with. Overrides '
                   'input_files.private_key_der_path of the configuration.')
@click.option('-o', '--outfile', metavar='filename',
              help='Where to write the signed image. Defaults to the input '
                   'image name prefixed with "signed_", in the same '
                   'directory.')
@click.command(help='''Patch the manifest of a ROM extension image and sign
               it\n
               CONFIG is a YAML (or JSON) file describing the input files
               and the manifest values''')
def sign(config, key, outfile):
    try:
        parsed = ParsedConfig.load(config)
        signing_key = keys.load(key) if key else None
        outfile = sign_image(parsed, signing_key, outfile)
    except RomExtError as e:
        raise click.ClickException(str(e))
    print("Signed image written to {}".format(outfile))


@click.argument('imgfile')
@click.option('-o', '--outfile', metavar='filename', required=False,
              help='Save manifest information to outfile in YAML format')
@click.option('-s', '--silent', default=False, is_flag=True,
              help='Do not print manifest information to output')
@click.command(help='Print the manifest fields of a ROM extension image')
def dumpinfo(imgfile, outfile, silent):
    try:
        dump_imginfo(imgfile, outfile, silent)
    except RomExtError as e:
        raise click.ClickException(str(e))
    if not silent:
        print("dumpinfo has run successfully")


@click.command(help='Print romextsign version information')
def version():
    print(romextsign_version)


@click.option('-v', '--verbose', count=True,
              help='Log pipeline progress (repeat for debug output)')
@click.group(context_settings=dict(help_option_names=['-h', '--help']))
def romextsign(verbose):
    if verbose:
        level = logging.DEBUG if verbose > 1 else logging.INFO
        logging.basicConfig(format='%(levelname)5s: %(message)s',
                            level=level, stream=sys.stderr)


romextsign.add_command(sign)
romextsign.add_command(dumpinfo)
romextsign.add_command(version)


if __name__ == '__main__':
    romextsign()
