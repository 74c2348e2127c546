# Copyright 2018-present Network Optix, Inc. Licensed under MPL 2.0: www.mozilla.org/MPL/2.0/
import logging
import sys
from argparse import ArgumentParser
from pathlib import Path
from typing import Any
from typing import Mapping
from typing import Sequence

import yaml

from scout_provisioning._config import AgentConfig
from scout_provisioning._config import HostFacts
from scout_provisioning._core import Fleet
from scout_provisioning._deploy_config import deploy_configuration_paths
from scout_provisioning._deploy_config import normalize_keys
from scout_provisioning._deploy_config import read_deploy_configuration
from scout_provisioning._puppet import ApplyManifest
from scout_provisioning._puppet import render_manifest
from scout_provisioning._templates import Templates
from scout_provisioning.scout import setup


def main(args: Sequence[str]) -> int:
    parser = ArgumentParser(description="Declare resources that make servers check into Scout.")
    parser.add_argument(
        '--app-root',
        default=Path('.'),
        type=lambda v: Path(v).expanduser(),
        help="application with config/moonshine.yml, default: current directory",
        )
    parser.add_argument('--stage', help="read config/moonshine/STAGE.yml over the main file")
    parser.add_argument(
        '--codename',
        default='trusty',
        help="lsb codename of the target hosts, default: %(default)s",
        )
    parser.add_argument(
        '--set',
        dest='options',
        action='append',
        default=[],
        metavar='KEY=VALUE',
        help="inline option, overrides the scout section; VALUE is YAML",
        )
    parser.add_argument('--output', type=Path, help="write the Puppet manifest to a file")
    parser.add_argument(
        '--apply',
        dest='hosts',
        action='append',
        default=[],
        metavar='HOST',
        help="run puppet apply over SSH; may be repeated",
        )
    parsed_args = parser.parse_args(args)
    configuration = read_deploy_configuration(*deploy_configuration_paths(parsed_args.app_root, parsed_args.stage))
    config = AgentConfig.from_options(_parse_options(parsed_args.options), configuration)
    manifest = setup(config, HostFacts(parsed_args.codename), Templates(parsed_args.app_root))
    manifest_text = render_manifest(manifest)
    if parsed_args.output is not None:
        parsed_args.output.write_text(manifest_text, encoding='utf-8')
        _logger.info("Manifest written to %s", parsed_args.output)
    if parsed_args.hosts:
        if len(manifest) == 0:
            _logger.info("Nothing to apply")
        else:
            Fleet(parsed_args.hosts).run([ApplyManifest(manifest_text)])
    if parsed_args.output is None and not parsed_args.hosts:
        print(manifest_text, end='')
    return 0


def _parse_options(raw_options: Sequence[str]) -> Mapping[str, Any]:
    """Parse KEY=VALUE pairs, values are YAML scalars or collections.

    >>> _parse_options(['interval=5', ':scoutd=true', 'agent_key=abc'])
    {'interval': 5, 'scoutd': True, 'agent_key': 'abc'}
    """
    options = {}
    for raw in raw_options:
        key, sep, value = raw.partition('=')
        if not sep or not key:
            raise ValueError(f"Expected KEY=VALUE, got {raw!r}")
        options[key] = yaml.safe_load(value)
    return normalize_keys(options)


def cli():
    logging.basicConfig(
        level=logging.DEBUG,
        format="%(asctime)s %(levelname)7s %(name)s %(message).5000s",
        stream=sys.stderr,
        )
    sys.exit(main(sys.argv[1:]))


_logger = logging.getLogger(__name__)

if __name__ == '__main__':
    cli()
