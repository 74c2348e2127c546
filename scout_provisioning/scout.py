# Copyright 2018-present Network Optix, Inc. Licensed under MPL 2.0: www.mozilla.org/MPL/2.0/
import logging

from scout_provisioning._config import AgentConfig
from scout_provisioning._config import HostFacts
from scout_provisioning._manifest import Manifest
from scout_provisioning._strategies import select_strategy
from scout_provisioning._templates import Templates


def setup(config: AgentConfig, facts: HostFacts, templates: Templates) -> Manifest:
    """Declare what makes a server check into Scout.

    The agent key is the only required option. Without it, the deploy
    goes on: a hint is printed and nothing is declared.
    """
    manifest = Manifest()
    if not config.agent_key:
        _logger.warning("Scout agent key is not configured, skip Scout")
        print(_missing_key_hint, flush=True)
        return manifest
    strategy = select_strategy(config)
    _logger.info("Scout: %r on %s", strategy, facts.lsb_codename)
    strategy.declare(manifest, facts, templates)
    manifest.verify()
    _logger.info("Scout: %d resources declared", len(manifest))
    return manifest


_missing_key_hint = '\n'.join([
    "To use the Scout agent, specify your key in config/moonshine.yml:",
    ":scout:",
    "  :agent_key: YOUR-SCOUT-KEY",
    ])

_logger = logging.getLogger(__name__)
