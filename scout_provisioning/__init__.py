# Copyright 2018-present Network Optix, Inc. Licensed under MPL 2.0: www.mozilla.org/MPL/2.0/
"""Make servers check into Scout, the server monitoring service.

Nothing is changed on a server directly. Everything is formulated as
a declaration of a resource: a package, a gem, a cron job, a file,
an exec or a service. Declarations go to Puppet, which compares them
with the server state and converges. Puppet owns ordering and idempotency,
this package only says what should be there and in what order.

Declarations must be idempotent as a whole.
The second run must not "accumulate" changes.
Every exec that changes something carries a guard: a shell predicate
that tells Puppet the change is already there.

There are three ways to install the agent:
the agent gem run by cron (default),
the agent gem with the realtime extension,
and scoutd, a daemon from the Scout APT repository.

The only required setting is the agent key. It is given when a server
is added to Scout. Without the key nothing is declared and the deploy
continues.

Settings are read from config/moonshine.yml of the application:

    :scout:
      :agent_key: YOUR-SCOUT-KEY
      :interval: 5
      :scoutd: true
"""
from scout_provisioning._config import AgentConfig
from scout_provisioning._config import HostFacts
from scout_provisioning._config import InvalidAgentConfig
from scout_provisioning._config import RealtimeConfig
from scout_provisioning._deploy_config import DeployConfigError
from scout_provisioning._deploy_config import read_deploy_configuration
from scout_provisioning._manifest import DuplicateResource
from scout_provisioning._manifest import Manifest
from scout_provisioning._manifest import UnresolvedReference
from scout_provisioning._puppet import ApplyManifest
from scout_provisioning._puppet import render_manifest
from scout_provisioning._resources import Reference
from scout_provisioning._strategies import select_strategy
from scout_provisioning._templates import Templates
from scout_provisioning.scout import setup

__all__ = [
    'AgentConfig',
    'ApplyManifest',
    'DeployConfigError',
    'DuplicateResource',
    'HostFacts',
    'InvalidAgentConfig',
    'Manifest',
    'RealtimeConfig',
    'Reference',
    'Templates',
    'UnresolvedReference',
    'read_deploy_configuration',
    'render_manifest',
    'select_strategy',
    'setup',
    ]
