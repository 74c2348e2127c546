# Copyright 2018-present Network Optix, Inc. Licensed under MPL 2.0: www.mozilla.org/MPL/2.0/
import logging
from dataclasses import dataclass
from typing import Any
from typing import Mapping
from typing import Optional
from typing import Sequence

_default_sudo_commands = (
    '/usr/bin/passenger-status',
    '/usr/bin/passenger-memory-stats',
    )

_true_spellings = ('true', 'yes', 'on', '1')
_false_spellings = ('false', 'no', 'off', '0')


@dataclass(frozen=True)
class RealtimeConfig:
    version: Optional[str] = None


@dataclass(frozen=True)
class AgentConfig:
    """Options of the Scout agent on one server, read once per deploy."""

    agent_key: Optional[str] = None
    user: str = 'daemon'
    realtime: Optional[RealtimeConfig] = None
    scoutd: bool = False
    interval: int = 1
    version: Optional[str] = None
    deploy_user: Optional[str] = None
    environment: Optional[str] = None
    roles: Sequence[str] = ()
    hostname: Optional[str] = None
    display_name: Optional[str] = None
    http_proxy: Optional[str] = None
    https_proxy: Optional[str] = None
    sudo_commands: Sequence[str] = _default_sudo_commands

    def __post_init__(self):
        if isinstance(self.interval, bool) or not isinstance(self.interval, int) or self.interval < 1:
            raise InvalidAgentConfig(f"Interval must be a positive number of minutes, got {self.interval!r}")

    @property
    def group_member(self) -> str:
        """Who gets into the adm group and whose ~/.scout is migrated.

        The deploy user, as opposed to the user the agent runs as.
        """
        if self.deploy_user is not None:
            return self.deploy_user
        return self.user

    @classmethod
    def from_options(cls, options: Mapping[str, Any], configuration: Mapping[str, Any]) -> 'AgentConfig':
        """Combine inline options with the deploy configuration.

        Inline options win. Empty and false values fall through
        to the next source. Without an agent key, other options
        are not read, so they cannot fail the deploy.

        >>> c = AgentConfig.from_options({'interval': '5'}, {'scout': {'agent_key': 'k'}})
        >>> (c.agent_key, c.user, c.interval, c.realtime, c.scoutd)
        ('k', 'daemon', 5, None, False)
        >>> AgentConfig.from_options({'agent_key': 'k', 'realtime': True}, {}).realtime
        RealtimeConfig(version=None)
        >>> AgentConfig.from_options({}, {'user': 'rails', 'scout': {'agent_key': 'k', 'realtime': {'version': '1.0.3'}}}).realtime
        RealtimeConfig(version='1.0.3')
        >>> AgentConfig.from_options({'interval': 'often'}, {'scout': 'disabled'})  # doctest: +ELLIPSIS
        AgentConfig(agent_key=None, user='daemon', ...)
        """
        user = _first(options.get('user'), configuration.get('user'), 'daemon')
        scout = configuration.get('scout') or {}
        file_key = scout.get('agent_key') if isinstance(scout, Mapping) else None
        agent_key = _optional_str(_first(options.get('agent_key'), file_key))
        if agent_key is None:
            _logger.info("Scout agent key is not configured, other options are not read")
            return cls(user=user)
        if not isinstance(scout, Mapping):
            raise InvalidAgentConfig(f"Scout configuration must be a mapping, got {scout!r}")

        def option(name):
            return _first(options.get(name), scout.get(name))

        config = cls(
            agent_key=agent_key,
            user=user,
            realtime=_parse_realtime(option('realtime')),
            scoutd=_parse_flag('scoutd', option('scoutd')),
            interval=_parse_interval(_first(option('interval'), 1)),
            version=_optional_str(option('version')),
            deploy_user=_optional_str(configuration.get('user')),
            environment=_optional_str(_first(option('environment'), configuration.get('rails_env'))),
            roles=_parse_list(option('roles')),
            hostname=_optional_str(option('hostname')),
            display_name=_optional_str(option('display_name')),
            http_proxy=_optional_str(option('http_proxy')),
            https_proxy=_optional_str(option('https_proxy')),
            sudo_commands=_parse_list(_first(option('sudo_commands'), _default_sudo_commands)),
            )
        _logger.info("Scout agent config: user %s, interval %d", config.user, config.interval)
        return config


@dataclass(frozen=True)
class HostFacts:
    """What is known about the target hosts before anything is declared."""

    lsb_codename: str

    @property
    def is_ubuntu_trusty(self) -> bool:
        return self.lsb_codename == 'trusty'


def _first(*values):
    for value in values:
        if value is not None and value is not False and value != '':
            return value
    return None


def _optional_str(value) -> Optional[str]:
    if value is None:
        return None
    return str(value)


def _parse_realtime(value) -> Optional[RealtimeConfig]:
    """Accept a flag, a version or a mapping with a version.

    >>> _parse_realtime(None) is None
    True
    >>> _parse_realtime('0.5.2')
    RealtimeConfig(version='0.5.2')
    >>> _parse_realtime({'version': None})
    RealtimeConfig(version=None)
    """
    if value is None:
        return None
    if value is True:
        return RealtimeConfig()
    if isinstance(value, Mapping):
        return RealtimeConfig(version=_optional_str(value.get('version')))
    if isinstance(value, (str, int, float)):
        return RealtimeConfig(version=str(value))
    raise InvalidAgentConfig(f"Realtime must be a flag, a version or a mapping, got {value!r}")


def _parse_flag(name, value) -> bool:
    """Accept a boolean or its usual spelling in a string.

    >>> _parse_flag('scoutd', None), _parse_flag('scoutd', True), _parse_flag('scoutd', 'false')
    (False, True, False)
    >>> _parse_flag('scoutd', ' Yes ')
    True
    >>> _parse_flag('scoutd', 'maybe') # doctest: +IGNORE_EXCEPTION_DETAIL
    Traceback (most recent call last):
    ...
    InvalidAgentConfig: scoutd must be true or false, got 'maybe'
    """
    if value is None:
        return False
    if isinstance(value, bool):
        return value
    if isinstance(value, str):
        normalized = value.strip().lower()
        if normalized in _true_spellings:
            return True
        if normalized in _false_spellings:
            return False
    raise InvalidAgentConfig(f"{name} must be true or false, got {value!r}")


def _parse_interval(value) -> int:
    """Parse minutes between check-ins.

    >>> _parse_interval(3)
    3
    >>> _parse_interval(' 10 ')
    10
    >>> _parse_interval('often') # doctest: +IGNORE_EXCEPTION_DETAIL
    Traceback (most recent call last):
    ...
    InvalidAgentConfig: Interval must be a positive number of minutes, got 'often'
    """
    if isinstance(value, bool):
        raise InvalidAgentConfig(f"Interval must be a positive number of minutes, got {value!r}")
    if isinstance(value, int):
        return value
    if isinstance(value, str) and value.strip().isdigit():
        return int(value.strip())
    raise InvalidAgentConfig(f"Interval must be a positive number of minutes, got {value!r}")


def _parse_list(value) -> Sequence[str]:
    """Accept a list or a comma-separated string.

    >>> _parse_list('app, db')
    ('app', 'db')
    >>> _parse_list(['web'])
    ('web',)
    >>> _parse_list(None)
    ()
    """
    if value is None:
        return ()
    if isinstance(value, str):
        return tuple(item.strip() for item in value.split(',') if item.strip())
    return tuple(str(item) for item in value)


class InvalidAgentConfig(ValueError):
    pass


_logger = logging.getLogger(__name__)
