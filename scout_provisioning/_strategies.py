# Copyright 2018-present Network Optix, Inc. Licensed under MPL 2.0: www.mozilla.org/MPL/2.0/
"""Three mutually exclusive ways to get a server checking into Scout.

Each strategy only declares resources. Idempotency guards are shell
predicates evaluated by the convergence engine, they are passed as is.
"""
import logging
import shlex
from abc import ABCMeta
from abc import abstractmethod

from scout_provisioning._config import AgentConfig
from scout_provisioning._config import HostFacts
from scout_provisioning._manifest import Manifest
from scout_provisioning._resources import Reference
from scout_provisioning._templates import Templates


class Strategy(metaclass=ABCMeta):

    def __init__(self, config: AgentConfig):
        self._config = config

    def __repr__(self):
        return f'{self.__class__.__name__}()'

    @abstractmethod
    def declare(self, manifest: Manifest, facts: HostFacts, templates: Templates):
        pass


class RealtimeStrategy(Strategy):
    """The agent gem and the realtime extension gem, nothing else."""

    def declare(self, manifest, facts, templates):
        manifest.gem('scout', ensure=self._config.version or 'latest')
        realtime = self._config.realtime
        if realtime is not None:
            manifest.gem('scout_realtime', ensure=realtime.version or 'latest')


class GemCronStrategy(Strategy):
    """The agent gem run by cron, with what popular plugins need."""

    def declare(self, manifest, facts, templates):
        c = self._config
        scout = manifest.gem('scout', ensure=c.version or 'latest')
        manifest.cron(
            'scout_checkin',
            command=f'/usr/bin/scout {shlex.quote(c.agent_key)}',
            minute=f'*/{c.interval}',
            user=c.user,
            )
        # The checking-in user needs ~/.scout/scout_rsa.pub for private plugins.
        # See: https://scoutapp.com/info/creating_a_plugin#private_plugins
        scout_rsa_pub = templates.local_template('scout_rsa.pub')
        if scout_rsa_pub.exists():
            _logger.info("Private plugins: install %s", scout_rsa_pub)
            manifest.file(
                f'/home/{c.user}/.scout',
                alias='.scout',
                ensure='directory',
                owner=c.user,
                )
            manifest.file(
                f'/home/{c.user}/.scout/scout_rsa.pub',
                ensure='present',
                content=templates.render_local(scout_rsa_pub, config=c),
                require=Reference('file', '.scout'),
                owner=c.user,
                )
        else:
            _logger.debug("Private plugins: no %s", scout_rsa_pub)
        # Apache Status plugin calls "apache2ctl status", which requires lynx.
        manifest.package('lynx', ensure='installed', before=scout)
        # lynx leaves temporary directories behind.
        manifest.cron(
            'cleanup_lynx_tempfiles',
            command="find /tmp/ -name 'lynx*' -type d -delete",
            hour='0',
            minute='0',
            )
        # iostat and mpstat plugins.
        manifest.package('sysstat', ensure='installed', before=scout)
        # Log analyzing plugins read logs owned by the adm group.
        member = shlex.quote(c.group_member)
        manifest.exec(
            f'usermod -a -G adm {member}',
            unless=f"groups {member} | egrep '\\badm\\b'",
            before=scout,
            )
        # Rails monitoring plugin.
        manifest.gem('elif', before=scout)
        manifest.gem('request-log-analyzer', ensure='latest', before=scout)
        # The old scout_agent daemon must not run along with cron check-ins.
        init_script = manifest.file(
            '/etc/init.d/scout_agent',
            content=templates.render('scout_agent.init', config=c),
            mode='744',
            )
        manifest.service(
            'scout_agent',
            enable=False,
            ensure='stopped',
            require=init_script,
            )


class DaemonStrategy(Strategy):
    """The scoutd package from the Scout APT repository.

    Replaces a gem and cron setup if there was one.
    """

    def declare(self, manifest, facts, templates):
        c = self._config
        if facts.is_ubuntu_trusty:
            manifest.package(
                'software-properties-common',
                alias='python-software-properties',
                ensure='installed',
                )
        else:
            manifest.package('python-software-properties', ensure='installed')
        properties = Reference('package', 'python-software-properties')
        apt_key = manifest.exec(
            'add scout apt key',
            command=f'wget -q -O - {_archive_key_url} | sudo apt-key add -',
            unless=f"sudo apt-key list | grep '{_archive_key_uid}'",
            require=properties,
            )
        source_list = manifest.file(
            '/etc/apt/sources.list.d/scout.list',
            content=_apt_source,
            require=apt_key,
            )
        apt_update = manifest.exec(
            'scout apt-get update',
            command='sudo apt-get update',
            require=source_list,
            )
        install = manifest.exec(
            'install scoutd',
            command=f'env SCOUT_KEY={shlex.quote(c.agent_key)} apt-get -y install scoutd',
            unless="dpkg -l | grep 'ii  scoutd'",
            require=[source_list, apt_update],
            )
        manifest.gem('scout', ensure='purged')
        manifest.cron(
            'scout_checkin',
            command=f'/usr/bin/scout {shlex.quote(c.agent_key)}',
            ensure='absent',
            user=c.user,
            )
        # Private plugin keys and history from the gem setup.
        home = f'/home/{c.group_member}'
        manifest.exec(
            'copy scout config directory',
            command=' && '.join([
                f'sudo cp -r {home}/.scout/* /var/lib/scoutd/',
                'sudo chown -R scoutd:scoutd /var/lib/scoutd',
                ]),
            subscribe=install,
            require=install,
            refreshonly=True,
            )
        service = Reference('service', 'scout')
        manifest.file(
            '/etc/scout/scoutd.yml',
            content=templates.render('scoutd.yml', config=c),
            owner='scoutd',
            group='scoutd',
            mode='640',
            require=install,
            notify=service,
            )
        # A broken sudoers locks everyone out. Check a copy before activating.
        includedir = manifest.exec(
            'scoutd add sudoers includedir',
            command=' && '.join([
                'cp /etc/sudoers /tmp/sudoers',
                "echo '#includedir /etc/sudoers.d' >> /tmp/sudoers",
                'visudo -c -f /tmp/sudoers',
                'cp /tmp/sudoers /etc/sudoers',
                'rm -f /tmp/sudoers',
                ]),
            unless="grep '#includedir /etc/sudoers.d' /etc/sudoers",
            )
        manifest.file(
            '/etc/sudoers.d/scoutd',
            content=templates.render('scoutd.sudoers', config=c),
            owner='root',
            group='root',
            mode='440',
            require=[install, includedir],
            )
        manifest.service(
            'scout',
            ensure='running',
            enable=True,
            require=install,
            )


def select_strategy(config: AgentConfig) -> Strategy:
    """Choose how to install the agent; realtime wins over scoutd.

    >>> from scout_provisioning._config import RealtimeConfig
    >>> select_strategy(AgentConfig('key'))
    GemCronStrategy()
    >>> select_strategy(AgentConfig('key', scoutd=True))
    DaemonStrategy()
    >>> select_strategy(AgentConfig('key', scoutd=True, realtime=RealtimeConfig()))
    RealtimeStrategy()
    """
    if config.realtime is not None:
        return RealtimeStrategy(config)
    elif config.scoutd:
        return DaemonStrategy(config)
    else:
        return GemCronStrategy(config)


_archive_key_url = 'https://archive.scoutapp.com/scout-archive.key'
_archive_key_uid = 'Scout Packages (archive.scoutapp.com) <support@scoutapp.com>'
_apt_source = 'deb http://archive.scoutapp.com ubuntu main'

_logger = logging.getLogger(__name__)
