# Copyright 2018-present Network Optix, Inc. Licensed under MPL 2.0: www.mozilla.org/MPL/2.0/
import logging
from typing import Iterable

from scout_provisioning._core import Command
from scout_provisioning._resources import Reference
from scout_provisioning._resources import ResourceRequest
from scout_provisioning._ssh import ssh_still


def render_manifest(resources: Iterable[ResourceRequest]) -> str:
    """Write resources in the Puppet language, in declaration order.

    >>> from scout_provisioning._resources import Exec
    >>> from scout_provisioning._resources import Gem
    >>> print(render_manifest([
    ...     Gem('scout', ensure='latest'),
    ...     Exec('usermod -a -G adm rails', unless="groups rails | egrep '\\\\badm\\\\b'", before=Reference('package', 'scout')),
    ...     ]), end='')
    package { 'scout':
      ensure => 'latest',
      provider => 'gem',
    }
    <BLANKLINE>
    exec { 'usermod -a -G adm rails':
      command => 'usermod -a -G adm rails',
      unless => 'groups rails | egrep \\'\\\\badm\\\\b\\'',
      path => '/usr/bin:/usr/sbin:/bin:/sbin',
      before => Package['scout'],
    }
    """
    return '\n'.join(_render_resource(r) for r in resources)


def _render_resource(resource: ResourceRequest) -> str:
    attributes = []
    if resource.alias is not None:
        attributes.append(('alias', resource.alias))
    attributes.extend(resource.parameters.items())
    for name, references in resource.relations.items():
        attributes.append((name, references[0] if len(references) == 1 else references))
    lines = [f'{resource.type_name} {{ {_value(resource.title)}:']
    for name, value in attributes:
        lines.append(f'  {name} => {_value(value)},')
    lines.append('}')
    return '\n'.join(lines) + '\n'


def _value(value) -> str:
    """Render a literal.

    >>> print(_value("it's"))
    'it\\'s'
    >>> print(_value(False), _value(640), _value([Reference('exec', 'a'), Reference('file', '/b')]))
    false 640 [Exec['a'], File['/b']]
    """
    if isinstance(value, bool):
        return 'true' if value else 'false'
    if isinstance(value, int):
        return str(value)
    if isinstance(value, Reference):
        return f'{value.type_name.capitalize()}[{_quote(value.title)}]'
    if isinstance(value, (list, tuple)):
        return '[' + ', '.join(_value(v) for v in value) + ']'
    return _quote(str(value))


def _quote(text: str) -> str:
    return "'" + text.replace('\\', '\\\\').replace("'", "\\'") + "'"


class ApplyManifest(Command):
    """Hand a manifest to Puppet on the host.

    Puppet makes it idempotent: a second run reports no changes.
    """

    def __init__(self, manifest_text: str):
        self._manifest_text = manifest_text

    def __repr__(self):
        return f'<{ApplyManifest.__name__} of {len(self._manifest_text.splitlines())} lines>'

    def run(self, host):
        _logger.info("%s: puppet apply", host)
        r = ssh_still(
            host,
            'sudo puppet apply --detailed-exitcodes /dev/stdin',
            stdin=self._manifest_text.encode('utf8'),
            )
        check_puppet_exit_code(host, r.returncode, r.stderr)


def check_puppet_exit_code(host: str, returncode: int, stderr: bytes):
    """Interpret exit codes of "puppet apply --detailed-exitcodes".

    >>> check_puppet_exit_code('h', 0, b'')
    >>> check_puppet_exit_code('h', 2, b'')
    >>> check_puppet_exit_code('h', 6, b'Error: x') # doctest: +IGNORE_EXCEPTION_DETAIL
    Traceback (most recent call last):
    ...
    PuppetApplyFailed: h: exit code 6: Error: x
    """
    if returncode == 0:
        _logger.info("%s: no changes", host)
    elif returncode == 2:
        _logger.info("%s: changes applied", host)
    else:
        _logger.error("%s: failure: %s", host, stderr)
        raise PuppetApplyFailed(f"{host}: exit code {returncode}: {stderr.decode(errors='replace')}")


class PuppetApplyFailed(Exception):
    pass


_logger = logging.getLogger(__name__)
