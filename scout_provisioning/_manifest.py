# Copyright 2018-present Network Optix, Inc. Licensed under MPL 2.0: www.mozilla.org/MPL/2.0/
import logging
from typing import Dict
from typing import Iterator
from typing import List
from typing import Tuple

from scout_provisioning._resources import Cron
from scout_provisioning._resources import Exec
from scout_provisioning._resources import File
from scout_provisioning._resources import Gem
from scout_provisioning._resources import Package
from scout_provisioning._resources import Reference
from scout_provisioning._resources import ResourceRequest
from scout_provisioning._resources import Service


class Manifest:
    """Ordered collection of resource declarations.

    Declaration methods return a reference to use in relations of
    subsequent declarations. Relations may point forward: they are only
    checked by verify().

    >>> m = Manifest()
    >>> scout = m.gem('scout', ensure='latest')
    >>> m.package('lynx', before=scout)
    Package['lynx']
    >>> m.verify()
    >>> [r.title for r in m]
    ['scout', 'lynx']
    """

    def __init__(self):
        self._resources: List[ResourceRequest] = []
        self._by_name: Dict[Tuple[str, str], ResourceRequest] = {}

    def __repr__(self):
        return f'<{self.__class__.__name__} with {len(self._resources)} resources>'

    def __iter__(self) -> Iterator[ResourceRequest]:
        return iter(self._resources)

    def __len__(self):
        return len(self._resources)

    def declare(self, resource: ResourceRequest) -> Reference:
        for name in resource.names():
            key = (resource.type_name, name)
            if key in self._by_name:
                raise DuplicateResource(f"{Reference(*key)!r} is already declared as {self._by_name[key]!r}")
        for name in resource.names():
            self._by_name[(resource.type_name, name)] = resource
        self._resources.append(resource)
        _logger.debug("Declare %r", resource)
        return resource.ref()

    def package(self, name, **kwargs) -> Reference:
        return self.declare(Package(name, **kwargs))

    def gem(self, name, **kwargs) -> Reference:
        return self.declare(Gem(name, **kwargs))

    def cron(self, name, **kwargs) -> Reference:
        return self.declare(Cron(name, **kwargs))

    def file(self, path, **kwargs) -> Reference:
        return self.declare(File(path, **kwargs))

    def exec(self, title, **kwargs) -> Reference:
        return self.declare(Exec(title, **kwargs))

    def service(self, name, **kwargs) -> Reference:
        return self.declare(Service(name, **kwargs))

    def find(self, reference: Reference) -> ResourceRequest:
        try:
            return self._by_name[(reference.type_name, reference.title)]
        except KeyError:
            raise UnresolvedReference(f"{reference!r} is not declared")

    def verify(self):
        for resource in self._resources:
            for reference in resource.references():
                try:
                    self.find(reference)
                except UnresolvedReference:
                    raise UnresolvedReference(f"{resource!r} refers to undeclared {reference!r}")


class DuplicateResource(Exception):
    pass


class UnresolvedReference(Exception):
    pass


_logger = logging.getLogger(__name__)
