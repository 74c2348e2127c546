# Copyright 2018-present Network Optix, Inc. Licensed under MPL 2.0: www.mozilla.org/MPL/2.0/
from abc import ABCMeta
from typing import Any
from typing import Collection
from typing import Iterable
from typing import Mapping
from typing import Optional
from typing import Sequence
from typing import Union


class Reference:
    """Point at a resource by type and title or alias.

    >>> Reference('package', 'scout')
    Package['scout']
    >>> Reference('package', 'scout') == Reference('Package', 'scout')
    True
    """

    def __init__(self, type_name: str, title: str):
        self.type_name = type_name.lower()
        self.title = title

    def __repr__(self):
        return f'{self.type_name.capitalize()}[{self.title!r}]'

    def __eq__(self, other):
        if not isinstance(other, Reference):
            return NotImplemented
        return (self.type_name, self.title) == (other.type_name, other.title)

    def __hash__(self):
        return hash((self.type_name, self.title))


_Relation = Union[Reference, Sequence[Reference], None]


class ResourceRequest(metaclass=ABCMeta):
    """Desired state of one thing on a host.

    Only a declaration: the convergence engine compares it with the host
    and acts. Relations order this request against others.
    """

    type_name: str

    def __init__(
            self,
            title: str,
            parameters: Mapping[str, Any],
            *,
            alias: Optional[str] = None,
            before: _Relation = None,
            require: _Relation = None,
            notify: _Relation = None,
            subscribe: _Relation = None,
            ):
        self.title = title
        self.alias = alias
        self.parameters = {k: v for k, v in parameters.items() if v is not None}
        relations = {
            'before': before,
            'require': require,
            'notify': notify,
            'subscribe': subscribe,
            }
        self.relations = {}
        for name, value in relations.items():
            references = _as_references(value)
            if references:
                self.relations[name] = references

    def ref(self) -> Reference:
        return Reference(self.type_name, self.title)

    def names(self) -> Collection[str]:
        if self.alias is None:
            return [self.title]
        return [self.title, self.alias]

    def references(self) -> Iterable[Reference]:
        for references in self.relations.values():
            yield from references

    def __repr__(self):
        args = [repr(self.title)]
        if self.alias is not None:
            args.append(f'alias={self.alias!r}')
        args.extend(f'{k}={v!r}' for k, v in self.parameters.items())
        args.extend(f'{k}={v!r}' for k, v in self.relations.items())
        return f'{self.__class__.__name__}({", ".join(args)})'


def _as_references(value: _Relation) -> Sequence[Reference]:
    if value is None:
        return []
    if isinstance(value, Reference):
        return [value]
    return list(value)


class Package(ResourceRequest):
    """OS package.

    >>> Package('lynx', before=Reference('package', 'scout'))
    Package('lynx', ensure='installed', before=[Package['scout']])
    """

    type_name = 'package'

    def __init__(self, name: str, *, ensure: str = 'installed', provider: Optional[str] = None, **relations):
        super().__init__(name, {'ensure': ensure, 'provider': provider}, **relations)


class Gem(Package):
    """Ruby gem; a package installed by the gem provider.

    Shares the package namespace, so Package['scout'] refers to a gem
    named scout.

    >>> Gem('scout', ensure='purged').ref()
    Package['scout']
    """

    def __init__(self, name: str, *, ensure: str = 'installed', **relations):
        super().__init__(name, ensure=ensure, provider='gem', **relations)


class Cron(ResourceRequest):

    type_name = 'cron'

    def __init__(
            self,
            name: str,
            *,
            command: str,
            minute: Optional[str] = None,
            hour: Optional[str] = None,
            user: Optional[str] = None,
            ensure: Optional[str] = None,
            **relations,
            ):
        super().__init__(name, {
            'command': command,
            'ensure': ensure,
            'minute': minute,
            'hour': hour,
            'user': user,
            }, **relations)


class File(ResourceRequest):

    type_name = 'file'

    def __init__(
            self,
            path: str,
            *,
            ensure: Optional[str] = None,
            content: Optional[str] = None,
            owner: Optional[str] = None,
            group: Optional[str] = None,
            mode: Optional[str] = None,
            **relations,
            ):
        if not path.startswith('/'):
            raise ValueError(f"File path must be absolute, got {path!r}")
        super().__init__(path, {
            'ensure': ensure,
            'content': content,
            'owner': owner,
            'group': group,
            'mode': mode,
            }, **relations)


class Exec(ResourceRequest):
    """Shell command guarded by an idempotency predicate.

    The unless predicate is passed to the engine as is.

    >>> Exec('update', command='apt-get update').parameters['command']
    'apt-get update'
    >>> Exec('apt-get update').parameters['command']
    'apt-get update'
    """

    type_name = 'exec'
    default_path = '/usr/bin:/usr/sbin:/bin:/sbin'

    def __init__(
            self,
            title: str,
            *,
            command: Optional[str] = None,
            unless: Optional[str] = None,
            refreshonly: bool = False,
            **relations,
            ):
        super().__init__(title, {
            'command': command if command is not None else title,
            'unless': unless,
            'refreshonly': refreshonly or None,
            'path': self.default_path,
            }, **relations)


class Service(ResourceRequest):

    type_name = 'service'

    def __init__(
            self,
            name: str,
            *,
            ensure: Optional[str] = None,
            enable: Optional[bool] = None,
            **relations,
            ):
        super().__init__(name, {'ensure': ensure, 'enable': enable}, **relations)
