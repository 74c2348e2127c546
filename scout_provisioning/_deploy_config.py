# Copyright 2018-present Network Optix, Inc. Licensed under MPL 2.0: www.mozilla.org/MPL/2.0/
import logging
from pathlib import Path
from typing import Any
from typing import Collection
from typing import Mapping
from typing import Optional

import yaml


def read_deploy_configuration(*paths: Path) -> Mapping[str, Any]:
    """Read and merge deploy configuration files.

    Later files override earlier ones, nested mappings are merged.
    A stage file may thus override a single key of the scout section.
    Missing files are skipped.
    """
    config = {}
    for path in paths:
        if not path.exists():
            _logger.debug("Config %s: skip, does not exist", path)
            continue
        try:
            raw = yaml.safe_load(path.read_text(encoding='utf-8'))
        except yaml.YAMLError as e:
            raise DeployConfigError(f"Config {path}: cannot parse: {e}")
        if raw is None:
            _logger.info("Config %s: empty", path)
            continue
        if not isinstance(raw, Mapping):
            raise DeployConfigError(f"Config {path}: top level must be a mapping, got {type(raw).__name__}")
        _logger.info("Config %s: read", path)
        config = _merge(config, normalize_keys(raw))
    return config


def deploy_configuration_paths(app_root: Path, stage: Optional[str] = None) -> Collection[Path]:
    """List files with settings of a deploy, most generic first.

    >>> [str(p) for p in deploy_configuration_paths(Path('app'), 'staging')]
    ['app/config/moonshine.yml', 'app/config/moonshine/staging.yml']
    >>> [str(p) for p in deploy_configuration_paths(Path('app'))]
    ['app/config/moonshine.yml']
    """
    paths = [app_root / 'config' / 'moonshine.yml']
    if stage:
        paths.append(app_root / 'config' / 'moonshine' / f'{stage}.yml')
    return paths


def normalize_keys(value):
    """Turn symbol-like keys into plain ones.

    Ruby-flavored YAML writes keys as symbols: ":scout:" is read as ":scout".

    >>> normalize_keys({':scout': {':agent_key': 'abc', 'interval': 5}})
    {'scout': {'agent_key': 'abc', 'interval': 5}}
    >>> normalize_keys([{':a': 1}])
    [{'a': 1}]
    """
    if isinstance(value, Mapping):
        return {_normalize_key(k): normalize_keys(v) for k, v in value.items()}
    if isinstance(value, list):
        return [normalize_keys(v) for v in value]
    return value


def _normalize_key(key):
    if isinstance(key, str) and key.startswith(':'):
        return key[1:]
    return key


def _merge(base: Mapping[str, Any], override: Mapping[str, Any]) -> Mapping[str, Any]:
    """Merge override into base recursively.

    >>> _merge({'scout': {'agent_key': 'a', 'interval': 1}}, {'scout': {'interval': 5}})
    {'scout': {'agent_key': 'a', 'interval': 5}}
    >>> _merge({'scout': {'agent_key': 'a'}}, {'scout': None})
    {'scout': None}
    """
    result = dict(base)
    for key, value in override.items():
        if isinstance(value, Mapping) and isinstance(result.get(key), Mapping):
            result[key] = _merge(result[key], value)
        else:
            result[key] = value
    return result


class DeployConfigError(Exception):
    pass


_logger = logging.getLogger(__name__)
