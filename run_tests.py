# Copyright 2018-present Network Optix, Inc. Licensed under MPL 2.0: www.mozilla.org/MPL/2.0/
import fnmatch
import importlib
import logging
import os
import sys
import unittest
from pathlib import Path
from pathlib import PurePath


def main():
    suite = unittest.TestSuite()
    for python_file in _walk('test_*.py'):
        module_name = _build_module_name(python_file)
        _logger.debug("Import: %s", module_name)
        module = importlib.import_module(module_name)
        scope = unittest.defaultTestLoader.loadTestsFromModule(module)
        if scope.countTestCases() > 0:
            _logger.debug("Will run: %r", module)
            suite.addTests(scope)
        else:
            _logger.debug("Skip empty: %r", module)
    if os.getenv('DRY_RUN'):
        _logger.info("Dry run: would run %d tests", suite.countTestCases())
        return 0
    runner = unittest.TextTestRunner(stream=sys.stdout, verbosity=2)
    result = runner.run(suite)
    if result.wasSuccessful():
        return 0
    else:
        return 10


def _walk(pattern: str):
    result = []
    stack = [_root / 'scout_provisioning']
    while stack:
        f = stack.pop()
        if f.name.startswith('.') or f.name == '__pycache__':
            _logger.debug("Skip: %s", f)
        elif f.is_dir():
            stack.extend(f.iterdir())
        elif fnmatch.fnmatch(f.name, pattern):
            _logger.debug("Collect: %s", f)
            result.append(f)
    return sorted(result)


def _build_module_name(path: PurePath):
    """Build module name from path.

    >>> _build_module_name(_root / 'scout_provisioning/tests/test_setup.py')
    'scout_provisioning.tests.test_setup'
    """
    path = path.relative_to(_root)
    path = path.with_suffix('')
    return '.'.join(path.parts)


_root = Path(__file__).parent
_logger = logging.getLogger(__name__)

if __name__ == '__main__':
    logging.basicConfig(level=logging.INFO)
    sys.exit(main())
