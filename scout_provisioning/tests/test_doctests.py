# Copyright 2018-present Network Optix, Inc. Licensed under MPL 2.0: www.mozilla.org/MPL/2.0/
import doctest
import importlib
import logging
import unittest

_modules_with_examples = [
    'scout_provisioning._config',
    'scout_provisioning._deploy_config',
    'scout_provisioning._manifest',
    'scout_provisioning._puppet',
    'scout_provisioning._resources',
    'scout_provisioning._strategies',
    'scout_provisioning.__main__',
    ]


class Doctests(unittest.TestCase):

    def test_examples(self):
        for module_name in _modules_with_examples:
            with self.subTest(module=module_name):
                module = importlib.import_module(module_name)
                result = doctest.testmod(module)
                self.assertGreater(result.attempted, 0)
                self.assertEqual(result.failed, 0)


if __name__ == '__main__':
    logging.basicConfig(
        level=logging.DEBUG,
        format="%(asctime)s %(levelname)7s %(name)s %(message).5000s",
        )
    unittest.main()
