# Copyright 2018-present Network Optix, Inc. Licensed under MPL 2.0: www.mozilla.org/MPL/2.0/
import logging
import shutil
import tempfile
import unittest
from pathlib import Path

import yaml
from jinja2 import UndefinedError

from scout_provisioning import AgentConfig
from scout_provisioning import Templates


class BundledTemplates(unittest.TestCase):

    def setUp(self):
        self._app_root = Path(tempfile.mkdtemp(prefix='scout_app_'))
        self.addCleanup(shutil.rmtree, self._app_root)
        self._templates = Templates(self._app_root)

    def test_scoutd_yml_minimal(self):
        text = self._templates.render('scoutd.yml', config=AgentConfig('key'))
        self.assertEqual(text.splitlines()[1:], [
            'account_key: "key"',
            'log_file: /var/log/scout/scoutd.log',
            'agent_data_file: /var/lib/scoutd/client_history.yaml',
            ])

    def test_scoutd_yml_full(self):
        config = AgentConfig(
            'key',
            hostname='web1',
            display_name='Web 1',
            environment='staging',
            roles=('app',),
            http_proxy='http://proxy:3128',
            https_proxy='http://proxy:3129',
            )
        parsed = yaml.safe_load(self._templates.render('scoutd.yml', config=config))
        self.assertEqual(parsed, {
            'account_key': 'key',
            'hostname': 'web1',
            'display_name': 'Web 1',
            'environment': 'staging',
            'roles': 'app',
            'http_proxy': 'http://proxy:3128',
            'https_proxy': 'http://proxy:3129',
            'log_file': '/var/log/scout/scoutd.log',
            'agent_data_file': '/var/lib/scoutd/client_history.yaml',
            })

    def test_scoutd_yml_special_characters(self):
        config = AgentConfig(
            'key: #1',
            display_name="Bob's <web> & db # main",
            http_proxy='http://user:p@ss@proxy:3128/#x',
            roles=('app: web', 'db'),
            )
        parsed = yaml.safe_load(self._templates.render('scoutd.yml', config=config))
        self.assertEqual(parsed['account_key'], 'key: #1')
        self.assertEqual(parsed['display_name'], "Bob's <web> & db # main")
        self.assertEqual(parsed['http_proxy'], 'http://user:p@ss@proxy:3128/#x')
        self.assertEqual(parsed['roles'], 'app: web,db')

    def test_sudoers(self):
        config = AgentConfig('key', sudo_commands=('/usr/sbin/iotop',))
        text = self._templates.render('scoutd.sudoers', config=config)
        rules = [line for line in text.splitlines() if not line.startswith('#')]
        self.assertEqual(rules, ['scoutd ALL=(root) NOPASSWD: /usr/sbin/iotop'])

    def test_local_template_missing_variable(self):
        path = self._templates.local_template('scout_rsa.pub')
        self.assertEqual(path, self._app_root / 'app/manifests/templates/scout_rsa.pub')
        path.parent.mkdir(parents=True)
        path.write_text('ssh-rsa AAAA {{ unknown }}\n')
        with self.assertRaises(UndefinedError):
            self._templates.render_local(path, config=AgentConfig('key'))


if __name__ == '__main__':
    logging.basicConfig(
        level=logging.DEBUG,
        format="%(asctime)s %(levelname)7s %(name)s %(message).5000s",
        )
    unittest.main()
