# Copyright 2018-present Network Optix, Inc. Licensed under MPL 2.0: www.mozilla.org/MPL/2.0/
import logging
import unittest

from scout_provisioning import AgentConfig
from scout_provisioning import InvalidAgentConfig
from scout_provisioning import RealtimeConfig


class AgentConfigFromOptions(unittest.TestCase):

    def test_defaults(self):
        config = AgentConfig.from_options({}, {})
        self.assertIsNone(config.agent_key)
        self.assertEqual(config.user, 'daemon')
        self.assertEqual(config.interval, 1)
        self.assertIsNone(config.realtime)
        self.assertFalse(config.scoutd)
        self.assertIsNone(config.version)
        self.assertEqual(config.group_member, 'daemon')

    def test_inline_options_win(self):
        configuration = {'user': 'rails', 'scout': {'agent_key': 'from-file', 'interval': 10}}
        config = AgentConfig.from_options({'agent_key': 'inline', 'user': 'scout'}, configuration)
        self.assertEqual(config.agent_key, 'inline')
        self.assertEqual(config.user, 'scout')
        self.assertEqual(config.deploy_user, 'rails')
        self.assertEqual(config.group_member, 'rails')
        self.assertEqual(config.interval, 10)

    def test_false_falls_through(self):
        config = AgentConfig.from_options({'scoutd': False}, {'scout': {'agent_key': 'k', 'scoutd': True}})
        self.assertTrue(config.scoutd)

    def test_scoutd_spelled_as_string(self):
        for value, expected in [('false', False), ('no', False), ('true', True), ('ON', True)]:
            with self.subTest(value=value):
                config = AgentConfig.from_options({'agent_key': 'k', 'scoutd': value}, {})
                self.assertIs(config.scoutd, expected)

    def test_scoutd_not_a_flag(self):
        for value in ['sometimes', 2, ['true']]:
            with self.subTest(value=value):
                with self.assertRaises(InvalidAgentConfig):
                    AgentConfig.from_options({'agent_key': 'k', 'scoutd': value}, {})

    def test_realtime_forms(self):
        for value, expected in [
                (True, RealtimeConfig()),
                ('0.5.2', RealtimeConfig('0.5.2')),
                ({'version': '1.0'}, RealtimeConfig('1.0')),
                (False, None),
                (None, None),
                ]:
            with self.subTest(value=value):
                config = AgentConfig.from_options({'agent_key': 'k', 'realtime': value}, {})
                self.assertEqual(config.realtime, expected)

    def test_roles(self):
        config = AgentConfig.from_options({'agent_key': 'k', 'roles': 'app, db'}, {})
        self.assertEqual(config.roles, ('app', 'db'))

    def test_environment_from_rails_env(self):
        config = AgentConfig.from_options({'agent_key': 'k'}, {'rails_env': 'production'})
        self.assertEqual(config.environment, 'production')

    def test_invalid_interval(self):
        for value in ['often', 0, -5, True, 1.5]:
            with self.subTest(value=value):
                with self.assertRaises(InvalidAgentConfig):
                    AgentConfig.from_options({'agent_key': 'k', 'interval': value}, {})

    def test_invalid_scout_section(self):
        with self.assertRaises(InvalidAgentConfig):
            AgentConfig.from_options({'agent_key': 'k'}, {'scout': 'abc'})

    def test_direct_construction_checked(self):
        with self.assertRaises(ValueError):
            AgentConfig('key', interval=0)


class WithoutAgentKey(unittest.TestCase):

    def test_invalid_options_not_read(self):
        for options, configuration in [
                ({}, {'scout': {'interval': 'often'}}),
                ({'interval': 0}, {'user': 'rails'}),
                ({}, {'scout': 'disabled'}),
                ({'realtime': ['x'], 'scoutd': 'maybe'}, {}),
                ]:
            with self.subTest(options=options, configuration=configuration):
                config = AgentConfig.from_options(options, configuration)
                self.assertIsNone(config.agent_key)
                self.assertEqual(config.interval, 1)
                self.assertIsNone(config.realtime)
                self.assertFalse(config.scoutd)

    def test_user_still_resolved(self):
        config = AgentConfig.from_options({}, {'user': 'rails', 'scout': {'interval': 'often'}})
        self.assertEqual(config.user, 'rails')

    def test_empty_key(self):
        config = AgentConfig.from_options({'agent_key': '', 'interval': 'often'}, {})
        self.assertIsNone(config.agent_key)


if __name__ == '__main__':
    logging.basicConfig(
        level=logging.DEBUG,
        format="%(asctime)s %(levelname)7s %(name)s %(message).5000s",
        )
    unittest.main()
