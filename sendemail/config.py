# Copyright The Koukan Authors
# SPDX-License-Identifier: Apache-2.0
from typing import Any, Dict, Optional
import logging
import logging.config

import yaml

class ConfigError(Exception):
    pass

# keys accepted under smtp:
SMTP_KEYS = ['host', 'port', 'username', 'password', 'disable_ssl',
             'timeout', 'ehlo']

class Config:
    root_yaml : dict
    smtp_yaml : dict

    def __init__(self, root_yaml : Optional[dict] = None):
        if root_yaml is None:
            root_yaml = {}
        if not isinstance(root_yaml, dict):
            raise ConfigError('config root must be a mapping')
        self.root_yaml = root_yaml
        self.smtp_yaml = root_yaml.get('smtp', None) or {}
        if not isinstance(self.smtp_yaml, dict):
            raise ConfigError('config smtp: must be a mapping')
        for k in self.smtp_yaml:
            if k not in SMTP_KEYS:
                raise ConfigError('unknown key in config smtp: %s' % k)

    @staticmethod
    def load(path : str) -> "Config":
        logging.debug('Config.load %s', path)
        with open(path, 'r') as yaml_file:
            return Config(yaml.load(yaml_file, Loader=yaml.CLoader))

    def smtp(self, key : str, default : Any = None) -> Any:
        assert key in SMTP_KEYS
        return self.smtp_yaml.get(key, default)

    def logging_yaml(self) -> Optional[Dict[str, Any]]:
        return self.root_yaml.get('logging', None)

    # -> True if the config carried a logging: section
    def configure_logging(self) -> bool:
        if not (logging_yaml := self.logging_yaml()):
            return False
        logging.config.dictConfig(logging_yaml)
        return True
