# ==============================================================================
#  Copyright 2025 Matthew Pounsett <matt@conundrum.com>
#
#  Licensed under the Apache License, Version 2.0 (the "License");
#  you may not use this file except in compliance with the License.
#  You may obtain a copy of the License at
#
#     http://www.apache.org/licenses/LICENSE-2.0
#
#  Unless required by applicable law or agreed to in writing, software
#  distributed under the License is distributed on an "AS IS" BASIS,
#  WITHOUT WARRANTIES OR CONDITIONS OF ANY KIND, either express or implied.
#  See the License for the specific language governing permissions and
#  limitations under the License.
# ==============================================================================
"""Scraper configuration, optionally loaded from a YAML file."""

from pathlib import Path

import yaml
from pydantic import BaseModel, ValidationError

DEFAULT_BASE_URL = "https://www.magpiehq.com/developer-challenge/smartphones"
DEFAULT_OUTPUT = "output.json"
DEFAULT_USER_AGENT = (
    "Mozilla/5.0 (Macintosh; Intel Mac OS X 10_15_7) "
    "AppleWebKit/537.36 (KHTML, like Gecko) "
    "Chrome/120.0.0.0 Safari/537.36"
)


class ConfigError(Exception):
    """Raised when a configuration file cannot be used."""


class ScraperConfig(BaseModel):
    """Settings for one scraper run."""

    base_url: str = DEFAULT_BASE_URL
    output: str = DEFAULT_OUTPUT
    timeout: float = 30.0
    user_agent: str = DEFAULT_USER_AGENT


def load_config(path: str | Path) -> ScraperConfig:
    """Load scraper settings from a YAML mapping.

    Keys not present in the file keep their defaults.

    Raises:
        ConfigError: If the file is missing, is not valid YAML, or holds
            invalid values.
    """
    path = Path(path)
    try:
        with open(path, encoding="utf-8") as f:
            data = yaml.safe_load(f)
    except OSError as e:
        raise ConfigError(f"Cannot read config file {path}: {e}") from e
    except yaml.YAMLError as e:
        raise ConfigError(f"Invalid YAML in config file {path}: {e}") from e

    if data is None:
        data = {}
    if not isinstance(data, dict):
        raise ConfigError(f"Config file {path} must contain a mapping")

    try:
        return ScraperConfig(**data)
    except ValidationError as e:
        raise ConfigError(f"Invalid config file {path}: {e}") from e
