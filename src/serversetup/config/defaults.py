# Copyright 2026 Kezie Iwueke
# SPDX-License-Identifier: Apache-2.0

from __future__ import annotations

import os
from pathlib import Path


SETTINGS_ENV_VAR = "SERVERSETUP_SETTINGS"
DEFAULT_SETTINGS_PATH = Path("conf") / "settings.json"

# Written out when no settings file exists yet. Host and port stay
# unset so validation fails until the operator fills them in.
EXAMPLE_SETTINGS: dict = {
    "server": {
        "host": None,
        "port_for_ssh": None,
    },
    "root": {
        "password": "",
    },
    "super_user": {
        "name": "",
        "password": "",
    },
}


def default_settings_path() -> Path:
    env = os.environ.get(SETTINGS_ENV_VAR)
    if env:
        return Path(env)
    return DEFAULT_SETTINGS_PATH
