# Copyright 2026 Kezie Iwueke
# SPDX-License-Identifier: Apache-2.0

# src/serversetup/config/loader.py

import copy
import json
import logging
import os
import re
from collections.abc import Mapping
from pathlib import Path

import yaml
from pydantic import ValidationError as PydanticValidationError

from serversetup.bootstrap.models import HostCredential
from serversetup.errors import InvalidField, MissingRequiredField, ValidationError
from .defaults import EXAMPLE_SETTINGS
from .models import Settings

log = logging.getLogger("serversetup")


# port_for_ssh: 022 is octal 18 to a YAML 1.1 parser
_LEADING_ZERO_PORT = re.compile(r"^\s*port_for_ssh\s*:\s*[+-]?0[0-9_]+\s*(#.*)?$", re.MULTILINE)


def _load_document(path: Path) -> dict:
    """
    Load a settings file, expanding ${ENV_VAR} references.

    .json files go through the json module (tab indentation and all);
    anything else is YAML.
    """
    raw = path.read_text()
    expanded = os.path.expandvars(raw)
    if path.suffix.lower() == ".json":
        return json.loads(expanded) or {}
    if _LEADING_ZERO_PORT.search(expanded):
        raise InvalidField(
            "server.port_for_ssh",
            "leading zeros are not allowed (YAML would read the port as octal)",
        )
    return yaml.safe_load(expanded) or {}


def ensure_settings_file(path: str | Path) -> bool:
    """
    Return True if the settings file already exists.

    Otherwise write the example settings document at *path* and return False,
    so the caller can ask the operator to fill it in.
    """
    path = Path(path)
    if path.is_file():
        return True
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(json.dumps(EXAMPLE_SETTINGS, indent=4) + "\n")
    log.warning("No settings file at %s, wrote an example one. Edit it and run again.", path)
    return False


def load_settings(source: str | Path | Mapping) -> Settings:
    """
    Parse a settings document into the typed Settings model.

    *source* is a path to a JSON/YAML file or an already parsed mapping.
    Malformed values raise InvalidField naming the dotted field path.
    """
    if isinstance(source, Mapping):
        data = copy.deepcopy(dict(source))
    else:
        path = Path(source)
        log.debug("Loading settings from %s", path)
        try:
            data = _load_document(path)
        except OSError as e:
            raise InvalidField(str(path), f"cannot read settings file: {e}") from e
        except (yaml.YAMLError, json.JSONDecodeError) as e:
            raise InvalidField(str(path), f"not a valid settings document: {e}") from e

    if not isinstance(data, dict):
        raise InvalidField("<root>", "settings document must be a mapping")

    try:
        return Settings.model_validate(data)
    except PydanticValidationError as e:
        err = e.errors()[0]
        field = ".".join(str(p) for p in err["loc"])
        raise InvalidField(field, err["msg"]) from e


def to_credential(settings: Settings) -> HostCredential:
    if settings.server.host is None:
        raise MissingRequiredField("server.host")
    if settings.server.port_for_ssh is None:
        raise MissingRequiredField("server.port_for_ssh")

    return HostCredential(
        host=settings.server.host,
        ssh_port=settings.server.port_for_ssh,
        root_password=settings.root.password or "",
        admin_user_name=settings.super_user.name or "",
        admin_user_password=settings.super_user.password or "",
    )


def load_and_validate(source: str | Path | Mapping) -> HostCredential:
    """
    Load the settings document and build the HostCredential.

    Only presence of server.host and server.port_for_ssh is enforced;
    passwords and the admin user name may be empty.
    """
    try:
        cred = to_credential(load_settings(source))
    except ValidationError as e:
        log.error("[config] %s", e)
        raise
    log.debug("[config] target %s:%d", cred.host, cred.ssh_port)
    return cred
