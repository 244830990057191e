# Copyright 2026 Kezie Iwueke
# SPDX-License-Identifier: Apache-2.0

# src/serversetup/bootstrap/precheck.py

from __future__ import annotations

import logging
import platform
import shutil
from typing import Optional, Sequence

from .models import ApplicationRequirement, DependencyReport

log = logging.getLogger("serversetup")


REQUIRED_APPLICATIONS: tuple[ApplicationRequirement, ...] = (
    ApplicationRequirement("ssh-keygen", "openssh-client"),
)

# os-release NAME -> install command template
INSTALL_HINTS = {
    "Debian GNU/Linux": "sudo apt install {package}",
    "Ubuntu": "sudo apt install {package}",
}


def local_os_name() -> Optional[str]:
    try:
        return platform.freedesktop_os_release().get("NAME")
    except OSError:
        return None


def is_application_available(requirement: ApplicationRequirement) -> bool:
    return shutil.which(requirement.application) is not None


def check_dependencies(
    requirements: Sequence[ApplicationRequirement] = REQUIRED_APPLICATIONS,
    *,
    os_name: Optional[str] = None,
) -> DependencyReport:
    """
    Check every required application and report all that are missing,
    not just the first one.

    os_name defaults to NAME from /etc/os-release; known distributions get
    an install command appended to each missing package line.
    """
    if os_name is None:
        os_name = local_os_name()
    hint = INSTALL_HINTS.get(os_name or "")

    missing = []
    lines = []
    for req in requirements:
        if is_application_available(req):
            log.debug("[precheck] %s found", req.application)
            continue
        log.debug("[precheck] %s not found on PATH", req.application)
        missing.append(req)
        lines.append(f"{req.package} need to be installed")
        if hint:
            lines.append(hint.format(package=req.package))

    report = DependencyReport(missing=tuple(missing), message="\n".join(lines))
    if not report.ok:
        log.error("[precheck] missing dependencies:\n%s", report.message)
    return report
