# -*- coding: utf-8 -*-
"""
Opens generated files with the operating system's default viewer.
"""

import logging
import os
import subprocess
import sys
from pathlib import Path

from langschool import config
from langschool.errors import NotFound, ValidationError


def _command(path):
    if sys.platform == "darwin":
        return ["open", str(path)]
    if sys.platform.startswith("win"):
        return ["cmd", "/c", "start", "", str(path)]
    return ["xdg-open", str(path)]


def open_file(path, allowed_base=None):
    """Opens ``path`` if it lies under ``allowed_base`` (the app base dir by default)."""
    base = Path(allowed_base or config.BASE_DIR).resolve()
    target = Path(path).resolve()
    if target != base and base not in target.parents:
        raise ValidationError(f"refusing to open a file outside {base}")
    if not target.exists():
        raise NotFound("File", str(target))

    logging.info(f"Opening {target}")
    subprocess.Popen(_command(target), stdout=subprocess.DEVNULL, stderr=subprocess.DEVNULL,
                     close_fds=os.name != "nt")
    return str(target)
