"""Software and host details recorded with every run."""

from __future__ import annotations

import importlib.metadata
import os
import platform
import subprocess
from pathlib import Path
from typing import Any

from smval.utils.parallel import resolve_workers

DEFAULT_PACKAGES = ["numpy", "scipy", "pandas", "pyarrow", "openpyxl", "matplotlib", "PyYAML"]


def package_version() -> str:
    try:
        return importlib.metadata.version("smval")
    except importlib.metadata.PackageNotFoundError:
        return "0.0.0+local"


def git_commit_hash(cwd: str | Path) -> str | None:
    try:
        return subprocess.check_output(
            ["git", "rev-parse", "HEAD"],
            cwd=str(cwd),
            stderr=subprocess.DEVNULL,
            text=True,
        ).strip()
    except (OSError, subprocess.CalledProcessError):
        return None


def package_versions(packages: list[str] | None = None) -> dict[str, str]:
    out: dict[str, str] = {}
    for name in packages or DEFAULT_PACKAGES:
        try:
            out[name] = importlib.metadata.version(name)
        except importlib.metadata.PackageNotFoundError:
            out[name] = "not-installed"
    out["smval"] = package_version()
    return out


def run_environment(workers: int | None) -> dict[str, Any]:
    """Interpreter, host and the worker count the location map actually used."""

    return {
        "python": platform.python_version(),
        "platform": platform.platform(),
        "cpu_count": os.cpu_count(),
        "workers": resolve_workers(workers),
        "packages": package_versions(),
    }


def invocation_string(argv: list[str]) -> str:
    return " ".join(argv)
