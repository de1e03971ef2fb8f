"""Package name rules.

Validation follows the npm registry rules for new packages, because the
generated project is published as an npm package.  The module also holds the
string normalisation used to turn names into directory names and the
recommendation of a default name for the name prompt.
"""

from __future__ import annotations

import getpass
import os
import re
from dataclasses import dataclass, field
from pathlib import Path
from typing import TYPE_CHECKING
from urllib.parse import quote

if TYPE_CHECKING:
    from create_thing.models import Settings


MAX_NAME_LENGTH = 214

BLACKLISTED_NAMES = frozenset({"node_modules", "favicon.ico"})

NODE_CORE_MODULES = frozenset({
    "assert", "async_hooks", "buffer", "child_process", "cluster", "console",
    "constants", "crypto", "dgram", "diagnostics_channel", "dns", "domain",
    "events", "fs", "http", "http2", "https", "inspector", "module", "net",
    "os", "path", "perf_hooks", "process", "punycode", "querystring",
    "readline", "repl", "stream", "string_decoder", "sys", "timers", "tls",
    "trace_events", "tty", "url", "util", "v8", "vm", "wasi",
    "worker_threads", "zlib",
})

# Names that are technically valid but almost never what the user wants
# when we guess a default from the surroundings.
UNSUITABLE_DEFAULT_NAMES = frozenset({
    "home", "root", "user", "users", "www", "public", "admin", "api", "dev",
    "test", "staging", "prod", "documents", "project", ".", "-",
})

DEFAULT_NAME_PREFIXES = ("fancy", "cool", "flamboyant", "classy", "flashy", "posh")

_SCOPED_NAME = re.compile(r"^(?:@([^/]+?)/)?([^/]+?)$")
_SPECIAL_CHARACTERS = re.compile(r"[~'!()*]")


@dataclass
class NameValidation:
    """Outcome of :func:`validate_package_name`."""

    errors: list[str] = field(default_factory=list)
    warnings: list[str] = field(default_factory=list)

    @property
    def valid_for_new_packages(self) -> bool:
        return not self.errors and not self.warnings

    @property
    def problems(self) -> list[str]:
        return [*self.errors, *self.warnings]


def _url_friendly(value: str) -> bool:
    return quote(value, safe="!~*'()") == value


def validate_package_name(name: str) -> NameValidation:
    """Check *name* against the npm rules for new package names."""
    result = NameValidation()

    if not name:
        result.errors.append("name length must be greater than zero")
        return result
    if name.startswith("."):
        result.errors.append("name cannot start with a period")
    if name.startswith("_"):
        result.errors.append("name cannot start with an underscore")
    if name.strip() != name:
        result.errors.append("name cannot contain leading or trailing spaces")
    if name.lower() in BLACKLISTED_NAMES:
        result.errors.append(f"{name} is a blacklisted name")

    if name.lower() in NODE_CORE_MODULES:
        result.warnings.append(f"{name} is a core module name")
    if len(name) > MAX_NAME_LENGTH:
        result.warnings.append(f"name can no longer contain more than {MAX_NAME_LENGTH} characters")
    if name.lower() != name:
        result.warnings.append("name can no longer contain capital letters")
    if _SPECIAL_CHARACTERS.search(name.split("/")[-1]):
        result.warnings.append("name can no longer contain special characters (\"~'!()*\")")

    if not _url_friendly(name):
        match = _SCOPED_NAME.match(name)
        scoped_ok = bool(
            match
            and match.group(1)
            and _url_friendly(match.group(1))
            and _url_friendly(match.group(2))
        )
        if not scoped_ok:
            result.errors.append("name can only contain URL-friendly characters")

    return result


def is_valid_package_name(name: str) -> bool:
    return validate_package_name(name).valid_for_new_packages


def normalize_string(value: str) -> str:
    """Turn a package name or directory name into a plain directory-style name.

    Examples::

        normalize_string("My_Package.js") -> "my-package-js"
        normalize_string("@scope/thing")  -> "thing"
        normalize_string("pkg@1.0.0")     -> "pkg"
    """
    normalized = re.sub(r"[-_.:]", "-", value.lower()).strip()
    return normalized.split("/")[-1].split("@")[0]


def resolve_from(base: str, path: str) -> str:
    """Resolve *path* against *base* and normalise it without touching the disk."""
    return os.path.normpath(os.path.join(base, path))


def check_path(directory: str | Path) -> bool:
    """Return ``True`` if a package can be created in *directory*."""
    return not (Path(directory) / "package.json").exists()


def _unsuitable_names() -> set[str]:
    names = set(UNSUITABLE_DEFAULT_NAMES)
    names.add(Path.home().name)
    try:
        names.add(getpass.getuser())
    except (KeyError, OSError):
        pass
    return names


def check_default_package_name(name: str, settings: Settings, directory: str | None = None) -> bool:
    """Return ``True`` if *name* is a sensible default for the name prompt."""
    if name in _unsuitable_names():
        return False
    if not settings.explicit_path and not check_path(
        resolve_from(settings.invoke_directory, directory or name)
    ):
        return False
    return is_valid_package_name(name)


def recommend_new_package_name(settings: Settings) -> tuple[str, str] | None:
    """Pick a default ``(name, directory)`` pair for the name prompt.

    Candidates in order: the current name, the basename of an explicit path,
    the invoke directory's name, and a few playful ``<prefix>-<type>`` names.
    """
    kind = settings.type.value if settings.type else "package"
    candidates: list[tuple[str, str]] = []

    if settings.name:
        candidates.append((settings.name, settings.path or settings.name))
    if settings.path and settings.explicit_path:
        absolute = resolve_from(settings.invoke_directory, settings.path)
        candidates.append((normalize_string(os.path.basename(absolute)), settings.path))
    candidates.append((normalize_string(os.path.basename(settings.invoke_directory)), "."))
    for prefix in DEFAULT_NAME_PREFIXES:
        candidates.append((f"{prefix}-{kind}", f"./{prefix}-{kind}"))

    for name, directory in candidates:
        if check_default_package_name(name, settings, directory):
            return name, directory
    return None


def default_path_for_name(name: str, invoke_directory: str) -> str:
    """Directory a package called *name* goes to when no path was given.

    The invoke directory itself is used when it already carries the name.
    """
    if normalize_string(os.path.basename(invoke_directory)) == normalize_string(name):
        return "."
    return normalize_string(name)
