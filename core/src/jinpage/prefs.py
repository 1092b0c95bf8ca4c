"""Per-user parameter overrides, applied before the page is rendered.

Only the load/save seam is defined here. Deciding when a save happens and who
is allowed to trigger it belongs to whatever sits in front of the store.
"""

from __future__ import annotations

import json
import logging
import re
import tempfile
from collections.abc import Mapping
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Protocol

from jsonschema import Draft202012Validator

from jinpage.params import InvalidParameterError, join_tokens, split_tokens

logger = logging.getLogger(__name__)

ParameterOverrides = dict[str, str]

USERNAME_RE = re.compile(r"^[A-Za-z0-9_-]{1,64}$")

# Names that wire the applet to its server and plugins cannot be overridden.
LOCKED_NAMES: frozenset[str] = frozenset({"port", "server.classname", "plugins.count"})
LOCKED_PREFIXES: tuple[str, ...] = ("plugins.",)

# Normalized through the token list codec before they are stored.
TOKEN_LIST_NAMES: frozenset[str] = frozenset({"resources.boards", "resources.pieces"})

OVERRIDES_SCHEMA: dict[str, Any] = {
    "type": "object",
    "propertyNames": {"pattern": r"^[A-Za-z][A-Za-z0-9_.-]*$"},
    "additionalProperties": {"type": "string"},
}


class PreferencesError(Exception):
    pass


class InvalidPreferencesError(PreferencesError):
    def __init__(self, message: str, *, details: list[dict[str, Any]] | None = None) -> None:
        super().__init__(message)
        self.details = details or []


class InvalidUsernameError(PreferencesError):
    pass


@dataclass(frozen=True)
class UserContext:
    username: str


@dataclass(frozen=True)
class SaveResult:
    saved: bool
    count: int = 0


class PreferencesStore(Protocol):
    def load_preferences(self, user: UserContext) -> ParameterOverrides: ...

    def save_preferences(
        self, user: UserContext, overrides: Mapping[str, str]
    ) -> SaveResult: ...


class NullPreferencesStore:
    """Store used while preferences are disabled: nothing loads, nothing saves."""

    def load_preferences(self, user: UserContext) -> ParameterOverrides:
        return {}

    def save_preferences(self, user: UserContext, overrides: Mapping[str, str]) -> SaveResult:
        return SaveResult(saved=False)


def _is_locked(name: str) -> bool:
    # The applet container matches param names case-insensitively.
    folded = name.lower()
    return folded in LOCKED_NAMES or folded.startswith(LOCKED_PREFIXES)


def validate_overrides(overrides: Any) -> ParameterOverrides:
    validator = Draft202012Validator(OVERRIDES_SCHEMA)
    errors: list[dict[str, Any]] = []
    for e in validator.iter_errors(overrides):
        errors.append(
            {
                "path": list(e.path),
                "message": e.message,
                "validator": e.validator,
            }
        )
    if errors:
        errors.sort(key=lambda err: ("/".join(map(str, err["path"])), err["message"]))
        raise InvalidPreferencesError("Invalid preference overrides", details=errors)

    locked = sorted(name for name in overrides if _is_locked(name))
    if locked:
        raise InvalidPreferencesError(
            "Locked parameters cannot be overridden",
            details=[{"path": [name], "message": "locked"} for name in locked],
        )

    folded: dict[str, str] = {}
    clashes: list[dict[str, Any]] = []
    for name in overrides:
        other = folded.setdefault(name.lower(), name)
        if other != name:
            clashes.append({"path": [name], "message": f"same name as {other!r}"})
    if clashes:
        raise InvalidPreferencesError("Duplicate parameter names", details=clashes)

    out: ParameterOverrides = {}
    token_errors: list[dict[str, Any]] = []
    for name, value in overrides.items():
        if name.lower() in TOKEN_LIST_NAMES:
            try:
                value = join_tokens(split_tokens(value))
            except InvalidParameterError as e:
                token_errors.append({"path": [name], "message": str(e)})
                continue
        out[name] = value
    if token_errors:
        raise InvalidPreferencesError("Invalid resource token list", details=token_errors)

    return out


def check_username(username: str) -> str:
    if not USERNAME_RE.match(username or ""):
        raise InvalidUsernameError(f"Invalid username: {username!r}")
    return username


class FilesystemPreferencesStore:
    """One JSON object of overrides per user under ``prefs_dir``."""

    def __init__(self, prefs_dir: Path) -> None:
        self.prefs_dir = prefs_dir

    def _path_for(self, user: UserContext) -> Path:
        return self.prefs_dir / f"{check_username(user.username)}.json"

    def load_preferences(self, user: UserContext) -> ParameterOverrides:
        path = self._path_for(user)
        if not path.exists():
            return {}

        with path.open("r", encoding="utf-8") as f:
            try:
                raw = json.load(f)
            except ValueError as e:
                # JSONDecodeError and UnicodeDecodeError both land here.
                raise InvalidPreferencesError(f"Corrupt preferences file: {path.name}") from e
        return validate_overrides(raw)

    def save_preferences(self, user: UserContext, overrides: Mapping[str, str]) -> SaveResult:
        payload = validate_overrides(dict(overrides))
        path = self._path_for(user)

        self.prefs_dir.mkdir(parents=True, exist_ok=True)
        with tempfile.NamedTemporaryFile(
            "w",
            encoding="utf-8",
            dir=self.prefs_dir,
            prefix=f".{path.stem}.",
            suffix=".tmp",
            delete=False,
        ) as f:
            json.dump(payload, f, indent=2, sort_keys=True, ensure_ascii=False)
            f.write("\n")
            tmp_path = Path(f.name)
        try:
            tmp_path.replace(path)
        except OSError:
            tmp_path.unlink(missing_ok=True)
            raise

        logger.info("Saved %d preference override(s) for %s", len(payload), user.username)
        return SaveResult(saved=True, count=len(payload))
