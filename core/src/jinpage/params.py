from __future__ import annotations

from collections.abc import Iterable, Iterator, Mapping
from dataclasses import dataclass, field, replace

from jinpage.config import AppletConfig, PrefsConfig

SAVE_PREFS_URL = "savePrefsUrl"
RESERVE_SPACE_URL = "reserveSpaceUrl"


class ParameterError(ValueError):
    pass


class DuplicateParameterError(ParameterError):
    def __init__(self, name: str) -> None:
        super().__init__(f"Duplicate parameter name: {name!r}")
        self.name = name


class InvalidParameterError(ParameterError):
    pass


def _check_name(name: str) -> None:
    if not isinstance(name, str) or not name:
        raise InvalidParameterError("Parameter name must be a non-empty string")
    if any(ch.isspace() for ch in name):
        raise InvalidParameterError(f"Parameter name contains whitespace: {name!r}")


@dataclass(frozen=True)
class ParameterSet:
    """Ordered, immutable name -> value mapping handed to the applet.

    Values are opaque strings; the set never interprets them. Names are unique
    ignoring case.
    """

    entries: tuple[tuple[str, str], ...] = ()
    _index: dict[str, str] = field(init=False, repr=False, compare=False)

    def __post_init__(self) -> None:
        entries = tuple((name, value) for name, value in self.entries)
        index: dict[str, str] = {}
        folded: set[str] = set()
        for name, value in entries:
            _check_name(name)
            if not isinstance(value, str):
                raise InvalidParameterError(f"Value of {name!r} must be a string")
            if name.lower() in folded:
                raise DuplicateParameterError(name)
            folded.add(name.lower())
            index[name] = value
        object.__setattr__(self, "entries", entries)
        object.__setattr__(self, "_index", index)

    @classmethod
    def from_mapping(cls, mapping: Mapping[str, str]) -> ParameterSet:
        return cls(tuple(mapping.items()))

    def names(self) -> list[str]:
        return [name for name, _ in self.entries]

    def get(self, name: str, default: str | None = None) -> str | None:
        return self._index.get(name, default)

    def as_dict(self) -> dict[str, str]:
        return dict(self.entries)

    def with_overrides(self, overrides: Mapping[str, str]) -> ParameterSet:
        """Return a new set with overrides applied.

        Existing names keep their position and spelling, matched ignoring case;
        unknown names are appended in order.
        """

        if not overrides:
            return self
        by_folded = {name.lower(): value for name, value in overrides.items()}
        merged = [(name, by_folded.pop(name.lower(), value)) for name, value in self.entries]
        merged.extend(
            (name, value) for name, value in overrides.items() if name.lower() in by_folded
        )
        return ParameterSet(tuple(merged))

    def __getitem__(self, name: str) -> str:
        return self._index[name]

    def __contains__(self, name: object) -> bool:
        return name in self._index

    def __len__(self) -> int:
        return len(self.entries)

    def __iter__(self) -> Iterator[tuple[str, str]]:
        return iter(self.entries)


def join_tokens(tokens: Iterable[str]) -> str:
    out: list[str] = []
    seen: set[str] = set()
    for token in tokens:
        if not token or any(ch.isspace() for ch in token):
            raise InvalidParameterError(f"Invalid resource token: {token!r}")
        if token in seen:
            raise InvalidParameterError(f"Duplicate resource token: {token!r}")
        seen.add(token)
        out.append(token)
    return " ".join(out)


def split_tokens(value: str) -> list[str]:
    return value.split()


def plugin_classname_key(index: int) -> str:
    return f"plugins.{index}.classname"


def build_parameter_set(
    applet: AppletConfig, prefs: PrefsConfig | None = None
) -> ParameterSet:
    entries: list[tuple[str, str]] = [
        ("port", str(applet.port)),
        ("server.classname", applet.server_classname),
        ("plugins.count", str(len(applet.plugins))),
    ]
    entries.extend(
        (plugin_classname_key(i), classname) for i, classname in enumerate(applet.plugins)
    )
    entries.append(("resources.boards", join_tokens(applet.boards)))
    entries.append(("resources.pieces", join_tokens(applet.pieces)))

    if prefs is not None:
        if prefs.save_prefs_url:
            entries.append((SAVE_PREFS_URL, prefs.save_prefs_url))
        if prefs.reserve_space_url:
            entries.append((RESERVE_SPACE_URL, prefs.reserve_space_url))

    return ParameterSet(tuple(entries))


@dataclass(frozen=True)
class AppletPage:
    title: str
    code: str
    archive: tuple[str, ...]
    width: int
    height: int
    fallback_text: str
    parameters: ParameterSet

    def with_overrides(self, overrides: Mapping[str, str]) -> AppletPage:
        if not overrides:
            return self
        return replace(self, parameters=self.parameters.with_overrides(overrides))


def build_applet_page(applet: AppletConfig, prefs: PrefsConfig | None = None) -> AppletPage:
    return AppletPage(
        title=applet.title,
        code=applet.code,
        archive=tuple(applet.archive),
        width=applet.width,
        height=applet.height,
        fallback_text=applet.fallback_text,
        parameters=build_parameter_set(applet, prefs),
    )
