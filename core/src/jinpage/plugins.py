"""Reading a parameter set back the way the applet container does.

The container reads ``plugins.count`` first and then walks
``plugins.0.classname`` .. ``plugins.{N-1}.classname``; resource lists are
split on whitespace.
"""

from __future__ import annotations

from html.parser import HTMLParser

from jinpage.params import (
    ParameterSet,
    plugin_classname_key,
    split_tokens,
)


class PluginListError(ValueError):
    pass


def read_plugin_classnames(params: ParameterSet) -> list[str]:
    raw_count = params.get("plugins.count")
    if raw_count is None:
        return []

    # ASCII digits only: int() would also accept a sign, underscores or other scripts.
    digits = raw_count.strip()
    if not (digits.isascii() and digits.isdigit()):
        raise PluginListError(f"plugins.count is not a non-negative integer: {raw_count!r}")
    count = int(digits)

    out: list[str] = []
    for i in range(count):
        key = plugin_classname_key(i)
        classname = params.get(key)
        if classname is None or not classname.strip():
            raise PluginListError(f"Missing {key} (plugins.count={count})")
        out.append(classname.strip())
    return out


def short_classname(classname: str) -> str:
    return classname.rsplit(".", 1)[-1]


def read_token_list(params: ParameterSet, name: str) -> list[str]:
    value = params.get(name)
    if value is None:
        return []
    return split_tokens(value)


class _ParamCollector(HTMLParser):
    def __init__(self) -> None:
        super().__init__(convert_charrefs=True)
        self.entries: list[tuple[str, str]] = []
        self._depth = 0

    def handle_starttag(self, tag: str, attrs: list[tuple[str, str | None]]) -> None:
        if tag == "applet":
            self._depth += 1
            return
        if tag != "param" or self._depth == 0:
            return
        # Attribute names are already lower-cased by HTMLParser.
        values = dict(attrs)
        name = values.get("name")
        if name is None:
            return
        self.entries.append((name, values.get("value") or ""))

    def handle_endtag(self, tag: str) -> None:
        if tag == "applet" and self._depth > 0:
            self._depth -= 1


def parse_parameters(document: bytes | str) -> ParameterSet:
    """Extract the ``<param>`` elements of the applet in an emitted page.

    Commented-out params are ignored, as a browser would ignore them.
    """

    text = document.decode("utf-8") if isinstance(document, bytes) else document

    collector = _ParamCollector()
    collector.feed(text)
    collector.close()

    return ParameterSet(tuple(collector.entries))
