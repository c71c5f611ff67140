# Copyright (c) 2026 - 2026, Oracle and/or its affiliates. All rights reserved.
# Licensed under the Universal Permissive License v 1.0 as shown at https://oss.oracle.com/licenses/upl/.

"""This module reads and writes the yaml documents of a chart.

Documents are loaded in round-trip mode so that comments, quoting, key order and fields
unknown to chartsyncer are written back unchanged. Booleans, numbers and timestamps are
kept as the text found in the file, e.g., a ``version: 0.10`` stays ``"0.10"``.
"""

import io
import logging
from dataclasses import dataclass
from typing import Any

from ruamel.yaml import YAML
from ruamel.yaml.error import YAMLError
from ruamel.yaml.resolver import VersionedResolver

from chartsyncer.errors import ChartFileError, SchemaParseError

logger: logging.Logger = logging.getLogger(__name__)

_TEXT_TAGS = frozenset(
    {
        "tag:yaml.org,2002:bool",
        "tag:yaml.org,2002:float",
        "tag:yaml.org,2002:int",
        "tag:yaml.org,2002:timestamp",
    }
)

#: Wide enough to never fold long scalars.
_LINE_WIDTH = 4096


class ChartFileResolver(VersionedResolver):
    """The resolver of chart files, which loads booleans, numbers and timestamps as strings."""

    def add_version_implicit_resolver(self, version: Any, tag: Any, regexp: Any, first: Any) -> None:
        if tag in _TEXT_TAGS:
            return
        super().add_version_implicit_resolver(version, tag, regexp, first)


@dataclass(frozen=True)
class YamlLayout:
    """The indentation of a yaml document, as passed to ``YAML.indent``."""

    mapping: int = 2
    sequence: int = 2
    offset: int = 0
    explicit_start: bool = False


def guess_layout(content: str) -> YamlLayout:
    """Guess the indentation of block mappings and sequences in a yaml document.

    Examples
    --------
    >>> guess_layout("a:\\n  b: 1\\nc:\\n- d\\n")
    YamlLayout(mapping=2, sequence=2, offset=0, explicit_start=False)
    >>> guess_layout("---\\nc:\\n    - name: d\\n      version: 1\\n")
    YamlLayout(mapping=2, sequence=6, offset=4, explicit_start=True)
    """
    mapping: int | None = None
    sequence: int | None = None
    offset: int | None = None
    explicit_start = False
    parent_indent: int | None = None

    for line in content.splitlines():
        stripped = line.strip()
        if not stripped or stripped.startswith("#"):
            continue
        if stripped.startswith("---"):
            explicit_start = True
            continue

        indent = len(line) - len(line.lstrip(" "))
        if parent_indent is not None and indent >= parent_indent:
            if stripped.startswith("- ") and offset is None:
                content_column = indent + 2 + len(stripped[2:]) - len(stripped[2:].lstrip(" "))
                offset = indent - parent_indent
                sequence = content_column - parent_indent
            elif not stripped.startswith("-") and indent > parent_indent and mapping is None:
                mapping = indent - parent_indent

        # A key without inline value opens a nested block.
        parent_indent = indent if stripped.split(" #")[0].rstrip().endswith(":") else None
        if mapping is not None and offset is not None:
            break

    return YamlLayout(
        mapping=mapping or 2,
        sequence=sequence or 2,
        offset=offset or 0,
        explicit_start=explicit_start,
    )


def _chart_yaml(layout: YamlLayout | None = None) -> YAML:
    """Create the round-trip yaml processor used for chart files."""
    chart_yaml = YAML()
    chart_yaml.Resolver = ChartFileResolver
    chart_yaml.preserve_quotes = True
    chart_yaml.width = _LINE_WIDTH
    if layout is not None:
        chart_yaml.indent(mapping=layout.mapping, sequence=layout.sequence, offset=layout.offset)
        chart_yaml.explicit_start = layout.explicit_start
    return chart_yaml


def _read_text(path: str) -> str:
    try:
        with open(path, encoding="utf-8") as file:
            return file.read()
    except OSError as error:
        raise ChartFileError(path, "reading", error) from error


def read_chart_file(path: str) -> dict:
    """Read a chart yaml document into a dictionary.

    Parameters
    ----------
    path : str
        The path to the file.

    Returns
    -------
    dict
        The document. An empty file yields an empty dictionary.

    Raises
    ------
    ChartFileError
        If the file cannot be read.
    SchemaParseError
        If the content is not valid yaml or is not a mapping.
    """
    content = _read_text(path)
    try:
        document = _chart_yaml().load(content)
    except YAMLError as error:
        raise SchemaParseError(f"Cannot parse {path}: {error}") from error

    if document is None:
        return {}
    if not isinstance(document, dict):
        raise SchemaParseError(f"Expected a mapping at the top level of {path}, got {type(document).__name__}.")
    return document


def write_chart_file(path: str, document: dict) -> None:
    """Overwrite the file at ``path`` with the yaml serialization of ``document``.

    The indentation of the file being overwritten is kept.

    Raises
    ------
    ChartFileError
        If the document cannot be serialized or the file cannot be written.
    """
    try:
        with open(path, encoding="utf-8") as file:
            layout = guess_layout(file.read())
    except FileNotFoundError:
        layout = YamlLayout()
    except OSError as error:
        raise ChartFileError(path, "reading", error) from error

    stream = io.StringIO()
    try:
        _chart_yaml(layout).dump(document, stream)
    except YAMLError as error:
        raise ChartFileError(path, "serializing", error) from error

    try:
        with open(path, "w", encoding="utf-8") as file:
            file.write(stream.getvalue())
    except OSError as error:
        raise ChartFileError(path, "writing", error) from error
    logger.debug("Wrote %s", path)


def get_dependency_entries(document: dict, path: str) -> list[dict]:
    """Return the ``dependencies`` list of a chart document.

    The returned list is the one held by ``document``, so changes to its entries are
    visible when the document is written back.

    Raises
    ------
    SchemaParseError
        If ``dependencies`` is not a list of mappings.
    """
    entries = document.get("dependencies")
    if entries is None:
        return []
    if not isinstance(entries, list) or not all(isinstance(entry, dict) for entry in entries):
        raise SchemaParseError(f"The dependencies field of {path} must be a list of mappings.")
    return entries
