#
# Copyright 2024 zhlinh and flavorgo Project Authors. All rights reserved.
# Use of this source code is governed by a MIT-style
# license that can be found at
#
# https://opensource.org/license/MIT
#
# The above copyright notice and this permission
# notice shall be included in all copies or
# substantial portions of the Software.

"""
Project metadata loading.

Metadata lives in two places:
- the versioned metadata file (e.g. project.properties), which must exist
- machine-local overrides, taken from the base64 LOCAL_PROPERTIES
  environment variable or, when that is blank, from local.properties

Both are Java-properties text. A MetadataStore reads each source at most
once and hands out the same read-only Metadata afterwards.
"""

import base64
import binascii
import os
import re
import threading
from collections.abc import Mapping
from typing import Dict, Iterator, Optional

from flavorgo.variant.errors import ConfigMissingError, VersionFieldMissingError

LOCAL_PROPERTIES_ENV = "LOCAL_PROPERTIES"
LOCAL_PROPERTIES_FILE = "local.properties"

_ESCAPES = {"t": "\t", "n": "\n", "r": "\r", "f": "\f"}
_INTEGER = re.compile(r"[+-]?[0-9]+")


class Metadata(Mapping):
    """Read-only string to string mapping loaded from a properties source."""

    def __init__(self, values: Optional[Dict[str, str]] = None, source: str = ""):
        self._values = dict(values or {})
        self.source = source

    def __getitem__(self, key: str) -> str:
        return self._values[key]

    def __iter__(self) -> Iterator[str]:
        return iter(self._values)

    def __len__(self) -> int:
        return len(self._values)

    def __repr__(self) -> str:
        return f"Metadata({self.source!r}, {len(self)} keys)"

    def require(self, key: str) -> str:
        value = self._values.get(key)
        if value is None:
            raise VersionFieldMissingError(key)
        return value

    def require_int(self, key: str) -> int:
        value = self.require(key)
        # same digits Integer.parseInt accepts: no whitespace, no underscores
        if not _INTEGER.fullmatch(value):
            raise VersionFieldMissingError(key, value)
        return int(value)


def _unescape(text: str) -> str:
    out = []
    i = 0
    while i < len(text):
        ch = text[i]
        if ch != "\\" or i + 1 >= len(text):
            out.append(ch)
            i += 1
            continue
        nxt = text[i + 1]
        if nxt == "u" and i + 6 <= len(text):
            try:
                out.append(chr(int(text[i + 2:i + 6], 16)))
                i += 6
                continue
            except ValueError:
                pass
        out.append(_ESCAPES.get(nxt, nxt))
        i += 2
    return "".join(out)


def _logical_lines(text: str) -> Iterator[str]:
    """Join backslash-continued lines, skipping blanks and comments."""
    pending = None
    for raw in text.splitlines():
        line = raw.lstrip()
        if pending is None and (not line or line[0] in "#!"):
            continue
        # an odd number of trailing backslashes continues the line
        trailing = len(line) - len(line.rstrip("\\"))
        if trailing % 2 == 1:
            pending = (pending or "") + line[:-1]
            continue
        yield (pending or "") + line
        pending = None
    if pending:
        yield pending


def _split_entry(line: str):
    i = 0
    while i < len(line):
        ch = line[i]
        if ch == "\\":
            i += 2
            continue
        if ch in "=: \t\f":
            break
        i += 1
    key = line[:i]
    rest = line[i:].lstrip(" \t\f")
    if rest[:1] in ("=", ":"):
        rest = rest[1:].lstrip(" \t\f")
    return _unescape(key), _unescape(rest)


def parse_properties(text: str) -> Dict[str, str]:
    """
    Parse Java-properties text into a dict.

    Supports '=', ':' and whitespace separators, '#' and '!' comments,
    backslash line continuation and the usual escapes (including \\uXXXX).
    Later duplicates win, as with java.util.Properties.
    """
    values = {}
    for line in _logical_lines(text):
        key, value = _split_entry(line)
        values[key] = value
    return values


def load_properties_file(path: str) -> Metadata:
    """
    Load a properties file.

    UTF-8 is tried first; anything else is read as ISO-8859-1, the
    encoding java.util.Properties assumes.
    """
    if not os.path.isfile(path):
        raise ConfigMissingError(path)
    try:
        with open(path, "rb") as f:
            raw = f.read()
    except OSError as e:
        raise ConfigMissingError(path, str(e)) from e
    try:
        text = raw.decode("utf-8")
    except UnicodeDecodeError:
        text = raw.decode("latin-1")
    return Metadata(parse_properties(text), source=path)


def load_local_properties(project_dir: str, environ=None) -> Metadata:
    """
    Load machine-local overrides.

    A non-blank LOCAL_PROPERTIES environment variable (base64 encoded
    properties text) takes precedence over local.properties in the project
    root. With neither present the overrides are empty.
    """
    if environ is None:
        environ = os.environ

    blob = environ.get(LOCAL_PROPERTIES_ENV)
    if blob is not None and blob.strip():
        try:
            text = base64.b64decode(blob.strip()).decode("utf-8")
        except (binascii.Error, UnicodeDecodeError) as e:
            raise ConfigMissingError(
                f"${LOCAL_PROPERTIES_ENV}", f"not valid base64 properties text ({e})"
            ) from e
        return Metadata(parse_properties(text), source=f"${LOCAL_PROPERTIES_ENV}")

    local_file = os.path.join(project_dir, LOCAL_PROPERTIES_FILE)
    if os.path.isfile(local_file):
        return load_properties_file(local_file)

    return Metadata(source="")


class MetadataStore:
    """
    Lazily loaded, memoized metadata for one project.

    The store is created once per configuration and passed to every
    consumer. Each source is read on first access only; later calls return
    the cached Metadata without touching the filesystem again.
    """

    def __init__(self, project_dir: str, metadata_file: str, environ=None):
        self.project_dir = project_dir
        self.metadata_path = os.path.join(project_dir, metadata_file)
        self.environ = os.environ if environ is None else environ
        self._lock = threading.Lock()
        self._metadata = None
        self._local = None

    def metadata(self) -> Metadata:
        if self._metadata is None:
            with self._lock:
                if self._metadata is None:
                    self._metadata = load_properties_file(self.metadata_path)
        return self._metadata

    def local_properties(self) -> Metadata:
        if self._local is None:
            with self._lock:
                if self._local is None:
                    self._local = load_local_properties(self.project_dir, self.environ)
        return self._local
