#!/usr/bin/env python3
"""Line source and interchangeable parse backends for JSON-per-line files."""
import io
import json
import logging
from typing import Any, Iterator

import ijson

from jsonshape.errors import IOFailure, ParseFailure

logger = logging.getLogger(__name__)


def iter_lines(path) -> Iterator[str]:
    """Yield each line of a UTF-8 file, terminator included, one read at a time."""
    try:
        with open(path, 'r', encoding='utf-8', newline='\n') as f:
            while True:
                line = f.readline()
                if not line:
                    return
                yield line
    except (OSError, UnicodeDecodeError) as e:
        logger.error(f"reading {path} failed: {e}")
        raise IOFailure(f"cannot read {path}: {e}") from e


class ParseBackend:
    """Parse one line of text into a generic JSON value."""

    name = None

    def parse(self, text: str) -> Any:
        raise NotImplementedError

    def __repr__(self):
        return f"{type(self).__name__}()"


def _reject_constant(name):
    raise ValueError(f"{name} is not valid JSON")


class StdlibJSONBackend(ParseBackend):
    """json.loads, minus the NaN and Infinity literals it accepts by default."""

    name = 'json'

    def parse(self, text: str) -> Any:
        try:
            return json.loads(text, parse_constant=_reject_constant)
        except ValueError as e:
            raise ParseFailure(str(e), backend=self.name) from e


class IjsonBackend(ParseBackend):
    """ijson's item builder over a single line; floats come back as float, not Decimal."""

    name = 'ijson'

    def parse(self, text: str) -> Any:
        values = []
        try:
            for obj in ijson.items(io.BytesIO(text.encode('utf-8')), '', use_float=True):
                values.append(obj)
        except ijson.JSONError as e:
            raise ParseFailure(str(e), backend=self.name) from e
        if not values:
            raise ParseFailure("empty JSON input", backend=self.name)
        return values[0]


BACKENDS = {
    StdlibJSONBackend.name: StdlibJSONBackend,
    IjsonBackend.name: IjsonBackend,
}


def get_backend(name: str) -> ParseBackend:
    try:
        return BACKENDS[name]()
    except KeyError:
        raise ValueError(f"unknown backend {name!r}; choose from {', '.join(sorted(BACKENDS))}")
