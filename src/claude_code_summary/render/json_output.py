"""JSON report output."""

from typing import Any, TextIO

import orjson


def write_json(out: TextIO, data: Any):
    out.write(orjson.dumps(data, option=orjson.OPT_INDENT_2).decode("utf-8"))
    out.write("\n")
