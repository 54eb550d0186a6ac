"""
Compact JSON formatter for project files.

Arrays of numbers and flat records (objects whose values are all
primitives, such as colors and map objects) are kept on a single line.
Everything else is indented normally.
"""

import json


def _is_primitive(v):
    return v is None or isinstance(v, (bool, int, float, str))


def _is_numeric_array(v):
    return isinstance(v, list) and all(
        isinstance(x, (int, float)) and not isinstance(x, bool) for x in v
    )


def _is_flat_record(v):
    return isinstance(v, dict) and all(_is_primitive(x) for x in v.values())


def dumps(obj, indent=2):
    """
    Serialize obj to a JSON formatted string.

    Args:
        obj: The object to serialize
        indent: Number of spaces for indentation (default: 2)

    Returns:
        A formatted JSON string
    """

    def format_value(v, level):
        pad = " " * (indent * level)
        child_pad = " " * (indent * (level + 1))

        if _is_primitive(v) or _is_numeric_array(v):
            return json.dumps(v, ensure_ascii=False)

        if _is_flat_record(v) and v:
            return json.dumps(v, ensure_ascii=False, separators=(", ", ": "))

        if isinstance(v, list):
            if not v:
                return "[]"
            items = [format_value(x, level + 1) for x in v]
            inner = ",\n".join(child_pad + item for item in items)
            return "[\n" + inner + "\n" + pad + "]"

        if isinstance(v, dict):
            if not v:
                return "{}"
            items = [
                f"{json.dumps(k, ensure_ascii=False)}: {format_value(val, level + 1)}"
                for k, val in v.items()
            ]
            inner = ",\n".join(child_pad + item for item in items)
            return "{\n" + inner + "\n" + pad + "}"

        return json.dumps(v, ensure_ascii=False)

    return format_value(obj, 0)


def dump(obj, fp, indent=2):
    """Serialize obj to a JSON formatted stream."""
    fp.write(dumps(obj, indent))
    fp.write("\n")


def load(fp):
    return json.load(fp)
