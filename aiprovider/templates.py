"""``{{variable}}`` substitution for caller-supplied prompt templates."""

import json
import re

from .errors import TemplateError

# Variable names may contain letters, digits, underscores and hyphens.
VARIABLE_PATTERN = re.compile(r"\{\{([a-zA-Z0-9_-]+)\}\}")


def _to_text(value) -> str:
    if value is None:
        return ""
    if isinstance(value, str):
        return value
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    if isinstance(value, (int, float)):
        return repr(value)
    return json.dumps(value, separators=(",", ":"), ensure_ascii=False)


def _reject_constant(name: str):
    raise TemplateError(f"invalid JSON format in variables: {name} is not valid JSON")


def parse_variables(variables_json: str) -> dict:
    """Decode the bindings JSON. ``""`` and ``null`` both mean no bindings."""
    if not variables_json:
        return {}
    try:
        variables = json.loads(variables_json, parse_constant=_reject_constant)
    except json.JSONDecodeError as exc:
        raise TemplateError(f"invalid JSON format in variables: {exc}") from exc
    if variables is None:
        return {}
    if not isinstance(variables, dict):
        raise TemplateError(
            f"invalid JSON format in variables: expected an object, got {type(variables).__name__}"
        )
    return variables


def substitute_variables(template: str, variables_json: str) -> str:
    """Replace every ``{{name}}`` in *template* with its value from *variables_json*.

    Args:
        template: Prompt text containing ``{{name}}`` placeholders. Must not be
            empty.
        variables_json: A JSON object of name/value pairs, ``"null"`` or ``""``.
            Numbers and booleans are inserted in their JSON literal form,
            ``null`` values as an empty string.

    Returns:
        The substituted text. Placeholders without a binding are kept verbatim,
        as are placeholders wrapped in a third brace (``{{{name}}}``).
        Inserted values are not scanned again.

    Raises:
        TemplateError: empty template, malformed JSON, or JSON that is neither
            an object nor ``null``.
    """
    if template == "":
        raise TemplateError("template cannot be empty")

    variables = parse_variables(variables_json)
    if not variables:
        return template

    def _replace(match: re.Match) -> str:
        start, end = match.span()
        if start > 0 and template[start - 1] == "{":
            return match.group(0)
        if end < len(template) and template[end] == "}":
            return match.group(0)
        name = match.group(1)
        if name not in variables:
            return match.group(0)
        return _to_text(variables[name])

    return VARIABLE_PATTERN.sub(_replace, template)
