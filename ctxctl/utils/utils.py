import json

OUTPUT_KINDS = ("text", "json")


def format_output(result, kind="text"):
    """Render a CommandResult as its human message or as JSON of its payload."""
    if kind == "json":
        return json.dumps(result.payload)
    return result.message
