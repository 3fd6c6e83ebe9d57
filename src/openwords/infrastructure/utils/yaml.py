import yaml  # type: ignore


class _LiteralDumper(yaml.SafeDumper):
    """SafeDumper that writes multi-line strings as `|-` block scalars."""

    def increase_indent(self, flow=False, indentless=False):
        # Indent list items under their parent key, as Obsidian does
        return super().increase_indent(flow, False)


def _str_representer(dumper: yaml.SafeDumper, data: str):
    if "\n" in data:
        return dumper.represent_scalar("tag:yaml.org,2002:str", data.rstrip("\n"), style="|")
    return dumper.represent_scalar("tag:yaml.org,2002:str", data)


_LiteralDumper.add_representer(str, _str_representer)
