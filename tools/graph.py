"""Render resource manifests as Graphviz DOT digraphs.

See https://graphviz.org/doc/info/lang.html
"""

from typing import Iterable

from tools.manifest import ResourceManifest

HEADER = 'digraph Resources {\n  node [shape=box fontname="Avenir, Helvetica" fontsize=10];\n'
FOOTER = "}\n"

# Bookkeeping resources with no place in a diagram
METADATA_TYPES = frozenset({"AWS::CDK::Metadata", "Metadata"})


def escape(text: str) -> str:
    """Escape backslashes and double quotes for use inside a DOT string."""
    return text.replace("\\", "\\\\").replace('"', '\\"')


def quote(text: str) -> str:
    """Return ``text`` as a double-quoted DOT identifier."""
    return f'"{escape(text)}"'


def node_label(type_tag: str, property_names: Iterable[str]) -> str:
    """Build a quoted label: the type followed by one line per property name."""
    return '"' + "\\n".join(escape(line) for line in (type_tag, *property_names)) + '"'


def render(manifest: ResourceManifest, skip_types=METADATA_TYPES) -> str:
    """Render ``manifest`` as a DOT digraph.

    Resources appear in manifest order, each followed by one edge per
    dependency. Property values are never rendered, only their names.
    Dependencies outside the manifest are kept as-is.
    """
    lines = [HEADER]

    for name, resource in manifest.items():
        if resource.type_tag in skip_types:
            continue

        node = quote(name)
        label = node_label(resource.type_tag, resource.properties)
        lines.append(f"  {node} [label={label}];\n")

        for dependency in resource.depends_on:
            lines.append(f"  {node} -> {quote(dependency)};\n")

    lines.append(FOOTER)
    return "".join(lines)
