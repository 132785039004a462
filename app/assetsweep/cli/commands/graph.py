"""Graph command implementation.

Shows the relational map of the deletable pool: root nodes (safe to delete
now), circular nodes (deleted together as a cycle) and leaf nodes.
"""

import json
from enum import Enum
from typing import Annotated

import typer

from assetsweep.cli.display import create_nodes_table
from assetsweep.cli.types import (
    CatalogArgument,
    OutputFormat,
    PolicyOption,
    require_cleaner,
    require_policy,
)
from assetsweep.graph.relational_map import GraphNode
from assetsweep.utils.formatting import console, print_info

app = typer.Typer(
    help="Inspect the dependency graph of unused assets.",
    invoke_without_command=True,
    context_settings={"allow_interspersed_args": True},
)


class NodeSelection(str, Enum):
    """Which nodes to show."""

    ALL = "all"
    ROOTS = "roots"
    CIRCULAR = "circular"
    LEAVES = "leaves"


@app.callback(invoke_without_command=True)
def show_graph(
    catalog_path: CatalogArgument,
    policy_path: PolicyOption = None,
    kind: Annotated[
        NodeSelection,
        typer.Option(
            "--kind",
            "-k",
            help="Nodes to show: all, roots, circular or leaves.",
            case_sensitive=False,
        ),
    ] = NodeSelection.ALL,
    output_format: Annotated[
        OutputFormat,
        typer.Option("--format", "-f", help="Output format.", case_sensitive=False),
    ] = OutputFormat.TABLE,
) -> None:
    """Show root, circular and leaf nodes of the unused-asset graph."""
    policy = require_policy(policy_path)
    cleaner = require_cleaner(catalog_path, policy)

    if kind == NodeSelection.ROOTS:
        title, nodes = "Root Nodes", cleaner.get_root_nodes()
    elif kind == NodeSelection.CIRCULAR:
        title, nodes = "Circular Nodes", cleaner.get_circular_nodes()
    elif kind == NodeSelection.LEAVES:
        title, nodes = "Leaf Nodes", cleaner.get_leaf_nodes()
    else:
        title, nodes = "Unused Asset Graph", cleaner.get_relational_map().nodes()

    if output_format == OutputFormat.JSON:
        console.print_json(json.dumps([_node_to_dict(node) for node in nodes]))
        return

    if not nodes:
        print_info(f"No {kind.value} nodes.")
        return

    console.print(create_nodes_table(title, nodes))
    components = cleaner.get_classification().components
    if components and kind in (NodeSelection.ALL, NodeSelection.CIRCULAR):
        console.print(f"\n[circular]{len(components)} dependency cycle(s):[/]")
        for component in components:
            console.print(f"  [muted]-[/] {' <-> '.join(component)}")


def _node_to_dict(node: GraphNode) -> dict[str, object]:
    """Convert a graph node to a JSON-serializable dictionary."""
    return {
        "id": node.asset_id,
        "kind": node.kind.value,
        "dependencies": list(node.dependencies),
        "referencers": list(node.referencers),
    }
