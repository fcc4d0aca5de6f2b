"""Visualization functions for family tree graphs."""

from pathlib import Path
import tempfile

import networkx as nx
import pydot

from graph import build_union_layout_graph
from log_config import get_logger

log = get_logger(__name__)

FILL_BY_SEX = {"M": "lightblue", "F": "lightpink"}


def _quote(node) -> str:
    # Member ids are uuids, which Graphviz only accepts quoted
    return f'"{node}"'


def _person_label(data: dict) -> str:
    birth_date = data.get("birth_date") or ""
    death_date = data.get("death_date") or ""
    lines = [data.get("given_name") or "", data.get("surname") or ""]
    if birth_date or death_date:
        lines.append(f"{birth_date[:4]}-{death_date[:4]}")
    if data.get("machzor"):
        lines.append(f"machzor {data['machzor']}")
    return "\n".join(lines)


def build_dot(G: nx.DiGraph) -> pydot.Dot:
    """
    Lay the tree out as a genealogical chart using family (union) nodes.

    - Parents appear above children
    - Spouses share a rank with their family node
    - Siblings hang from the same family node
    """
    H = build_union_layout_graph(G)

    P = pydot.Dot(graph_type="digraph")
    P.set("rankdir", "TB")  # Top-to-bottom (ancestors at top)
    P.set("splines", "ortho")
    P.set("nodesep", "0.4")
    P.set("ranksep", "0.6")

    couples: list[tuple[str, str]] = []

    for node, data in H.nodes(data=True):
        if data.get("node_type") == "family":
            P.add_node(pydot.Node(_quote(node), shape="point", width="0.1", height="0.1", label=""))
            spouses = data.get("spouses", ())
            if len(spouses) == 2:
                couples.append(spouses)
            continue

        P.add_node(
            pydot.Node(
                _quote(node),
                label=_person_label(data),
                shape="box",
                style="rounded,filled",
                fillcolor=FILL_BY_SEX.get(data.get("sex"), "lightgray"),
                penwidth="2" if data.get("is_rabbi") else "1",
                fontsize="10",
            )
        )

    for u, v, data in H.edges(data=True):
        if data.get("edge_type") == "spouse_to_family":
            P.add_edge(pydot.Edge(_quote(u), _quote(v), dir="none", color="darkgray"))
        else:
            P.add_edge(pydot.Edge(_quote(u), _quote(v), color="darkgray"))

    for i, (a, b) in enumerate(couples):
        sg = pydot.Subgraph(f"couple_{i}", rank="same")
        sg.add_node(pydot.Node(_quote(a)))
        sg.add_node(pydot.Node(_quote(b)))
        P.add_subgraph(sg)

    return P


def plot_tree(G: nx.DiGraph, output_path: Path | None = None) -> None:
    """
    Render the family tree chart.

    Args:
        G: Graph from `graph.build_graph` (or a subgraph of it)
        output_path: Where to save the image; the extension picks png, svg or
            pdf. If None, the chart is shown with matplotlib instead.
    """
    P = build_dot(G)

    if output_path:
        ext = output_path.suffix.lower().lstrip(".")
        if ext not in ("png", "svg", "pdf"):
            ext = "png"
        P.write(str(output_path), format=ext)
        log.info("tree_chart_written", path=str(output_path), members=G.number_of_nodes())
        return

    import matplotlib.image as mpimg
    import matplotlib.pyplot as plt

    with tempfile.NamedTemporaryFile(suffix=".png", delete=False) as f:
        P.write(f.name, format="png")
        img = mpimg.imread(f.name)
    plt.figure(figsize=(20, 16))
    plt.imshow(img)
    plt.axis("off")
    plt.tight_layout()
    plt.show()
