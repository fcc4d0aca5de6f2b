"""
1) Open the SQLite family tree database (seeding it from "family_tree.json" when empty).
2) Load every member into memory and wrap them in a FamilyTree.
3) Audit the tree: mirror edges, cardinality, gender roles, connectivity, dates.
4) Build the networkx graph and render the family tree chart.
"""

from pathlib import Path
import json
import os

from database import create_database, load_members, store_members
from graph import build_graph, get_ego_subgraph
from log_config import configure_logging, resolve_log_level
from models import Member
from plotting import plot_tree
from tree import FamilyTree
from validation import audit_tree


def load_seed(seed_path: Path) -> dict[str, Member]:
    """Read a JSON list of member records (the shape of `Member.to_dict`)."""
    with open(seed_path, encoding="utf-8") as f:
        records = json.load(f)
    members = [Member.from_dict(record) for record in records]
    return {member.id: member for member in members}


def export_snapshot(tree: FamilyTree, output_path: Path) -> None:
    records = [tree.members[mid].to_dict() for mid in sorted(tree.members)]
    with open(output_path, "w", encoding="utf-8") as f:
        json.dump(records, f, ensure_ascii=False, indent=2)


def main():
    # Paths
    project_root = Path(__file__).parent.parent
    db_path = Path(os.environ.get("FAMILY_TREE_DB", project_root / "family_tree.db"))
    seed_path = project_root / "family_tree.json"
    plot_path = Path(os.environ.get("FAMILY_TREE_PLOT", project_root / "family_tree.png"))
    center_id = os.environ.get("FAMILY_TREE_CENTER")

    raw_level = os.environ.get("FAMILY_TREE_LOG_LEVEL")
    level = resolve_log_level(raw_level)
    if raw_level and level != raw_level.strip().upper():
        print(f"Unknown log level {raw_level!r}, using {level}")
    configure_logging(level)

    print(f"Opening database: {db_path}")
    conn = create_database(db_path)

    members = load_members(conn)
    if not members and seed_path.exists():
        print(f"Database is empty, seeding from {seed_path}")
        members = load_seed(seed_path)
        store_members(conn, members)

    tree = FamilyTree(members)
    print(f"  Loaded {len(tree)} members")

    print("Auditing family tree...")
    warnings = audit_tree(tree.members)
    if warnings:
        print(f"  Found {len(warnings)} issues:")
        for w in warnings[:10]:  # Show first 10 warnings
            print(f"    - {w}")
        if len(warnings) > 10:
            print(f"    ... and {len(warnings) - 10} more")
    else:
        print("  No issues found")

    print("Building NetworkX graph...")
    G = build_graph(tree.members)
    print(f"  Graph has {G.number_of_nodes()} nodes and {G.number_of_edges()} edges")
    if center_id:
        G = get_ego_subgraph(G, center_id, radius=2)
        print(f"  Showing {G.number_of_nodes()} members around {center_id}")

    if G.number_of_nodes():
        print(f"Plotting family tree to: {plot_path}")
        plot_tree(G, plot_path)
        export_snapshot(tree, plot_path.with_name(f"{plot_path.stem}_snapshot.json"))

    conn.close()
    print("Done!")


if __name__ == "__main__":
    main()
