"""Export the case graph for rendering consumers.

Supported formats:
  - D3 JSON: force-directed network view
  - Cytoscape JSON: link-analysis panel (Cytoscape.js)
  - CSV: node and edge tables for spreadsheet review

Nodes carry category colours and provenance; when analysis results are
supplied, nodes are also sized by centrality and tagged with their
community so overlays need no further lookups.
"""

from __future__ import annotations

import csv
import io
import logging
from pathlib import Path
from typing import Any

from casegraph.graph.centrality import CentralityResult
from casegraph.graph.communities import Community
from casegraph.graph.models import Entity
from casegraph.graph.store import GraphStore

logger = logging.getLogger(__name__)


class GraphExporter:
    """Serialise a ``GraphStore`` snapshot.

    Parameters
    ----------
    store:
        The graph to export.
    centrality:
        Optional centrality results used for node sizing.
    communities:
        Optional community partition used for node grouping.
    """

    def __init__(
        self,
        store: GraphStore,
        centrality: list[CentralityResult] | None = None,
        communities: list[Community] | None = None,
    ) -> None:
        self._store = store
        self._scores = {r.entity_id: r.normalized_score for r in centrality or []}
        self._community_of: dict[str, Community] = {}
        for community in communities or []:
            for member in community.members:
                self._community_of[member] = community

    def _node_data(self, entity: Entity) -> dict[str, Any]:
        data: dict[str, Any] = {
            "id": entity.id,
            "name": entity.name,
            "type": entity.type.value,
            "category": entity.display_category.value,
            "risk_level": entity.risk_level.value,
            "color": entity.color,
            "source": entity.source.value,
            "confidence": entity.confidence,
            "is_ai_extracted": entity.is_ai_extracted,
            "connections": self._store.degree(entity.id),
        }
        if entity.role:
            data["role"] = entity.role
        if self._scores:
            score = self._scores.get(entity.id, 0.0)
            data["centrality"] = score
            data["size"] = max(5.0, score * 50)
        community = self._community_of.get(entity.id)
        if community is not None:
            data["community"] = community.id
            data["community_color"] = community.color
        return data

    # -- D3 JSON ---------------------------------------------------------------

    def to_d3_json(self) -> dict[str, Any]:
        """D3 force layout: nodes list plus links referencing node indices."""
        nodes = []
        node_index: dict[str, int] = {}
        for i, entity in enumerate(self._store.all_entities()):
            node_index[entity.id] = i
            nodes.append(self._node_data(entity))

        links = [
            {
                "source": node_index[c.source],
                "target": node_index[c.target],
                "type": c.type.value,
                "label": c.relationship,
                "strength": c.strength,
                "is_inferred": c.is_inferred,
                "color": c.color,
            }
            for c in self._store.all_connections()
        ]
        return {"nodes": nodes, "links": links}

    # -- Cytoscape JSON --------------------------------------------------------

    def to_cytoscape_json(self) -> dict[str, Any]:
        elements: list[dict[str, Any]] = []
        for entity in self._store.all_entities():
            data = self._node_data(entity)
            data["label"] = data.pop("name")
            elements.append({"data": data, "group": "nodes"})

        for edge_id, c in enumerate(self._store.all_connections()):
            elements.append({
                "data": {
                    "id": f"e{edge_id}",
                    "source": c.source,
                    "target": c.target,
                    "label": c.relationship,
                    "type": c.type.value,
                    "weight": c.strength,
                    "is_inferred": c.is_inferred,
                },
                "group": "edges",
            })
        return {"elements": elements}

    # -- CSV -------------------------------------------------------------------

    def to_csv_nodes(self) -> str:
        output = io.StringIO()
        writer = csv.writer(output)
        writer.writerow(["id", "name", "type", "category", "source", "confidence"])
        for e in self._store.all_entities():
            writer.writerow([
                e.id, e.name, e.type.value, e.display_category.value,
                e.source.value, e.confidence,
            ])
        return output.getvalue()

    def to_csv_edges(self) -> str:
        output = io.StringIO()
        writer = csv.writer(output)
        writer.writerow(["source_id", "target_id", "type", "relationship", "strength", "is_inferred"])
        for c in self._store.all_connections():
            writer.writerow([
                c.source, c.target, c.type.value, c.relationship,
                c.strength, c.is_inferred,
            ])
        return output.getvalue()

    def to_csv_files(self, directory: str | Path) -> tuple[Path, Path]:
        """Write nodes.csv and edges.csv into ``directory``."""
        directory = Path(directory)
        directory.mkdir(parents=True, exist_ok=True)

        nodes_path = directory / "nodes.csv"
        edges_path = directory / "edges.csv"
        nodes_path.write_text(self.to_csv_nodes())
        edges_path.write_text(self.to_csv_edges())

        logger.info("Exported CSV to %s (nodes + edges)", directory)
        return nodes_path, edges_path
