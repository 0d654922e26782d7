"""EFO OWL ingestion into a parent/child linked set of trait nodes."""

from __future__ import annotations

import logging
import xml.etree.ElementTree as ET

from search_gwas.adapters.base import DocumentAdapter
from search_gwas.adapters.common import parallel_map, parse_prefixed_id, trailing_segment
from search_gwas.errors import ParseError
from search_gwas.models import TraitNode

logger = logging.getLogger("search_gwas.ingest.efo")

OWL_NS = "http://www.w3.org/2002/07/owl#"
RDF_NS = "http://www.w3.org/1999/02/22-rdf-syntax-ns#"
RDFS_NS = "http://www.w3.org/2000/01/rdf-schema#"
OBO_IN_OWL_NS = "http://www.geneontology.org/formats/oboInOwl#"

_CLASS = f"{{{OWL_NS}}}Class"
_ABOUT = f"{{{RDF_NS}}}about"
_RESOURCE = f"{{{RDF_NS}}}resource"
_LABEL = f"{{{RDFS_NS}}}label"
_SUBCLASS_OF = f"{{{RDFS_NS}}}subClassOf"
_EXACT_SYNONYM = f"{{{OBO_IN_OWL_NS}}}hasExactSynonym"

# Parent id recorded when subClassOf points outside EFO. Shared by every such
# node, so it must not be read as a real EFO_0000000 class.
UNPREFIXED_PARENT = 0


class EFOOntologyAdapter(DocumentAdapter[TraitNode]):
    """Parse EFO RDF/XML into trait nodes with children backfilled."""

    name = "efo"

    def parse(self, text: str) -> list[TraitNode]:
        try:
            root = ET.fromstring(text)
        except ET.ParseError as exc:
            raise ParseError(f"Malformed EFO document: {exc}") from exc

        classes = [element for element in root.iter(_CLASS) if element.get(_ABOUT) is not None]
        scanned = parallel_map(self.node_from_element, classes, workers=self.workers)

        nodes: dict[int, TraitNode] = {}
        for node in scanned:
            if node is not None:
                nodes[node.id] = node

        backfill_children(nodes)

        logger.info("EFO parsed: classes=%d nodes=%d", len(classes), len(nodes))
        return [nodes[node_id] for node_id in sorted(nodes)]

    @staticmethod
    def node_from_element(element: ET.Element) -> TraitNode | None:
        """Build a node from one ``owl:Class``; unlabelled or non-EFO classes yield ``None``."""

        node_id = parse_prefixed_id(trailing_segment(element.get(_ABOUT, "")))
        if node_id is None:
            return None

        label = element.find(_LABEL)
        if label is None:
            return None

        synonyms = {
            (synonym.text or "").strip().upper()
            for synonym in element.findall(_EXACT_SYNONYM)
            if (synonym.text or "").strip()
        }

        return TraitNode(
            id=node_id,
            label=(label.text or "").strip().upper(),
            parent=_parent_of(element),
            synonyms=synonyms,
        )


def _parent_of(element: ET.Element) -> int | None:
    subclass_of = element.findall(_SUBCLASS_OF)
    if not subclass_of:
        return None

    for candidate in subclass_of:
        resource = candidate.get(_RESOURCE)
        if resource is None:
            continue
        parent = parse_prefixed_id(trailing_segment(resource))
        return UNPREFIXED_PARENT if parent is None else parent

    return UNPREFIXED_PARENT


def backfill_children(nodes: dict[int, TraitNode]) -> None:
    """Register every node with its parent; parents missing from ``nodes`` are ignored.

    Must run after ``nodes`` is complete, since a parent may appear later in
    the document than its children.
    """

    for node_id, node in nodes.items():
        if node.parent is None:
            continue
        parent = nodes.get(node.parent)
        if parent is not None:
            parent.children.add(node_id)
