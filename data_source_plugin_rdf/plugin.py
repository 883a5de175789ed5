from typing import Any, Dict, List, Mapping

from rdflib import Graph as RDFGraph, Literal, URIRef
from rdflib.namespace import RDF, RDFS

from graphview_api.models.dataset import DataSet
from graphview_api.models.edge import Edge
from graphview_api.models.node import Node

from graphview_api.plugins.base import FileDataSourcePlugin

DEFAULT_CHILD_PREDICATE = "hasChild"


class RDFTurtleDataSourcePlugin(FileDataSourcePlugin):
    """
    DataSourcePlugin for RDF Turtle (.ttl) documents.

    URI resources become nodes, labelled by ``rdfs:label`` or their local
    name.  Triples whose predicate has the local name ``hasChild`` (or the
    descriptor's ``child_predicate``) make the object a child of the
    subject; every other URI-to-URI triple except ``rdf:type`` becomes an
    edge labelled with the predicate's local name.
    """

    source_types = {'rdf_turtle', 'turtle', 'ttl'}

    def get_plugin_name(self) -> str:
        return "RDF Turtle Parser"

    def parse_string(self, contents: str, source: Mapping[str, Any]) -> DataSet:
        rdf_graph = RDFGraph()
        try:
            rdf_graph.parse(data=contents, format="turtle")
        except SyntaxError as exc:
            raise ValueError(f"Malformed Turtle: {exc}") from exc

        child_predicate = source.get('child_predicate', DEFAULT_CHILD_PREDICATE)
        triples = sorted(rdf_graph)

        # --- Pass 1: collect all URI subjects and objects as nodes ---
        node_uris = set()
        for subject, predicate, obj in triples:
            if isinstance(subject, URIRef):
                node_uris.add(str(subject))
            if isinstance(obj, URIRef) and predicate != RDF.type:
                node_uris.add(str(obj))

        # --- Pass 2: parent links and edges ---
        parents: Dict[str, str] = {}
        edges: List[Edge] = []
        for subject, predicate, obj in triples:
            if not (isinstance(subject, URIRef) and isinstance(obj, URIRef)):
                continue
            if predicate == RDF.type:
                continue
            name = self._local_name(str(predicate))
            if name == child_predicate:
                parents[str(obj)] = str(subject)
            else:
                edges.append(Edge(str(subject), str(obj), name))

        nodes = []
        for uri in sorted(node_uris):
            ref = URIRef(uri)
            label = rdf_graph.value(ref, RDFS.label)
            nodes.append(Node(
                uri,
                label=str(label) if label is not None else self._local_name(uri),
                parent=parents.get(uri),
                **self._extract_literal_attributes(rdf_graph, ref),
            ))
        return DataSet(nodes, edges)

    def _local_name(self, uri: str) -> str:
        """Extract the local fragment from a URI (after # or last /)."""
        if "#" in uri:
            return uri.split("#")[-1]
        return uri.rstrip("/").split("/")[-1]

    def _extract_literal_attributes(self, rdf_graph: RDFGraph, uri: URIRef) -> dict:
        """Collect Literal property values (except rdfs:label) as a flat dict."""
        attributes = {}
        for predicate, obj in rdf_graph.predicate_objects(uri):
            if isinstance(obj, Literal) and predicate != RDFS.label:
                key = self._local_name(str(predicate))
                if key in ('node_id', 'label', 'parent'):
                    key = f"rdf_{key}"
                attributes[key] = str(obj)
        return attributes
