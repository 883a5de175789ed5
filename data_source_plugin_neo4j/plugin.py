import logging
from typing import Any, Callable, Dict, Mapping, Optional

import neo4j
from neo4j import AsyncGraphDatabase
from neo4j.exceptions import DriverError, Neo4jError
from neo4j.graph import Node as Neo4jNode, Path, Relationship

from graphview_api.exceptions import DataSourceError
from graphview_api.models.dataset import DataSet
from graphview_api.models.edge import Edge
from graphview_api.models.node import Node
from graphview_api.plugins.base import DataSourcePlugin

logger = logging.getLogger(__name__)

# Node / relationship property used as display label
NAME = 'name'
# Relationship type read as "start node is the parent of end node"
CHILD = 'HAS_CHILD'


def _default_driver_factory(url: str, user: str, password: str):
    auth = (user, password) if user or password else None
    return AsyncGraphDatabase.driver(url, auth=auth)


class _ResultCollector:
    """Accumulates query records into nodes, edges and parent links."""

    def __init__(self):
        self.nodes: Dict[str, Node] = {}
        self.edges: Dict[str, Edge] = {}
        self.parents: Dict[str, str] = {}

    def add_record(self, record) -> None:
        for key in record.keys():
            value = record[key]
            if isinstance(value, list):
                for item in value:
                    self._add_value(item, record)
            else:
                self._add_value(value, record)

    def _add_value(self, value: Any, record) -> None:
        if isinstance(value, Relationship) and value.type == CHILD:
            self.parents[value.end_node.element_id] = value.start_node.element_id

        elif isinstance(value, Relationship):
            label = value.get(NAME) or value.type
            self.edges[value.element_id] = Edge(value.start_node.element_id,
                                                value.end_node.element_id,
                                                str(label))

        elif isinstance(value, Neo4jNode):
            label = value.get(NAME) or value.element_id
            attributes = {k: v for k, v in value.items()
                          if k not in (NAME, 'node_id', 'label', 'parent')}
            attributes['labels'] = sorted(value.labels)
            self.nodes[value.element_id] = Node(value.element_id, label=str(label), **attributes)

        elif isinstance(value, Path):
            for node in value.nodes:
                self._add_value(node, record)
            for relationship in value.relationships:
                self._add_value(relationship, record)

        else:
            logger.warning("Failure to handle query result value %r in %r", value, record)

    def to_dataset(self) -> DataSet:
        nodes = [
            Node(node_id, label=node.label, parent=self.parents.get(node_id),
                 **node.get_all_attributes())
            for node_id, node in self.nodes.items()
        ]
        return DataSet(nodes, list(self.edges.values()))


class Neo4jDataSourcePlugin(DataSourcePlugin):
    """
    DataSourcePlugin running a read-only Cypher query against the active
    Neo4j server from the stored settings.

    Descriptor::

        {"type": "neo4j", "query": "MATCH (n)-[r]->(m) RETURN n, r, m"}
        {"type": "neo4j", "query_id": "<id of a saved query>"}

    ``HAS_CHILD`` relationships become parent links; every other
    relationship becomes an edge, once per relationship even when several
    rows return it.  Lists and paths in the result are
    unpacked.
    """

    def __init__(self, driver_factory: Optional[Callable[[str, str, str], Any]] = None):
        self._driver_factory = driver_factory or _default_driver_factory
        self._settings = None

    def get_plugin_name(self) -> str:
        return "Neo4j Query"

    def match(self, source_type: Optional[str]) -> bool:
        return source_type == 'neo4j'

    def attach(self, settings: Any) -> None:
        self._settings = settings

    def _resolve_query(self, source: Mapping[str, Any]) -> str:
        query = source.get('query')
        if not query and source.get('query_id') and self._settings is not None:
            saved = self._settings.find_query(source['query_id'])
            if saved is None:
                raise DataSourceError(f"Saved query '{source['query_id']}' not found.", 'neo4j')
            query = saved.query_string
        if not query:
            raise DataSourceError("Neo4j descriptor needs 'query' or 'query_id'.", 'neo4j')
        return query

    async def reload(self, source: Mapping[str, Any]) -> DataSet:
        server = self._settings.active_neo4j_server() if self._settings is not None else None
        if server is None:
            raise DataSourceError("No active Neo4j server configured.", 'neo4j')
        query = self._resolve_query(source)

        collector = _ResultCollector()
        driver = self._driver_factory(server.url, server.user, server.password)
        try:
            async with driver.session(default_access_mode=neo4j.READ_ACCESS) as session:
                result = await session.run(query, source.get('parameters') or {})
                async for record in result:
                    collector.add_record(record)
        except (Neo4jError, DriverError, OSError) as exc:
            raise DataSourceError(f"Query failed on '{server.name or server.url}': {exc}",
                                  'neo4j') from exc
        finally:
            await driver.close()

        dataset = collector.to_dataset()
        logger.info("Neo4j query on '%s' → %r", server.name or server.url, dataset)
        return dataset
