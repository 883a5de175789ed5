from lxml import etree
from typing import Any, List, Mapping, Optional

from graphview_api.models.dataset import DataSet
from graphview_api.models.edge import Edge
from graphview_api.models.node import Node
from graphview_api.plugins.base import FileDataSourcePlugin


class XmlDataSourcePlugin(FileDataSourcePlugin):
    """
    DataSourcePlugin for XML documents::

        <dataset>
          <node id="a" label="Group">
            <node id="b"/>            <!-- parent "a" implied by nesting -->
          </node>
          <node id="c" parent="a"/>
          <edge source="b" target="c" label="uses"/>
        </dataset>

    Remaining attributes of ``<node>`` are kept as node attributes.
    """

    source_types = {'xml'}

    def get_plugin_name(self) -> str:
        return "XML Parser"

    def parse_string(self, contents: str, source: Mapping[str, Any]) -> DataSet:
        parser = etree.XMLParser(resolve_entities=False, no_network=True, remove_comments=True)
        try:
            root = etree.fromstring(contents.encode('utf-8'), parser)
        except etree.XMLSyntaxError as exc:
            raise ValueError(f"Malformed XML: {exc}") from exc

        nodes: List[Node] = []
        edges: List[Edge] = []
        self._collect(root, None, nodes, edges)
        return DataSet(nodes, edges)

    def _collect(self,
                 element: etree._Element,
                 enclosing_id: Optional[str],
                 nodes: List[Node],
                 edges: List[Edge]) -> None:
        for child in element:
            if not isinstance(child.tag, str):
                continue  # processing instructions
            tag = etree.QName(child.tag).localname

            if tag == 'node':
                attrs = dict(child.attrib)
                if 'id' not in attrs:
                    raise KeyError(f"<node> without 'id' on line {child.sourceline}")
                node_id = attrs.pop('id')
                label = attrs.pop('label', None)
                parent = attrs.pop('parent', enclosing_id)
                attrs.pop('node_id', None)
                nodes.append(Node(node_id, label=label, parent=parent, **attrs))
                self._collect(child, node_id, nodes, edges)

            elif tag == 'edge':
                try:
                    source, target = child.attrib['source'], child.attrib['target']
                except KeyError as exc:
                    raise KeyError(f"<edge> without {exc} on line {child.sourceline}") from exc
                edges.append(Edge(source, target, child.attrib.get('label', '')))

            else:
                # Wrapper elements (<nodes>, <edges>, ...) keep the enclosing node
                self._collect(child, enclosing_id, nodes, edges)
