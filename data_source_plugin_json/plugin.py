import json
import logging
from typing import Any, Mapping

from graphview_api.exceptions import DataSourceError
from graphview_api.models.dataset import DataSet
from graphview_api.plugins.base import FileDataSourcePlugin

logger = logging.getLogger(__name__)


class JsonDataSourcePlugin(FileDataSourcePlugin):
    """
    DataSourcePlugin for data sets in the persisted JSON layout::

        {"nodes": {"<id>": {"label": "...", "parent": "<id>"}},
         "edges": [{"source": "<id>", "target": "<id>", "label": "..."}]}

    The descriptor either carries ``nodes`` / ``edges`` inline, embeds the
    document text (``contents``) or points to a file (``path``).
    """

    source_types = {'json', 'file'}

    def get_plugin_name(self) -> str:
        return "JSON Parser"

    async def reload(self, source: Mapping[str, Any]) -> DataSet:
        if 'nodes' in source or 'edges' in source:
            try:
                return DataSet.from_dict(source)
            except (ValueError, TypeError, KeyError) as exc:
                raise DataSourceError(
                    f"{self.get_plugin_name()}: invalid inline data set: {exc}",
                    str(source.get('type', ''))) from exc
        return await super().reload(source)

    def parse_string(self, contents: str, source: Mapping[str, Any]) -> DataSet:
        data = json.loads(contents)
        # A bare list is read as a list of node objects carrying their own "id"
        if isinstance(data, list):
            data = {'nodes': {str(item['id']): {k: v for k, v in item.items() if k != 'id'}
                              for item in data}}
        dataset = DataSet.from_dict(data)
        logger.debug("Parsed %r from %s", dataset, source.get('path', '<inline>'))
        return dataset
