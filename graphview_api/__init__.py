"""
Graph View API - models and plugin contracts.
"""
from .models.node import Node
from .models.edge import Edge
from .models.dataset import DataSet
from .models.element import Element
from .models.view_state import ViewState, Position, Camera
from .plugins.base import DataSourcePlugin, FileDataSourcePlugin, RenderingEngine
from .exceptions import DataSourceError

__all__ = [
    'Node',
    'Edge',
    'DataSet',
    'Element',
    'ViewState',
    'Position',
    'Camera',
    'DataSourcePlugin',
    'FileDataSourcePlugin',
    'RenderingEngine',
    'DataSourceError',
]
