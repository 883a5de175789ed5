"""
Data models shared by the platform and its plugins.
"""
from .node import Node
from .edge import Edge
from .dataset import DataSet
from .element import Element
from .view_state import ViewState, Position, Camera

__all__ = ['Node', 'Edge', 'DataSet', 'Element', 'ViewState', 'Position', 'Camera']
