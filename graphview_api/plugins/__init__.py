"""
Plugin contracts - abstract base classes for data sources and rendering engines.
"""
from .base import DataSourcePlugin, FileDataSourcePlugin, RenderingEngine

__all__ = ['DataSourcePlugin', 'FileDataSourcePlugin', 'RenderingEngine']
