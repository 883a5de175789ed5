from .plugin import XmlDataSourcePlugin

__all__ = ['XmlDataSourcePlugin']
