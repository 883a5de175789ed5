from .plugin import Neo4jDataSourcePlugin

__all__ = ['Neo4jDataSourcePlugin']
