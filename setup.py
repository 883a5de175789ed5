from setuptools import setup, find_packages

setup(
    name='graph-view-sync',
    version='1.0.0',
    description='Graph synchronization and view-state engine with pluggable data sources',
    packages=find_packages(exclude=['tests', 'tests.*']),
    install_requires=[
        'lxml',
        'rdflib>=6.0.0',
        'neo4j>=5.0',
    ],
    extras_require={
        'test': [
            'pytest',
            'pytest-asyncio',
        ],
    },
    entry_points={
        'graphview.data_source': [
            'json = data_source_plugin_json.plugin:JsonDataSourcePlugin',
            'xml = data_source_plugin_xml.plugin:XmlDataSourcePlugin',
            'rdf_turtle = data_source_plugin_rdf.plugin:RDFTurtleDataSourcePlugin',
            'neo4j = data_source_plugin_neo4j.plugin:Neo4jDataSourcePlugin',
        ],
    },
    python_requires='>=3.10',
)
