import pytest
from pathlib import Path

from data_source_plugin_json.plugin import JsonDataSourcePlugin
from data_source_plugin_rdf.plugin import RDFTurtleDataSourcePlugin
from data_source_plugin_xml.plugin import XmlDataSourcePlugin

FIXTURES_DIR = Path(__file__).parent / "fixtures"


@pytest.fixture
def json_plugin():
    return JsonDataSourcePlugin()


@pytest.fixture
def xml_plugin():
    return XmlDataSourcePlugin()


@pytest.fixture
def rdf_plugin():
    return RDFTurtleDataSourcePlugin()


@pytest.fixture
def json_path():
    return str(FIXTURES_DIR / "project.json")


@pytest.fixture
def xml_path():
    return str(FIXTURES_DIR / "project.xml")


@pytest.fixture
def ttl_path():
    return str(FIXTURES_DIR / "project.ttl")
