"""Tests for capabilities parsing."""

import pytest

from ogc_client_python.errors import CapabilityParseError
from ogc_client_python.wms.model import (
    DEFAULT_CONSTRAINTS,
    DEFAULT_FEES,
    LayerAttribution,
    LayerStyle,
    ServiceInfo,
)
from ogc_client_python.wms.parser import (
    Wms111Parser,
    Wms130Parser,
    get_parser,
    parse_capabilities,
    read_document,
)
from ogc_client_python.wms.version import WmsVersion, detect_version

MINIMAL_130 = """<?xml version="1.0" encoding="UTF-8"?>
<WMS_Capabilities version="1.3.0" xmlns="http://www.opengis.net/wms">
  <Service><Name>WMS</Name><Title>Minimal</Title></Service>
  <Capability>
    <Layer>
      <Title>Group</Title>
      <CRS>EPSG:4326</CRS>
      <Layer><Name>a</Name><Title>A</Title></Layer>
    </Layer>
  </Capability>
</WMS_Capabilities>
"""


class TestReadDocument:
    """Tests for read_document."""

    def test_parses_text(self, capabilities_130: str) -> None:
        """Test parsing a text document."""
        root = read_document(capabilities_130)
        assert root.get("version") == "1.3.0"

    def test_text_overrides_declared_encoding(self) -> None:
        """Already-decoded text is read as is, whatever the declaration says."""
        text = (
            '<?xml version="1.0" encoding="ISO-8859-1"?>'
            '<WMT_MS_Capabilities version="1.1.1"><Service><Title>Straße</Title>'
            "</Service></WMT_MS_Capabilities>"
        )
        root = read_document(text)
        assert root.findtext("Service/Title") == "Straße"

    def test_parses_bytes(self) -> None:
        """Test parsing a bytes document."""
        root = read_document(b'<WMT_MS_Capabilities version="1.1.1"/>')
        assert root.tag == "WMT_MS_Capabilities"

    def test_malformed_xml(self) -> None:
        """Test malformed XML."""
        with pytest.raises(CapabilityParseError) as exc_info:
            read_document("<WMS_Capabilities><Service>")
        assert "Invalid capabilities document" in exc_info.value.message

    def test_empty_body(self) -> None:
        """Test an empty body."""
        with pytest.raises(CapabilityParseError):
            read_document("")

    def test_service_exception_report(self) -> None:
        """Test a service exception report."""
        report = (
            '<ServiceExceptionReport version="1.3.0" xmlns="http://www.opengis.net/ogc">'
            '<ServiceException code="InvalidParameterValue">'
            "  Unknown map file  </ServiceException>"
            "</ServiceExceptionReport>"
        )
        with pytest.raises(CapabilityParseError) as exc_info:
            read_document(report)
        assert exc_info.value.message == "Service returned an exception: Unknown map file"
        assert exc_info.value.element == "ServiceExceptionReport"


class TestGetParser:
    """Tests for grammar dispatch."""

    def test_dispatch(self) -> None:
        """Test grammar dispatch."""
        assert get_parser(WmsVersion.V1_1_1) is Wms111Parser
        assert get_parser(WmsVersion.V1_3_0) is Wms130Parser


class TestParse130:
    """Tests for the WMS 1.3.0 grammar."""

    @pytest.fixture
    def parsed(self, capabilities_130: str):
        return parse_capabilities(read_document(capabilities_130), WmsVersion.V1_3_0)

    def test_service(self, parsed) -> None:
        """Test service metadata."""
        assert parsed.service == ServiceInfo(
            name="WMS",
            title="GéoServices : géologie, hydrogéologie et gravimétrie",
            abstract=(
                "Ensemble des services d'accès aux données sur la géologie, "
                "l'hydrogéologie et la gravimétrie, diffusées par le BRGM"
            ),
            fees="no conditions apply",
            constraints="None",
        )

    def test_root_layer(self, parsed) -> None:
        """Test the root layer."""
        root = parsed.root_layer
        assert len(parsed.layers) == 1
        assert root.name == "GEOSERVICES_GEOLOGIE"
        assert root.crs == ["EPSG:4326", "CRS:84", "EPSG:3857", "EPSG:4171", "EPSG:2154"]
        assert root.styles == [LayerStyle(name="default", title="default")]
        assert root.attribution == LayerAttribution(
            title="Brgm",
            url="http://www.brgm.fr/",
            logo_url="http://mapsref.brgm.fr/legendes/brgm_logo.png",
        )

    def test_geographic_box_is_not_a_crs_box(self, parsed) -> None:
        """Test EX_GeographicBoundingBox is not keyed by CRS."""
        assert parsed.root_layer.bounding_boxes == {}

    def test_child_declares_only_own_values(self, parsed) -> None:
        """Test parsed children hold only their own values."""
        geologie = parsed.root_layer.children[0]
        assert geologie.name == "GEOLOGIE"
        assert geologie.crs == []
        assert geologie.styles == []
        assert geologie.attribution is None
        assert geologie.queryable is False
        assert [child.name for child in geologie.children] == [
            "SCAN_F_GEOL1M",
            "SCAN_F_GEOL250",
            "SCAN_D_GEOL50",
        ]

    def test_bounding_boxes_keyed_by_crs(self, parsed) -> None:
        """Test bounding boxes keyed by CRS."""
        scan1m = parsed.root_layer.children[0].children[0]
        assert scan1m.bounding_boxes == {
            "EPSG:4326": (41.0857, -5.86764, 51.5548, 11.0789),
            "CRS:84": (-5.86764, 41.0857, 11.0789, 51.5548),
        }
        assert scan1m.queryable is True

    def test_style_legend_url(self, parsed) -> None:
        """Test style legend URL."""
        scan1m = parsed.root_layer.children[0].children[0]
        assert scan1m.styles[0].legend_url == (
            "http://mapsref.brgm.fr/legendes/geoservices/Geologie1000_legende.jpg"
        )

    def test_crs_codes(self, parsed) -> None:
        """Test CRS codes across the tree."""
        assert parsed.crs_codes == (
            "EPSG:4326",
            "CRS:84",
            "EPSG:3857",
            "EPSG:4171",
            "EPSG:2154",
            "EPSG:27572",
        )

    def test_get_map_operation(self, parsed) -> None:
        """Test GetMap resource and formats."""
        assert parsed.get_map_url == "http://geoservices.brgm.fr/geologie?"
        assert parsed.get_map_formats == ("image/png", "image/jpeg", "image/gif")

    def test_unnamed_layer_is_kept(self) -> None:
        """Test unnamed layers are kept."""
        parsed = parse_capabilities(read_document(MINIMAL_130), WmsVersion.V1_3_0)
        assert parsed.root_layer.name is None
        assert parsed.root_layer.title == "Group"
        assert parsed.root_layer.children[0].name == "a"

    def test_missing_optional_service_fields(self) -> None:
        """Test defaults for missing service fields."""
        parsed = parse_capabilities(read_document(MINIMAL_130), WmsVersion.V1_3_0)
        assert parsed.service.abstract == ""
        assert parsed.service.fees == DEFAULT_FEES
        assert parsed.service.constraints == DEFAULT_CONSTRAINTS
        assert parsed.get_map_url is None
        assert parsed.get_map_formats == ()

    def test_missing_service(self) -> None:
        """Test a document without Service."""
        doc = (
            '<WMS_Capabilities version="1.3.0" xmlns="http://www.opengis.net/wms">'
            "<Capability><Layer><Title>x</Title></Layer></Capability>"
            "</WMS_Capabilities>"
        )
        with pytest.raises(CapabilityParseError) as exc_info:
            parse_capabilities(read_document(doc), WmsVersion.V1_3_0)
        assert exc_info.value.element == "Service"

    def test_missing_root_layer(self) -> None:
        """Test a document without a root layer."""
        doc = (
            '<WMS_Capabilities version="1.3.0" xmlns="http://www.opengis.net/wms">'
            "<Service><Name>WMS</Name></Service><Capability/>"
            "</WMS_Capabilities>"
        )
        with pytest.raises(CapabilityParseError) as exc_info:
            parse_capabilities(read_document(doc), WmsVersion.V1_3_0)
        assert exc_info.value.element == "Capability/Layer"
        assert exc_info.value.version == "1.3.0"

    def test_wrong_grammar_names_namespace(self, capabilities_111: str) -> None:
        """1.1.1 elements carry no namespace, so the 1.3.0 grammar rejects the root."""
        with pytest.raises(CapabilityParseError) as exc_info:
            parse_capabilities(read_document(capabilities_111), WmsVersion.V1_3_0)
        assert exc_info.value.message == (
            "Expected namespace http://www.opengis.net/wms for WMS 1.3.0, found none"
        )
        assert exc_info.value.element == "WMT_MS_Capabilities"

    def test_declared_130_without_namespace(self) -> None:
        """Test a 1.3.0 document missing its default namespace is rejected clearly."""
        doc = (
            '<WMS_Capabilities version="1.3.0">'
            "<Service><Name>WMS</Name></Service>"
            "<Capability><Layer><Title>x</Title></Layer></Capability>"
            "</WMS_Capabilities>"
        )
        root = read_document(doc)
        version = detect_version(root)
        with pytest.raises(CapabilityParseError) as exc_info:
            parse_capabilities(root, version.grammar)
        assert "Expected namespace http://www.opengis.net/wms" in exc_info.value.message
        assert exc_info.value.version == "1.3.0"


class TestParse111:
    """Tests for the WMS 1.1.1 grammar."""

    @pytest.fixture
    def parsed(self, capabilities_111: str):
        return parse_capabilities(read_document(capabilities_111), WmsVersion.V1_1_1)

    def test_service_defaults(self, parsed) -> None:
        """Test service defaults."""
        assert parsed.service == ServiceInfo(
            name="OGC:WMS",
            title="Demo street map",
            abstract="",
            fees="None",
            constraints="None",
        )

    def test_srs_lists_are_split(self, parsed) -> None:
        """Test space-separated SRS lists are split."""
        assert parsed.root_layer.crs == ["EPSG:4326", "EPSG:3857", "EPSG:31467"]

    def test_lat_lon_box_normalized(self, parsed) -> None:
        """Test LatLonBoundingBox is stored under CRS:84."""
        assert parsed.root_layer.bounding_boxes == {
            "CRS:84": (5.8, 47.2, 15.1, 55.1),
            "EPSG:4326": (5.8, 47.2, 15.1, 55.1),
        }

    def test_child_boxes(self, parsed) -> None:
        """Test child bounding boxes."""
        roads = parsed.root_layer.children[0]
        assert roads.name == "roads"
        assert roads.abstract == "Road network (Straßennetz)"
        assert roads.bounding_boxes == {
            "CRS:84": (6.1, 47.5, 14.9, 54.9),
            "EPSG:3857": (679000.0, 6025000.0, 1658000.0, 7350000.0),
        }

    def test_unnamed_root(self, parsed) -> None:
        """Test the unnamed root layer."""
        assert parsed.root_layer.name is None
        assert parsed.root_layer.title == "Demo layers"

    def test_xlink_in_local_namespace_declarations(self, parsed) -> None:
        """Test xlink declared on nested elements."""
        assert parsed.root_layer.attribution == LayerAttribution(
            title="Demo contributors",
            url="https://demo.example.org/copyright",
        )
        landuse = parsed.root_layer.children[1]
        assert landuse.styles[0].legend_url == "https://demo.example.org/legend/landuse.png"
        assert [style.name for style in landuse.styles] == ["landuse_default", "landuse_dark"]

    def test_get_map_operation(self, parsed) -> None:
        """Test GetMap resource and formats."""
        assert parsed.get_map_url == "https://demo.example.org/cgi-bin/mapserv?map=demo.map&"
        assert parsed.get_map_formats == ("image/png", "image/gif")

    def test_crs_codes(self, parsed) -> None:
        """Test CRS codes across the tree."""
        assert parsed.crs_codes == ("EPSG:4326", "EPSG:3857", "EPSG:31467", "EPSG:25832")
