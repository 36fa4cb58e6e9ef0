"""
Pytest configuration and fixtures for layer factory tests.
"""

from unittest.mock import Mock

import httpx
import pytest

from ogc_layer_factory.capabilities import CapabilitiesClient
from ogc_layer_factory.layers import get_layer_manager
from ogc_layer_factory.services import LayerFactory

WMS_ADDRESS = "https://neo.example.org/wms?SERVICE=WMS&REQUEST=GetCapabilities&VERSION=1.3.0"
WMTS_ADDRESS = "https://tiles.example.org/service/wmts?SERVICE=WMTS&REQUEST=GetCapabilities"

WMS_130_TEMPLATE = """<?xml version="1.0" encoding="UTF-8"?>
<WMS_Capabilities version="1.3.0" xmlns="http://www.opengis.net/wms"
                  xmlns:xlink="http://www.w3.org/1999/xlink">
  <Service>
    <Name>WMS</Name>
    <Title>NASA Earth Observations</Title>
    <OnlineResource xlink:type="simple" xlink:href="https://neo.example.org/wms"/>
    {layer_limit}
    <MaxWidth>4096</MaxWidth>
    <MaxHeight>4096</MaxHeight>
  </Service>
  <Capability>
    <Request>
      <GetCapabilities>
        <Format>text/xml</Format>
      </GetCapabilities>
      <GetMap>
        <Format>image/jpeg</Format>
        <Format>image/png</Format>
        <DCPType>
          <HTTP>
            <Get>
              <OnlineResource xlink:type="simple" xlink:href="https://neo.example.org/wms/getmap?"/>
            </Get>
          </HTTP>
        </DCPType>
      </GetMap>
    </Request>
    <Layer>
      <Title>NEO Root</Title>
      <CRS>CRS:84</CRS>
      <CRS>EPSG:4326</CRS>
      <EX_GeographicBoundingBox>
        <westBoundLongitude>-180</westBoundLongitude>
        <eastBoundLongitude>180</eastBoundLongitude>
        <southBoundLatitude>-90</southBoundLatitude>
        <northBoundLatitude>90</northBoundLatitude>
      </EX_GeographicBoundingBox>
      <Layer queryable="1">
        <Name>A</Name>
        <Title>Layer A</Title>
        <CRS>EPSG:3857</CRS>
        <EX_GeographicBoundingBox>
          <westBoundLongitude>-10</westBoundLongitude>
          <eastBoundLongitude>20</eastBoundLongitude>
          <southBoundLatitude>30</southBoundLatitude>
          <northBoundLatitude>60</northBoundLatitude>
        </EX_GeographicBoundingBox>
        <Dimension name="time" units="ISO8601">2020-01-01,2020-02-01</Dimension>
      </Layer>
      <Layer>
        <Name>B</Name>
        <Title>Layer B</Title>
      </Layer>
      <Layer>
        <Title>Group</Title>
        <Layer>
          <Name>C</Name>
          <Title>Layer C</Title>
        </Layer>
      </Layer>
    </Layer>
  </Capability>
</WMS_Capabilities>
"""

WMS_111_XML = """<?xml version="1.0" encoding="UTF-8"?>
<WMT_MS_Capabilities version="1.1.1">
  <Service>
    <Name>OGC:WMS</Name>
    <Title>Legacy Service</Title>
    <OnlineResource xmlns:xlink="http://www.w3.org/1999/xlink" xlink:href="http://legacy.example.org/wms"/>
  </Service>
  <Capability>
    <Request>
      <GetMap>
        <Format>image/gif</Format>
        <DCPType>
          <HTTP>
            <Get>
              <OnlineResource xmlns:xlink="http://www.w3.org/1999/xlink" xlink:href="http://legacy.example.org/wms?"/>
            </Get>
          </HTTP>
        </DCPType>
      </GetMap>
    </Request>
    <Layer>
      <Title>Legacy Root</Title>
      <SRS>EPSG:4326 EPSG:900913</SRS>
      <LatLonBoundingBox minx="-20" miny="-10" maxx="40" maxy="50"/>
      <Layer>
        <Name>rivers</Name>
        <Title>Rivers</Title>
        <Extent name="time">2019-05-01</Extent>
      </Layer>
    </Layer>
  </Capability>
</WMT_MS_Capabilities>
"""

WMTS_XML = """<?xml version="1.0" encoding="UTF-8"?>
<Capabilities xmlns="http://www.opengis.net/wmts/1.0"
              xmlns:ows="http://www.opengis.net/ows/1.1"
              xmlns:xlink="http://www.w3.org/1999/xlink"
              version="1.0.0">
  <ows:ServiceIdentification>
    <ows:Title>DLR Tiles</ows:Title>
    <ows:ServiceType>OGC WMTS</ows:ServiceType>
    <ows:ServiceTypeVersion>1.0.0</ows:ServiceTypeVersion>
  </ows:ServiceIdentification>
  <ows:OperationsMetadata>
    <ows:Operation name="GetCapabilities">
      <ows:DCP>
        <ows:HTTP>
          <ows:Get xlink:href="https://tiles.example.org/service/wmts?"/>
        </ows:HTTP>
      </ows:DCP>
    </ows:Operation>
    <ows:Operation name="GetTile">
      <ows:DCP>
        <ows:HTTP>
          <ows:Get xlink:href="https://tiles.example.org/service/rest/">
            <ows:Constraint name="GetEncoding">
              <ows:AllowedValues>
                <ows:Value>RESTful</ows:Value>
              </ows:AllowedValues>
            </ows:Constraint>
          </ows:Get>
          <ows:Get xlink:href="https://tiles.example.org/service/wmts?">
            <ows:Constraint name="GetEncoding">
              <ows:AllowedValues>
                <ows:Value>KVP</ows:Value>
              </ows:AllowedValues>
            </ows:Constraint>
          </ows:Get>
        </ows:HTTP>
      </ows:DCP>
    </ows:Operation>
  </ows:OperationsMetadata>
  <Contents>
    <Layer>
      <ows:Title>Hillshade</ows:Title>
      <ows:WGS84BoundingBox>
        <ows:LowerCorner>-180.0 -90.0</ows:LowerCorner>
        <ows:UpperCorner>180.0 90.0</ows:UpperCorner>
      </ows:WGS84BoundingBox>
      <ows:Identifier>hillshade</ows:Identifier>
      <Style isDefault="false">
        <ows:Identifier>light</ows:Identifier>
      </Style>
      <Style isDefault="true">
        <ows:Identifier>default</ows:Identifier>
      </Style>
      <Format>image/jpeg</Format>
      <Format>image/png</Format>
      <TileMatrixSetLink>
        <TileMatrixSet>EPSG:4326</TileMatrixSet>
      </TileMatrixSetLink>
      <TileMatrixSetLink>
        <TileMatrixSet>EPSG:3857</TileMatrixSet>
      </TileMatrixSetLink>
      <ResourceURL format="image/png" resourceType="tile"
                   template="https://tiles.example.org/service/rest/hillshade/{Style}/{TileMatrixSet}/{TileMatrix}/{TileRow}/{TileCol}.png"/>
    </Layer>
    <Layer>
      <ows:Title>Roads</ows:Title>
      <ows:WGS84BoundingBox>
        <ows:LowerCorner>5.5 47.0</ows:LowerCorner>
        <ows:UpperCorner>15.5 55.0</ows:UpperCorner>
      </ows:WGS84BoundingBox>
      <ows:Identifier>roads</ows:Identifier>
      <Style>
        <ows:Identifier>basic</ows:Identifier>
      </Style>
      <Format>image/jpeg</Format>
      <TileMatrixSetLink>
        <TileMatrixSet>UTM32</TileMatrixSet>
      </TileMatrixSetLink>
    </Layer>
    <TileMatrixSet>
      <ows:Identifier>EPSG:4326</ows:Identifier>
      <ows:SupportedCRS>urn:ogc:def:crs:EPSG::4326</ows:SupportedCRS>
      <TileMatrix>
        <ows:Identifier>EPSG:4326:0</ows:Identifier>
        <ScaleDenominator>279541132.0143589</ScaleDenominator>
        <TopLeftCorner>90.0 -180.0</TopLeftCorner>
        <TileWidth>256</TileWidth>
        <TileHeight>256</TileHeight>
        <MatrixWidth>2</MatrixWidth>
        <MatrixHeight>1</MatrixHeight>
      </TileMatrix>
    </TileMatrixSet>
  </Contents>
</Capabilities>
"""


def build_wms_xml(layer_limit=None) -> str:
    """Render the WMS 1.3.0 capabilities document, optionally with a LayerLimit."""
    limit = f"<LayerLimit>{layer_limit}</LayerLimit>" if layer_limit is not None else ""
    return WMS_130_TEMPLATE.format(layer_limit=limit)


@pytest.fixture
def wms_xml():
    """WMS 1.3.0 document advertising layers A, B and nested C, without a layer limit."""
    return build_wms_xml()


@pytest.fixture
def wms_xml_limited():
    """WMS 1.3.0 document advertising a layer limit of 1."""
    return build_wms_xml(layer_limit=1)


@pytest.fixture
def wms_111_xml():
    return WMS_111_XML


@pytest.fixture
def wmts_xml():
    return WMTS_XML


class RecordingTransport:
    """Serve canned responses and record every request issued."""

    def __init__(self, handler):
        self.handler = handler
        self.requests = []

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        return self.handler(request)


def respond_with(body, status_code=200):
    """Handler returning the same body for every request."""
    def handler(request):
        return httpx.Response(status_code, content=body.encode("utf-8") if isinstance(body, str) else body)
    return handler


@pytest.fixture
def make_factory():
    """Create a LayerFactory whose HTTP traffic goes through a recording mock transport."""
    def _make(handler, **kwargs):
        transport = RecordingTransport(handler)
        http_client = httpx.AsyncClient(transport=httpx.MockTransport(transport))
        factory = LayerFactory(http_client=CapabilitiesClient(http_client=http_client), **kwargs)
        return factory, transport
    return _make


@pytest.fixture
def callback():
    """Completion callback mock."""
    return Mock()


@pytest.fixture
def clean_layer_manager():
    """Reset the global layer manager around a test."""
    manager = get_layer_manager()
    manager.clear()
    yield manager
    manager.clear()
