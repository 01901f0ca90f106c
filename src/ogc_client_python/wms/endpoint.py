"""
WMS endpoint: capabilities retrieval and the resulting layer catalog.
"""

from __future__ import annotations

import asyncio
from typing import TYPE_CHECKING

from ogc_client_python.errors import (
    CapabilityParseError,
    EndpointError,
    EndpointNotReadyError,
    OgcClientError,
)
from ogc_client_python.telemetry import get_logger
from ogc_client_python.transport import HttpTransport
from ogc_client_python.wms.catalog import LayerCatalog
from ogc_client_python.wms.model import EndpointState
from ogc_client_python.wms.parser import parse_capabilities, read_document
from ogc_client_python.wms.resolver import resolve_layers
from ogc_client_python.wms.url import build_request_url
from ogc_client_python.wms.version import WmsVersion, detect_version

if TYPE_CHECKING:
    from collections.abc import Sequence

    from ogc_client_python.transport import Fetcher
    from ogc_client_python.wms.model import LayerDetail, LayerSummary, ServiceInfo
    from ogc_client_python.wms.parser import ParsedCapabilities

logger = get_logger(__name__)


class WmsEndpoint:
    """Client-side model of a WMS service.

    Construction starts the GetCapabilities request. ``is_ready()`` gives the
    one shared task for that request; once it has succeeded the accessors
    return the parsed model synchronously.

    Example:
        >>> endpoint = WmsEndpoint("https://example.com/ogc/wms")
        >>> await endpoint.is_ready()
        >>> endpoint.get_version()
        '1.3.0'
        >>> endpoint.get_layer_by_name("roads").available_crs
        ['EPSG:4326', 'EPSG:3857']
    """

    def __init__(self, url: str, *, fetch: Fetcher | None = None) -> None:
        """Initialize the endpoint and schedule the capabilities request.

        Args:
            url: Base service URL; existing query parameters are kept
            fetch: Transport collaborator ``async (url) -> response``;
                defaults to a new :class:`HttpTransport`
        """
        self._url = url
        self._transport: HttpTransport | None = None
        if fetch is None:
            self._transport = HttpTransport()
            fetch = self._transport.fetch
        self._fetch = fetch

        self._capabilities_url = build_request_url(url, "GetCapabilities")
        self._state = EndpointState.PENDING
        self._version: str | None = None
        self._grammar: WmsVersion | None = None
        self._capabilities: ParsedCapabilities | None = None
        self._catalog: LayerCatalog | None = None
        self._task: asyncio.Task[WmsEndpoint] | None = None

        try:
            asyncio.get_running_loop()
        except RuntimeError:
            # No running loop - the request starts on the first is_ready()
            pass
        else:
            self._start()

    def __repr__(self) -> str:
        return f"WmsEndpoint(url={self._url!r}, state={self._state.value})"

    @property
    def url(self) -> str:
        return self._url

    @property
    def capabilities_url(self) -> str:
        """GetCapabilities URL requested for this endpoint."""
        return self._capabilities_url

    @property
    def state(self) -> EndpointState:
        return self._state

    def _start(self) -> asyncio.Task[WmsEndpoint]:
        if self._task is None:
            logger.debug("Requesting capabilities", url=self._capabilities_url)
            self._task = asyncio.ensure_future(self._initialize())
            self._task.add_done_callback(self._settle)
        return self._task

    def is_ready(self) -> asyncio.Task[WmsEndpoint]:
        """Shared handle on the capabilities initialization.

        Every call returns the same task; awaiting it yields this endpoint
        or raises :class:`EndpointError`.
        """
        return self._start()

    async def _initialize(self) -> WmsEndpoint:
        try:
            await self._load()
        except BaseException:
            self._state = EndpointState.FAILED
            raise
        finally:
            if self._transport is not None:
                await self._transport.close()
        self._state = EndpointState.READY
        return self

    async def _load(self) -> None:
        try:
            response = await self._fetch(self._capabilities_url)
        except OgcClientError as e:
            raise EndpointError(e.message, 0, True, cause=e) from e
        except Exception as e:
            raise EndpointError(str(e), 0, True, cause=e) from e

        try:
            body = await response.text()
        except OgcClientError as e:
            raise EndpointError(e.message, response.status, False, cause=e) from e
        except Exception as e:
            raise EndpointError(str(e), response.status, False, cause=e) from e

        if not response.ok:
            raise EndpointError(
                f"Received an error with code {response.status}: {body}",
                response.status,
                False,
            )

        try:
            root = read_document(body)
            version = detect_version(root)
            capabilities = parse_capabilities(root, version.grammar)
        except CapabilityParseError as e:
            raise EndpointError(e.message, response.status, False, cause=e) from e

        self._version = version.declared
        self._grammar = version.grammar
        self._capabilities = capabilities
        self._catalog = LayerCatalog(resolve_layers(capabilities.layers))

    def _settle(self, task: asyncio.Task[WmsEndpoint]) -> None:
        if task.cancelled():
            self._state = EndpointState.FAILED
            return
        error = task.exception()
        if error is None:
            logger.info(
                "WMS endpoint ready",
                url=self._url,
                version=self._version,
                layers=len(self._catalog) if self._catalog else 0,
            )
        else:
            logger.warning(
                "WMS endpoint failed",
                url=self._url,
                error=str(error),
                http_status=getattr(error, "http_status", 0),
            )

    def _require_ready(self) -> None:
        if self._state is not EndpointState.READY:
            raise EndpointNotReadyError(
                f"WMS endpoint is not ready (state: {self._state.value})",
                state=self._state.value,
            ).with_hint("await endpoint.is_ready() first")

    def get_version(self) -> str:
        """Version string declared by the capabilities document."""
        self._require_ready()
        return self._version  # type: ignore[return-value]

    def get_service_info(self) -> ServiceInfo:
        self._require_ready()
        return self._capabilities.service  # type: ignore[union-attr]

    def get_layers(self) -> list[LayerSummary]:
        """Summary tree of all layers, one entry per top-level layer."""
        self._require_ready()
        return self._catalog.get_layers()  # type: ignore[union-attr]

    def get_layer_by_name(self, name: str) -> LayerDetail:
        """Resolved detail of a named layer.

        Raises:
            LayerNotFoundError: If no layer carries that name
        """
        self._require_ready()
        return self._catalog.get_layer_by_name(name)  # type: ignore[union-attr]

    def get_available_crs(self) -> list[str]:
        """Every CRS code declared in the layer tree, in document order."""
        self._require_ready()
        return list(self._capabilities.crs_codes)  # type: ignore[union-attr]

    def get_map_formats(self) -> list[str]:
        """Output formats advertised for GetMap."""
        self._require_ready()
        return list(self._capabilities.get_map_formats)  # type: ignore[union-attr]

    def get_map_url(
        self,
        layers: str | Sequence[str],
        width: int,
        height: int,
        crs: str,
        extent: Sequence[float],
        *,
        output_format: str = "image/png",
        styles: str | Sequence[str] | None = None,
        transparent: bool | None = None,
    ) -> str:
        """Build a GetMap URL for this endpoint.

        Args:
            layers: Layer name or names, drawn bottom to top
            width: Image width in pixels
            height: Image height in pixels
            crs: CRS code of ``extent``
            extent: (minx, miny, maxx, maxy) in the axis order of ``crs``
            output_format: Image MIME type
            styles: Style name per layer; empty means default styles
            transparent: Request a transparent background

        Returns:
            GetMap request URL
        """
        self._require_ready()
        layer_list = [layers] if isinstance(layers, str) else list(layers)
        if styles is None:
            style_list = [""] * len(layer_list)
        else:
            style_list = [styles] if isinstance(styles, str) else list(styles)

        crs_key = "CRS" if self._grammar is WmsVersion.V1_3_0 else "SRS"
        params = {
            "VERSION": self._version,
            "LAYERS": layer_list,
            "STYLES": style_list,
            crs_key: crs,
            "BBOX": list(extent),
            "WIDTH": width,
            "HEIGHT": height,
            "FORMAT": output_format,
            "TRANSPARENT": transparent,
        }
        base = self._capabilities.get_map_url or self._url  # type: ignore[union-attr]
        return build_request_url(base, "GetMap", params)
