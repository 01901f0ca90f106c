#!/usr/bin/env python3
"""
Basic WMS endpoint example.

Loads the capabilities of a public WMS service, prints its layer tree and
builds a GetMap URL for one layer.

Usage:
    python examples/basic_wms.py [SERVICE_URL] [LAYER_NAME]
"""

import asyncio
import sys

from ogc_client_python import EndpointError, LayerNotFoundError, WmsEndpoint
from ogc_client_python.telemetry import LogLevel, OgcLogger

DEFAULT_URL = "https://geoservices.brgm.fr/geologie"
DEFAULT_LAYER = "SCAN_F_GEOL1M"


def print_tree(layers, depth: int = 0) -> None:
    for layer in layers:
        print(f"{'  ' * depth}- {layer.title} [{layer.name or 'unnamed'}]")
        print_tree(layer.children, depth + 1)


async def main() -> None:
    """Run basic WMS example."""
    if not OgcLogger.configure_from_env():
        OgcLogger.configure(level=LogLevel.INFO)

    url = sys.argv[1] if len(sys.argv) > 1 else DEFAULT_URL
    layer_name = sys.argv[2] if len(sys.argv) > 2 else DEFAULT_LAYER

    endpoint = WmsEndpoint(url)
    try:
        await endpoint.is_ready()
    except EndpointError as e:
        print(f"Could not load capabilities (status {e.http_status}): {e.message}")
        return

    service = endpoint.get_service_info()
    print(f"{service.title} (WMS {endpoint.get_version()})")
    print(f"Fees: {service.fees} / Constraints: {service.constraints}")
    print()
    print_tree(endpoint.get_layers())
    print()

    try:
        layer = endpoint.get_layer_by_name(layer_name)
    except LayerNotFoundError as e:
        print(e.message)
        return

    print(f"{layer.title}: {len(layer.available_crs)} CRS, styles {[s.name for s in layer.styles]}")
    crs, extent = next(iter(layer.bounding_boxes.items()), ("CRS:84", (-180, -90, 180, 90)))
    print(endpoint.get_map_url(layer_name, 800, 600, crs, extent))


if __name__ == "__main__":
    asyncio.run(main())
