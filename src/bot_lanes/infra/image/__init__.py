"""Image backend implementations for bot_lanes."""

from bot_lanes.infra.image.flux_client import FluxImageClient

__all__ = ["FluxImageClient"]
