from __future__ import annotations

from dataclasses import dataclass

from shared.constants import ProviderId


@dataclass(frozen=True)
class TileKey:
    """Identity of one raster tile of one provider."""

    provider: ProviderId
    x: int
    y: int
    z: int

    def __str__(self) -> str:
        return f'{self.provider.value}-{self.x}-{self.y}-{self.z}'


def tile_key(provider: ProviderId | str, x: int, y: int, z: int) -> TileKey:
    """Build a key; raises ValueError for an unknown provider id."""
    return TileKey(ProviderId(provider), int(x), int(y), int(z))
