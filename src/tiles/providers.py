"""Registry of public XYZ tile servers and display modes.

Providers are defined once at import time and never change. A display mode
maps to exactly one provider; providers used only for overlays (labels) are
reachable by id alone.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from types import MappingProxyType
from typing import TYPE_CHECKING

from shared.constants import ProviderId, TileMode

if TYPE_CHECKING:
    from collections.abc import Mapping

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class TileProvider:
    """Static description of a tile server."""

    id: ProviderId
    name: str
    url_template: str
    attribution: str
    has_labels: bool
    max_zoom: int
    subdomains: tuple[str, ...] = ()

    def url(self, x: int, y: int, z: int) -> str:
        return build_url(self, x, y, z)


PROVIDERS: Mapping[ProviderId, TileProvider] = MappingProxyType({
    ProviderId.OSM_STANDARD: TileProvider(
        id=ProviderId.OSM_STANDARD,
        name='OpenStreetMap',
        url_template='https://tile.openstreetmap.org/{z}/{x}/{y}.png',
        attribution='© OpenStreetMap contributors',
        has_labels=True,
        max_zoom=19,
    ),
    ProviderId.OSM_HOT: TileProvider(
        id=ProviderId.OSM_HOT,
        name='Humanitarian OSM',
        url_template='https://tile-{s}.openstreetmap.fr/hot/{z}/{x}/{y}.png',
        attribution=(
            '© OpenStreetMap contributors, '
            'Tiles style by Humanitarian OpenStreetMap Team'
        ),
        has_labels=True,
        max_zoom=19,
        subdomains=('a', 'b', 'c'),
    ),
    ProviderId.CARTODB_LIGHT: TileProvider(
        id=ProviderId.CARTODB_LIGHT,
        name='CartoDB Light',
        url_template='https://{s}.basemaps.cartocdn.com/light_all/{z}/{x}/{y}.png',
        attribution='© OpenStreetMap contributors, © CARTO',
        has_labels=True,
        max_zoom=19,
        subdomains=('a', 'b', 'c', 'd'),
    ),
    ProviderId.CARTODB_DARK: TileProvider(
        id=ProviderId.CARTODB_DARK,
        name='CartoDB Dark',
        url_template='https://{s}.basemaps.cartocdn.com/dark_all/{z}/{x}/{y}.png',
        attribution='© OpenStreetMap contributors, © CARTO',
        has_labels=True,
        max_zoom=19,
        subdomains=('a', 'b', 'c', 'd'),
    ),
    ProviderId.ESRI_SATELLITE: TileProvider(
        id=ProviderId.ESRI_SATELLITE,
        name='Esri Satellite',
        # ArcGIS MapServer orders the path as z/y/x
        url_template=(
            'https://server.arcgisonline.com/ArcGIS/rest/services/'
            'World_Imagery/MapServer/tile/{z}/{y}/{x}'
        ),
        attribution='© Esri, Maxar, Earthstar Geographics',
        has_labels=False,
        max_zoom=18,
    ),
    ProviderId.ESRI_LABELS: TileProvider(
        id=ProviderId.ESRI_LABELS,
        name='Esri Labels',
        url_template=(
            'https://server.arcgisonline.com/ArcGIS/rest/services/'
            'Reference/World_Boundaries_and_Places/MapServer/tile/{z}/{y}/{x}'
        ),
        attribution='© Esri',
        has_labels=True,
        max_zoom=18,
    ),
})

MODE_PROVIDERS: Mapping[TileMode, ProviderId] = MappingProxyType({
    TileMode.STANDARD: ProviderId.OSM_STANDARD,
    TileMode.SATELLITE: ProviderId.ESRI_SATELLITE,
    TileMode.DARK: ProviderId.CARTODB_DARK,
})

# Самый надёжный источник; на него уходит единственная повторная попытка
DEFAULT_PROVIDER = ProviderId.OSM_STANDARD


def resolve_mode(mode: TileMode | str) -> TileMode:
    """Normalize a display mode; unknown values become STANDARD."""
    try:
        return TileMode(mode)
    except ValueError:
        logger.debug('Unknown tile mode %r, using %s', mode, TileMode.STANDARD.value)
        return TileMode.STANDARD


def resolve_provider(mode: TileMode | str) -> TileProvider:
    """Returns the provider shown for a display mode. Never fails."""
    return PROVIDERS[MODE_PROVIDERS[resolve_mode(mode)]]


def get_provider(provider_id: ProviderId | str) -> TileProvider | None:
    """Direct lookup by provider id; None for an unknown id."""
    try:
        return PROVIDERS[ProviderId(provider_id)]
    except ValueError:
        return None


def pick_subdomain(subdomains: tuple[str, ...], x: int, y: int) -> str:
    """Deterministic mirror choice: a tile always goes to the same mirror."""
    return subdomains[(x + y) % len(subdomains)]


def build_url(provider: TileProvider, x: int, y: int, z: int) -> str:
    s = pick_subdomain(provider.subdomains, x, y) if provider.subdomains else ''
    return provider.url_template.format(s=s, x=x, y=y, z=z)


def attribution_for(mode: TileMode | str) -> str:
    return resolve_provider(mode).attribution
