"""Tests for tiles.providers module."""

import pytest

from shared.constants import ProviderId, TileMode
from tiles.providers import (
    DEFAULT_PROVIDER,
    MODE_PROVIDERS,
    PROVIDERS,
    attribution_for,
    build_url,
    get_provider,
    pick_subdomain,
    resolve_mode,
    resolve_provider,
)


class TestRegistry:
    """Tests for the static provider table."""

    def test_all_providers_registered(self):
        assert set(PROVIDERS) == set(ProviderId)

    def test_registry_is_read_only(self):
        with pytest.raises(TypeError):
            PROVIDERS[ProviderId.OSM_STANDARD] = None

    def test_default_provider(self):
        assert DEFAULT_PROVIDER is ProviderId.OSM_STANDARD

    def test_overlay_providers_not_in_mode_mapping(self):
        mapped = set(MODE_PROVIDERS.values())
        assert ProviderId.OSM_HOT not in mapped
        assert ProviderId.ESRI_LABELS not in mapped

    def test_max_zoom(self):
        assert PROVIDERS[ProviderId.OSM_STANDARD].max_zoom == 19
        assert PROVIDERS[ProviderId.ESRI_SATELLITE].max_zoom == 18

    def test_labels_flags(self):
        assert not PROVIDERS[ProviderId.ESRI_SATELLITE].has_labels
        assert PROVIDERS[ProviderId.ESRI_LABELS].has_labels


class TestResolveProvider:
    """Tests for mode -> provider resolution."""

    @pytest.mark.parametrize(
        ('mode', 'expected'),
        [
            ('standard', ProviderId.OSM_STANDARD),
            ('satellite', ProviderId.ESRI_SATELLITE),
            ('dark', ProviderId.CARTODB_DARK),
            (TileMode.DARK, ProviderId.CARTODB_DARK),
        ],
    )
    def test_known_modes(self, mode, expected):
        assert resolve_provider(mode).id is expected

    def test_unknown_mode_falls_back_to_standard(self):
        assert resolve_provider('terrain').id is ProviderId.OSM_STANDARD
        assert resolve_mode('') is TileMode.STANDARD

    def test_get_provider(self):
        assert get_provider('esri-labels').id is ProviderId.ESRI_LABELS
        assert get_provider(ProviderId.OSM_HOT).name == 'Humanitarian OSM'

    def test_get_provider_unknown(self):
        assert get_provider('mapbox') is None


class TestBuildUrl:
    """Tests for URL building."""

    def test_osm_standard(self):
        url = build_url(PROVIDERS[ProviderId.OSM_STANDARD], 10, 20, 5)
        assert url == 'https://tile.openstreetmap.org/5/10/20.png'

    def test_esri_uses_zyx_order(self):
        url = build_url(PROVIDERS[ProviderId.ESRI_SATELLITE], 10, 20, 5)
        assert url.endswith('/World_Imagery/MapServer/tile/5/20/10')

    def test_esri_labels(self):
        url = PROVIDERS[ProviderId.ESRI_LABELS].url(3, 4, 6)
        assert 'World_Boundaries_and_Places' in url
        assert url.endswith('/tile/6/4/3')

    def test_mirror_is_deterministic(self):
        provider = PROVIDERS[ProviderId.CARTODB_DARK]
        urls = {build_url(provider, 7, 9, 4) for _ in range(20)}
        assert len(urls) == 1

    def test_mirror_spreads_neighbours(self):
        provider = PROVIDERS[ProviderId.CARTODB_LIGHT]
        hosts = {build_url(provider, x, 0, 4).split('.')[0] for x in range(4)}
        assert hosts == {'https://a', 'https://b', 'https://c', 'https://d'}

    def test_osm_hot_subdomain(self):
        url = build_url(PROVIDERS[ProviderId.OSM_HOT], 1, 1, 3)
        assert url == 'https://tile-c.openstreetmap.fr/hot/3/1/1.png'

    def test_pick_subdomain(self):
        assert pick_subdomain(('a', 'b', 'c'), 2, 2) == 'b'


class TestAttribution:
    """Tests for attribution lookup."""

    def test_satellite(self):
        assert attribution_for('satellite') == '© Esri, Maxar, Earthstar Geographics'

    def test_dark(self):
        assert attribution_for('dark') == '© OpenStreetMap contributors, © CARTO'

    def test_unknown_mode(self):
        assert attribution_for('bogus') == '© OpenStreetMap contributors'
