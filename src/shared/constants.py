from enum import Enum

# Базовый размер тайла Web Mercator (пикселей)
TILE_SIZE = 256

# Радиус Земли для Web Mercator (метры)
EARTH_RADIUS_M = 6378137.0

# Границы проекции Web Mercator
WORLD_LNG_SPAN_DEG = 360.0
WORLD_LNG_HALF_SPAN_DEG = 180.0
MERCATOR_MAX_SIN = 0.9999

# Ограничения вьюпорта карты (как в canvas-карте)
VIEWPORT_MAX_LAT_DEG = 85.0
VIEWPORT_MIN_ZOOM = 1
VIEWPORT_MAX_ZOOM = 18

# --- Кэш тайлов в памяти
# Максимальное число записей в кэше
TILE_CACHE_MAX_SIZE = 800
# Время жизни записи (секунды); устаревшие записи не отдаются из кэша
TILE_CACHE_MAX_AGE_S = 30 * 60
# Сколько записей освобождать сверх лимита за один проход вытеснения
TILE_CACHE_EVICTION_BATCH = 100

# --- HTTP
HTTP_OK = 200
# Таймаут одного запроса тайла (секунды)
HTTP_TIMEOUT_DEFAULT = 15.0
# Параллелизм загрузки HTTP
DOWNLOAD_CONCURRENCY = 8
# Публичные тайл-серверы требуют осмысленный User-Agent
HTTP_USER_AGENT = 'map-tile-cache/0.1 (+https://www.openstreetmap.org/copyright)'

# Префикс переменных окружения для настроек
ENV_PREFIX = 'TILECACHE_'


class TileMode(str, Enum):
    """Logical display modes of the map view."""

    STANDARD = 'standard'
    SATELLITE = 'satellite'
    DARK = 'dark'


class ProviderId(str, Enum):
    """Identifiers of the known tile servers."""

    OSM_STANDARD = 'osm-standard'
    OSM_HOT = 'osm-hot'
    CARTODB_LIGHT = 'cartodb-light'
    CARTODB_DARK = 'cartodb-dark'
    ESRI_SATELLITE = 'esri-satellite'
    ESRI_LABELS = 'esri-labels'
