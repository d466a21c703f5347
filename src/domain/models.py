from pydantic import BaseModel, field_validator

from shared.constants import (
    VIEWPORT_MAX_LAT_DEG,
    VIEWPORT_MAX_ZOOM,
    VIEWPORT_MIN_ZOOM,
    WORLD_LNG_HALF_SPAN_DEG,
    WORLD_LNG_SPAN_DEG,
)


class Viewport(BaseModel):
    """Visible area of the canvas map: center, zoom and size in CSS pixels."""

    model_config = {
        'frozen': True,
    }

    center_lat: float
    center_lng: float
    # Дробный зум допустим (колесо мыши меняет его шагом 0.5)
    zoom: float = 13
    width: int = 800
    height: int = 600

    @field_validator('center_lat')
    @classmethod
    def clamp_lat(cls, v: float | str) -> float:
        v = float(v)
        return max(-VIEWPORT_MAX_LAT_DEG, min(VIEWPORT_MAX_LAT_DEG, v))

    @field_validator('center_lng')
    @classmethod
    def wrap_lng(cls, v: float | str) -> float:
        v = float(v)
        return (v + WORLD_LNG_HALF_SPAN_DEG) % WORLD_LNG_SPAN_DEG - WORLD_LNG_HALF_SPAN_DEG

    @field_validator('zoom')
    @classmethod
    def validate_zoom(cls, v: float | str) -> float:
        v = float(v)
        if not (VIEWPORT_MIN_ZOOM <= v <= VIEWPORT_MAX_ZOOM):
            msg = f'zoom должен быть в диапазоне [{VIEWPORT_MIN_ZOOM}, {VIEWPORT_MAX_ZOOM}]'
            raise ValueError(msg)
        return v

    @field_validator('width', 'height')
    @classmethod
    def validate_size(cls, v: int | str) -> int:
        v = int(v)
        if v <= 0:
            msg = 'Размер вьюпорта должен быть положительным'
            raise ValueError(msg)
        return v
