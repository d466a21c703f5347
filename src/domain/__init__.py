"""Domain layer - map view models."""
from domain.models import Viewport

__all__ = [
    'Viewport',
]
