"""Environmental exposure providers.

GooglePollenProvider turns a coordinate into per-category pollen index
readings via the Google Pollen API.
"""

from src.providers.exposure.google_pollen_provider import GooglePollenProvider

__all__ = ["GooglePollenProvider"]
