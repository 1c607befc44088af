"""Places Gateway: authenticated, caching proxy for the Google Places API."""

__version__ = "0.1.0"
