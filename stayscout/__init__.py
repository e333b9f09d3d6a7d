"""stayscout: Airbnb search and listing data without a public API."""

__version__ = "0.1.0"
