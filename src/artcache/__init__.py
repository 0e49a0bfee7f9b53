"""artcache - artwork gathering, validation and thumbnail cache."""

__version__ = "0.3.0"
