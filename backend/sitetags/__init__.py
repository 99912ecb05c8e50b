"""sitetags: catalog of sites and tags with paid, weighted endorsements."""

__version__ = "0.1.0"
