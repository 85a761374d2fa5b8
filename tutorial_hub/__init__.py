"""tutorial-hub: GitHub tutorial importer and reader API."""

__version__ = "0.1.0"
