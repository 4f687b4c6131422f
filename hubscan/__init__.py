"""hubscan — binary dependency inventory and Hub upload."""

__version__ = "0.1.0"
