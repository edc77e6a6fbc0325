"""tplfetch — fetch community project templates from remote references."""

__version__ = "0.1.0"
