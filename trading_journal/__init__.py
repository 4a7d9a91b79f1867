"""Client core and HTTP gateway for the Trading Journal."""

__version__ = "0.1.0"
