"""restgen — REST model (IDL + snapshot) generation build step."""

__version__ = "0.1.0"
