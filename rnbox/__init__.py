"""rnbox - end-to-end testing harness for React Native release candidates."""

__all__ = ["__version__"]

__version__ = "0.1.0"
