"""thermal-shapes: blob extraction and robust geometry for thermal camera frames."""

__version__ = "0.1.0"
