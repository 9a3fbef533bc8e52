"""Fixed-width codec, header metadata extraction and range validation for
crop genetics parameter files (cultivar .CUL and ecotype .ECO tables).
"""

__version__ = "1.0.0"
