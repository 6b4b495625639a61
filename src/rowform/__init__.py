"""rowform — schema-validated dynamic row collections."""

__version__ = "0.1.0"
