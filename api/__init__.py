"""HTTP trigger surface for the StreamFlex media scanner."""

__version__ = "1.0.0"
