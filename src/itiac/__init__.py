"""ITIAC - IT Infrastructure Impact Analysis Core.

Computes which components and business-process steps become unavailable
when infrastructure components go offline, and ranks that impact.
"""

__version__ = "0.1.0"
