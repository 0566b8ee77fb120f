"""
WristDoc - health summary companion.

Turns a window of wearable metrics into a clinician-facing plain-text
report, optionally extended with an AI-generated narrative, and encodes
the result as a QR code for offline sharing.
"""

__version__ = "0.1.0"
