"""
mc-bridge - bidirectional task sync between Mission Control and the CRM.
"""

__version__ = "0.1.0"
