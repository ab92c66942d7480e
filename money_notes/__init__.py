"""
Money Notes - Ledger Core

The offline-first heart of the Money Notes expense tracker.

DESIGN PRINCIPLES:
1. A bill the user entered is never lost
2. The merged view never shows the same submission twice
3. Statistics always run over what is currently true
4. Storage and network are collaborators, not dependencies
"""

__version__ = "1.0.0"
__author__ = "Money Notes Team"
