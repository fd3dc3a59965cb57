"""
onAim Flow backend — publish validation and storage for the visual flow editor.
"""

__version__ = "0.1.0"
