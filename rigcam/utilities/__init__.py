"""
This package provides the configuration helpers shared by the classes in rigcam.
"""
