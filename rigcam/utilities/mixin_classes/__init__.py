"""
This package contains mixin classes providing basic functionality throughout rigcam.
"""

from rigcam.utilities.mixin_classes.user_option_configured import UserOptionConfigured

__all__ = ["UserOptionConfigured"]
