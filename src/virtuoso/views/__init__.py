"""Views subsystem: View protocol, ViewManager, and built-in views."""

from virtuoso.views.base import View, ViewAction, ViewContext, ViewManager

__all__ = ["View", "ViewAction", "ViewContext", "ViewManager"]
