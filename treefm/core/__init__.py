"""Stateful core: operations, navigation and the UI state machine."""
