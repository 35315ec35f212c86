"""
Built-in facades.
"""

from .facade import Facade


class Events(Facade):
    """Event dispatcher facade."""

    @classmethod
    def get_facade_accessor(cls):
        return "events"


class Config(Facade):
    @classmethod
    def get_facade_accessor(cls):
        return "config"


class App(Facade):
    @classmethod
    def get_facade_accessor(cls):
        return "app"
