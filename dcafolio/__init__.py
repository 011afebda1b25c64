"""DCAfolio - DCA reminder scheduling and portfolio analytics."""

__version__ = "1.0.0"
