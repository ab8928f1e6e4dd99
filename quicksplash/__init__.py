"""Quick Splash: a networked terminal party game with a server, a client and its wire protocol."""

__version__ = "0.1.0"