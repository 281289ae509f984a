"""doclayer — layered DocumentRoot resolution for httpd-style servers."""

__version__ = "0.3.0"
