"""Configuration — tool settings, httpd-style directive reading, scope loading."""
