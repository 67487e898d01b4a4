"""Bundled configuration files for xl2cal."""
