"""Configuration, security helpers and the domain error taxonomy."""
