"""Routers de la API."""
