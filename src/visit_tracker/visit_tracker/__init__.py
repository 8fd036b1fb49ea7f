"""Field visit tracker package.

Feature modules (visits, users, clients, settings, geocoding, reports) each keep a
thin Flask controller over service and repository layers.
"""
