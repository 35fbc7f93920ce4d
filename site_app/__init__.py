"""
Flask web layer for the Tsono site.

Each subsystem (submissions, admin, analytics) exposes a factory that returns
its service and blueprint; ``site_app.main.create_app`` wires them together.
"""
