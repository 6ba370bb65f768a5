"""
Routers Package

HTTP route modules, included by main.py.
"""
