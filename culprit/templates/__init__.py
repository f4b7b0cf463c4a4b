"""Jinja2 templates for the markdown reports of the found culprits"""
