"""
Capset backend: caption/rating dataset services and their HTTP surface.
"""
