"""Resource Room package.

This package is organized by feature modules (students, attendance, tokens,
goals, teachers) with a thin Flask controller layer and service/repository layers.
"""
