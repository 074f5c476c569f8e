"""
Utility Scripts.

This package contains operational scripts:

- bootstrap_database.py: Run, print or verify the database bootstrap

Run scripts with: python -m scripts.<script_name>
"""
