"""Operator scripts. Run with python -m scripts.<name>."""
