# PATH: strategy/jobs/__init__.py
"""
Strategy jobs package.

Available entry points:
    python -m strategy.jobs.run_scan        # Pool registry scan

NOTE: This __init__.py intentionally does NOT import run_scan to avoid
side effects when importing the package. Import it directly when needed:

    from strategy.jobs.run_scan import run_scan
"""

__all__: list[str] = []
