"""
CLI command modules.
"""

from smt_cli.commands import demo, prove, root

__all__ = ["demo", "prove", "root"]
