"""
Sparse Merkle CLI

Command-line wrapper for building trees and creating proofs.

Usage:
    python -m smt_cli root entries.yaml
    python -m smt_cli prove entries.yaml 2b
    python -m smt_cli demo
    python -m smt_cli config --show
"""

__version__ = "0.1.0"
