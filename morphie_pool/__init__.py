"""
Morphie staking pool: custody-and-reward ledger for staked collectibles.
"""

__version__ = "0.1.0"
