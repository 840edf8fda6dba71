"""Configuration constants.

Re-exports all constants for convenient importing:
    from jsextract.constants import MAX_CALL_SITES_PER_SYMBOL
"""

from jsextract.constants.parsing import *  # noqa: F403
