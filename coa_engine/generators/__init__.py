"""Synthetic chart-of-accounts generators."""

from coa_engine.generators.account import AccountTreeGenerator
from coa_engine.generators.base import BaseGenerator

__all__ = ["AccountTreeGenerator", "BaseGenerator"]
