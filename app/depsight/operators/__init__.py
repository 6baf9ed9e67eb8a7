"""Package operators for applying dependency actions.

This module exports the operator classes for package managers.
"""

from depsight.operators.base import Operator
from depsight.operators.npm import NpmOperator

__all__ = ["NpmOperator", "Operator"]
