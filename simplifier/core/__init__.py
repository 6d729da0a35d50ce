from __future__ import annotations

from .copier import CopyError, deep_copy
from .engine import (
    Simplifier,
    SimplifyError,
    apply_ruler,
    simplify,
    new_simplifier,
    extend_simplifier,
)
