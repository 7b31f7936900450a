"""Skip rewriting exports."""

from .skip_rewriter import RETURN_STATEMENT, SkipRewrite, find_skip_step, rewrite_for_skip

__all__ = ["RETURN_STATEMENT", "SkipRewrite", "find_skip_step", "rewrite_for_skip"]
