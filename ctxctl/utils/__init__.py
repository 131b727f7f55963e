from ctxctl.utils.utils import OUTPUT_KINDS, format_output

__all__ = ["OUTPUT_KINDS", "format_output"]
