from projectboard.utils.redact import redact

__all__ = ["redact"]
