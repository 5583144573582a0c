"""Source-file scoping for PDB symbols."""

from typing import Optional


class SourceFileFilter:
    """Decides which symbols belong to the sources being dumped.

    Only symbols whose declaring file is known can be rejected: a symbol with
    no source location is always kept, whatever the prefix.
    """

    def __init__(self, prefix: str = ""):
        self.prefix = prefix or ""

    def accepts(self, source_file: Optional[str]) -> bool:
        """Check if a symbol declared in ``source_file`` should be dumped"""
        if not self.prefix or not source_file:
            return True
        # Plain case-sensitive prefix match, paths are compared as the PDB stores them
        return source_file.startswith(self.prefix)

    def __repr__(self):
        return f"SourceFileFilter(prefix={self.prefix!r})"
