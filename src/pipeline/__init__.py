"""Topic release catalog pipeline."""

from .runner import main, process_repo, run

__all__ = ["main", "process_repo", "run"]
