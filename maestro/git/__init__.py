from maestro.git.service import GitService

__all__ = ["GitService"]
