class MaestroError(Exception):
    """Base exception for the task orchestrator."""


class MissingGoalError(MaestroError):
    def __init__(self, title: str):
        self.title = title
        super().__init__(f"Incomplete task definition (no goal): {title}")


class ManifestNotFoundError(MaestroError):
    def __init__(self, path: str):
        self.path = path
        super().__init__(f"Manifest not found: {path}")


class OutputDirectoryUnavailableError(MaestroError):
    def __init__(self, path: str, detail: str = ""):
        self.path = path
        message = f"Cannot create output directory at path: {path}"
        if detail:
            message = f"{message} ({detail})"
        super().__init__(message)


class NoSuitableHandlerError(MaestroError):
    def __init__(self, task_title: str):
        self.task_title = task_title
        super().__init__(f"No suitable handler found for task: {task_title}")


class HandlerNotFoundError(MaestroError):
    def __init__(self, name: str):
        self.name = name
        super().__init__(f"Handler not found: {name}")


class HandlerInvocationError(MaestroError):
    def __init__(self, role: str, detail: str):
        self.role = role
        super().__init__(f"Handler '{role}' failed: {detail}")


class ManifestUpdateError(MaestroError):
    def __init__(self, path: str, detail: str):
        self.path = path
        super().__init__(f"Failed to update manifest {path}: {detail}")


class LLMError(MaestroError):
    def __init__(self, provider: str, detail: str):
        self.provider = provider
        super().__init__(f"LLM error ({provider}): {detail}")


class GitError(MaestroError):
    def __init__(self, command: str, output: str):
        self.command = command
        self.output = output
        super().__init__(f"Git command failed: {command}\nOutput: {output}")
