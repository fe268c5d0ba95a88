from maestro.engine.progress import ProgressWriter
from maestro.engine.report import ReportGenerator
from maestro.engine.scheduler import RunState, Scheduler, failed_result

__all__ = ["ProgressWriter", "ReportGenerator", "RunState", "Scheduler", "failed_result"]
