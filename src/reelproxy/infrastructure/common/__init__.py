from .process import ProcessResult, ProcessStatus, run_process

__all__ = ["ProcessResult", "ProcessStatus", "run_process"]
