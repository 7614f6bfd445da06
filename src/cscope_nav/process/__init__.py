from cscope_nav.process.runner import ProcessRunner, ProcessStream

__all__ = [
    "ProcessRunner",
    "ProcessStream",
]
