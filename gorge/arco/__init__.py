"""Access to the GridEngine ARCo accounting database."""

from gorge.arco.db import ArcoConfigError, ArcoDB, open_arco
from gorge.arco.models import Accounting, ArcoJob, JobLog

__all__ = [
    "Accounting",
    "ArcoConfigError",
    "ArcoDB",
    "ArcoJob",
    "JobLog",
    "open_arco",
]
