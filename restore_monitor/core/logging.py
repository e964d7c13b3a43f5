import logging
import sys

from restore_monitor.core.config import settings


class ContextFormatter(logging.Formatter):
    """Custom formatter that handles optional job_id and stage fields."""
    def format(self, record):
        if not hasattr(record, 'job_id'):
            record.job_id = '-'
        if not hasattr(record, 'stage'):
            record.stage = '-'
        return super().format(record)


def configure_logging(level: str | None = None) -> None:
    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(ContextFormatter(
        "%(asctime)s %(levelname)s %(name)s [job_id=%(job_id)s stage=%(stage)s] %(threadName)s - %(message)s"
    ))
    logging.basicConfig(
        level=(level or settings.log_level).upper(),
        handlers=[handler],
    )
