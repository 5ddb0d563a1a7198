import logging
import os

LOG_FORMAT = '%(asctime)s %(levelname)s %(module)s %(label)s: %(message)s'
LOG_DATE_FORMAT = '%Y-%m-%d %H:%M:%S'


class SafeLabelFormatter(logging.Formatter):
    def format(self, record):
        # Records emitted by third-party loggers carry no label
        if not hasattr(record, 'label'):
            record.label = '-'
        return super().format(record)


class LabelLoggerAdapter(logging.LoggerAdapter):
    def __init__(self, logger, label):
        super().__init__(logger, {'label': label})

    def process(self, msg, kwargs):
        return f"{self.extra['label']}: {msg}", kwargs


def _resolve_level():
    level = logging.getLevelName(os.getenv("LOG_LEVEL", "INFO").upper())
    return level if isinstance(level, int) else logging.INFO


def new_logger(label, module_name=None):
    """
    Return a logger adapter that prefixes every message with `label`.

    The underlying logger is named after the calling module unless
    `module_name` is given. A single stream handler is attached per module.
    """
    if module_name is None:
        import inspect
        frame = inspect.currentframe()
        try:
            module_name = frame.f_back.f_globals['__name__']
        finally:
            del frame
    logger = logging.getLogger(module_name)
    logger.propagate = False

    if not logger.handlers:
        handler = logging.StreamHandler()
        handler.setFormatter(SafeLabelFormatter(fmt=LOG_FORMAT, datefmt=LOG_DATE_FORMAT))
        logger.addHandler(handler)
    logger.setLevel(_resolve_level())
    return LabelLoggerAdapter(logger, label)
