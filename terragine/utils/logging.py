import logging

logger = logging.getLogger("terragine")
logger.addHandler(logging.NullHandler())


def Debug(message):
    logger.debug(message)


def Error(message):
    logger.error(message)


def SetLoggingLevel(level):
    """Sets the level of the package logger, e.g. ``logging.DEBUG`` to follow each traced path."""
    logger.setLevel(level)
