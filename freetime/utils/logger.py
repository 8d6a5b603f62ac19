import logging
from logging.handlers import RotatingFileHandler


def setup_logging(app):
    # app.logger is the "freetime" logger, so freetime.services.* loggers
    # propagate into these handlers as well
    level = logging.getLevelName(str(app.config.get("LOG_LEVEL", "INFO")).upper())
    if not isinstance(level, int):
        level = logging.INFO
    formatter = logging.Formatter('%(asctime)s - %(levelname)s - %(message)s')

    # create_app may run more than once per process (tests, scripts)
    for handler in list(app.logger.handlers):
        if getattr(handler, "_freetime", False):
            app.logger.removeHandler(handler)
            handler.close()

    log_file_path = app.config.get("LOG_FILE")
    if log_file_path:
        try:
            # File handler
            file_handler = RotatingFileHandler(log_file_path, maxBytes=10000, backupCount=3)
            file_handler.setLevel(level)
            file_handler.setFormatter(formatter)
            file_handler._freetime = True
            app.logger.addHandler(file_handler)
        except OSError as e:
            app.logger.warning("File logging disabled for %s: %s", log_file_path, e)

    # Console handler
    console_handler = logging.StreamHandler()
    console_handler.setLevel(level)
    console_handler.setFormatter(formatter)
    console_handler._freetime = True
    app.logger.addHandler(console_handler)

    app.logger.setLevel(level)
    app.logger.info("Logging setup complete")
