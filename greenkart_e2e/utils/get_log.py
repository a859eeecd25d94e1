import logging
import os
from datetime import datetime
from logging import WARNING, FileHandler
from logging.handlers import TimedRotatingFileHandler

LOG_FORMAT = "%(asctime)s %(levelname)s [%(name)s] [%(filename)s (%(funcName)s:%(lineno)d)] - %(message)s"

LEVELS = {
    "debug": logging.DEBUG,
    "info": logging.INFO,
    "warning": logging.WARNING,
    "error": logging.ERROR,
}


class GetLog:
    logger = None
    log_folder = None
    handlers = []

    @classmethod
    def get_log(cls, level="info", log_dir="./logs"):
        """Get logger and initialize logging system.

        Args:
            level (str): Root log level name (debug, info, warning, error), default is info
            log_dir (str): Parent folder of the per-run log directories
        """
        if cls.logger is None:
            # One folder per run, named after the start time
            current_time = datetime.now().strftime("%Y-%m-%d_%H-%M-%S")
            cls.log_folder = os.path.join(log_dir, current_time)

            # Store timestamp in environment variable, reports reuse it
            os.environ["GREENKART_TIMESTAMP"] = current_time

            if not os.path.exists(cls.log_folder):
                os.makedirs(cls.log_folder)

            cls.logger = logging.getLogger()
            root_level = LEVELS.get(str(level).lower(), logging.INFO)
            cls.logger.setLevel(root_level)
            # log.log and the console follow the root level down to debug
            output_level = min(logging.INFO, root_level)

            fm = logging.Formatter(LOG_FORMAT)

            # Main log file, rotated at midnight
            log_file = os.path.join(cls.log_folder, "log.log")
            th = TimedRotatingFileHandler(
                filename=log_file,
                when="midnight",
                interval=1,
                backupCount=3,
                encoding="utf-8",
            )
            th.setLevel(output_level)
            th.setFormatter(fm)
            cls.logger.addHandler(th)
            cls.handlers.append(th)

            # Warnings and errors only
            error_log_file = os.path.join(cls.log_folder, "error.log")
            error_handler = FileHandler(filename=error_log_file, encoding="utf-8")
            error_handler.setLevel(WARNING)
            error_handler.setFormatter(fm)
            cls.logger.addHandler(error_handler)
            cls.handlers.append(error_handler)

            console_handler = logging.StreamHandler()
            console_handler.setLevel(output_level)
            console_handler.setFormatter(fm)
            cls.logger.addHandler(console_handler)
            cls.handlers.append(console_handler)

        return cls.logger

    @classmethod
    def reset(cls):
        """Detach the handlers installed by get_log so the next call starts
        fresh."""
        if cls.logger is not None:
            for handler in cls.handlers:
                cls.logger.removeHandler(handler)
                handler.close()
        cls.handlers = []
        cls.logger = None
        cls.log_folder = None
