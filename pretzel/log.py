import logging


# ================= LOGGING SETUP =================
def setup_logging(log_level: str = "INFO", log_file: str = "pretzel_monitor.log") -> logging.Logger:
    """Setup logging configuration."""
    handlers = [logging.StreamHandler()]
    if log_file:
        handlers.insert(0, logging.FileHandler(log_file))

    logging.basicConfig(
        level=getattr(logging, log_level.upper()),
        format='%(asctime)s - %(name)s - %(levelname)s - %(message)s',
        handlers=handlers
    )
    return logging.getLogger("pretzel")
