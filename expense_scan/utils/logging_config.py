import logging
import sys


def setup_logging(name: str = "expense_scan", level: int = logging.INFO) -> logging.Logger:
    """
    Sets up the console logger shared by the scan pipeline.
    
    Args:
        name: Name of the logger.
        level: Logging level (default: INFO).
        
    Returns:
        logging.Logger: Configured logger instance.
    """
    logger = logging.getLogger(name)
    
    # Avoid duplicate handlers if already configured
    if logger.handlers:
        return logger
        
    logger.setLevel(level)
    
    formatter = logging.Formatter(
        '%(asctime)s - %(name)s - %(levelname)s - %(message)s',
        datefmt='%Y-%m-%d %H:%M:%S'
    )
    
    console_handler = logging.StreamHandler(sys.stdout)
    console_handler.setFormatter(formatter)
    logger.addHandler(console_handler)
    
    return logger

# Default logger for the project
logger = setup_logging()


def set_log_level(level_name: str, name: str = "expense_scan") -> int:
    """
    Applies a level given by name ('DEBUG', 'warning', ...) to a configured logger.
    Unknown names fall back to INFO.
    """
    level = getattr(logging, str(level_name).upper(), None)
    if not isinstance(level, int):
        level = logging.INFO
    logging.getLogger(name).setLevel(level)
    return level
