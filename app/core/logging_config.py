import logging
import sys

def setup_logging():
    """
    Configure logging for the application.
    
    Sets up logging to stdout so it works well with Docker and serverless hosts.
    """
    logging.basicConfig(
        level=logging.INFO,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
        handlers=[logging.StreamHandler(sys.stdout)]
    )
    
    # Reduce SQLAlchemy and httpx noise in logs
    logging.getLogger("sqlalchemy.engine").setLevel(logging.WARNING)
    logging.getLogger("httpx").setLevel(logging.WARNING)
    
    return logging.getLogger("waffleroute")


# Create global logger instance
logger = setup_logging()
