import logging
import sys

# 1. Set up a handler and formatter for console output.
# This handler is used by all loggers that don't have their own handlers.
console_handler = logging.StreamHandler(sys.stdout)
console_handler.setLevel(logging.DEBUG)
formatter = logging.Formatter(
    "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
)
console_handler.setFormatter(formatter)

# 2. Package loggers (using __name__) inherit from this logger.
package_logger = logging.getLogger(__name__)
package_logger.setLevel(logging.INFO)
package_logger.addHandler(console_handler)

# 3. Suppress chatty library loggers
logging.getLogger("numba").setLevel(logging.WARNING)
