import logging
from pathlib import Path

import uvicorn

import api_template  # triggers logging setup
from api_template.application import create_app
from api_template.config import configuration

# ======================================================================================================================
#   Global Variables
# ======================================================================================================================
logger = logging.getLogger(Path(__file__).stem)

# =============================================================================
#   REST API app - API Template
# =============================================================================
app = create_app(configuration)


# =============================================================================
#   Entry point
# =============================================================================
def main() -> None:
    logger.info("Starting server on %s:%d", configuration.server.host, configuration.server.port)
    uvicorn.run(
        "main:app",
        host=configuration.server.host,
        port=configuration.server.port,
        reload=False,
        log_config=None,
    )


if __name__ == "__main__":
    main()
