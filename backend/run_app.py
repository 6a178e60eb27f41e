import logging
import os

import uvicorn

if __name__ == "__main__":
    logging.basicConfig(level=logging.INFO, format='%(levelname)s:%(name)s:%(message)s')

    host = os.environ.get("HOST", "0.0.0.0")
    port = int(os.environ.get("PORT", "8000"))

    print("Starting Invoice Desk API...")

    # String import path so uvicorn can reload in development
    uvicorn.run(
        "invoicedesk.main:app",
        host=host,
        port=port,
        log_level="info",
        reload=os.environ.get("RELOAD", "").lower() in ("1", "true", "yes"),
    )
