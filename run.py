#!/usr/bin/env python3
"""
Serve the Auth API with uvicorn.

Host, port, reload and log level come from AuthSettings (HOST, PORT,
RELOAD, LOG_LEVEL).
"""
import uvicorn

from authservice.config import AuthSettings

def main() -> None:
    settings = AuthSettings()
    uvicorn.run(
        "authservice.main:app",
        host=settings.host,
        port=settings.port,
        reload=settings.reload,
        log_level=settings.log_level.lower(),
    )

if __name__ == "__main__":
    main()
