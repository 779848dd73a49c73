#!/usr/bin/env python3
"""
Main entry point for the Session Analyzer API.
Handles server startup with environment-based configuration.
"""
import uvicorn
from session_analyzer.config import APP_PORT

if __name__ == "__main__":
    print(f"🚀 Starting Session Analyzer API on port {APP_PORT}")
    uvicorn.run(
        "session_analyzer.api:app",
        host="0.0.0.0",
        port=APP_PORT,
        reload=True,
        log_level="info"
    )
