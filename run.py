#!/usr/bin/env python3
"""Startup script for the payments API."""
import os
import uvicorn

if __name__ == "__main__":
    port = int(os.environ.get("PORT", 3000))
    print(f"Starting payments API on port {port}")
    uvicorn.run(
        "payments.main:app",
        host="0.0.0.0",
        port=port,
        log_level="info"
    )
