#!/usr/bin/env python3
"""
Development server runner for the budget trip planner API
"""

import os

import uvicorn

if __name__ == "__main__":
    uvicorn.run(
        "budget_trip.main:app",
        host="0.0.0.0",
        port=int(os.getenv("PORT", "8000")),
        reload=True,  # Enable auto-reload for development
        log_level=os.getenv("TRIP_PLANNER_LOG_LEVEL", "info").lower(),
    )
