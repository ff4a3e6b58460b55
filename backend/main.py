import os
from fastapi import FastAPI, Query, Request
from fastapi.middleware.cors import CORSMiddleware
import uvicorn
from dotenv import load_dotenv
import logging
from pathlib import Path
from typing import List, Optional
from datetime import datetime
import psutil
import time
import threading

from paralegal import config
from paralegal.api.router import router as api_router

LOG_FILE = os.getenv("LOG_FILE", "app.log")

# Configure logging
logging.basicConfig(
    level=logging.INFO,
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s',
    datefmt='%Y-%m-%d %H:%M:%S',
    handlers=[
        logging.StreamHandler(),  # Output to console
        logging.FileHandler(LOG_FILE)  # Save to file
    ]
)
logger = logging.getLogger("main")

# Make sure all loggers use this configuration
for name in logging.root.manager.loggerDict:
    logging.getLogger(name).setLevel(logging.INFO)

# Load environment variables
load_dotenv()
logger.info("Environment variables loaded")

app = FastAPI(title=config.app_title, description=config.app_description)

# Configure CORS
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],  # In production, specify actual origins
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)
logger.info("CORS middleware configured")

# Add middleware to track request processing times
@app.middleware("http")
async def add_process_time_header(request: Request, call_next):
    start_time = time.time()
    response = await call_next(request)
    process_time = time.time() - start_time
    response.headers["X-Process-Time"] = str(process_time)

    # Streaming AI calls routinely take several seconds
    if process_time > 10.0:
        logger.warning(f"SLOW REQUEST: {request.method} {request.url.path} took {process_time:.2f} seconds")

    return response

# Include routers
app.include_router(api_router, prefix="/api")
logger.info("API routers included")

@app.get("/")
async def root():
    logger.info("Root endpoint accessed")
    return {"message": f"Welcome to {config.app_title}"}

@app.get("/health")
async def health_check():
    """
    Lightweight health check that does not touch the case file or the AI service.
    """
    return {"status": "healthy", "timestamp": datetime.now().isoformat()}

@app.get("/status")
async def server_status():
    """
    Get the server status - lightweight endpoint that will always respond quickly.
    """
    cpu_percent = psutil.cpu_percent(interval=0.1)
    memory = psutil.virtual_memory()
    process = psutil.Process()

    return {
        "timestamp": datetime.now().isoformat(),
        "system": {
            "cpu_percent": cpu_percent,
            "memory_percent": memory.percent,
            "available_memory_mb": memory.available / (1024 * 1024),
        },
        "server": {
            "pid": process.pid,
            "threads": threading.active_count(),
            "process_memory_mb": process.memory_info().rss / (1024 * 1024),
            "uptime_seconds": time.time() - process.create_time(),
        }
    }

def read_recent_logs(log_file: Path, lines: int, component: Optional[str] = None) -> List[str]:
    """
    Read the last ``lines`` entries of a log file, optionally only those of one logger.

    Args:
        log_file: Path of the log file
        lines: Maximum number of lines to return; 0 returns nothing
        component: Logger name to filter on

    Returns:
        The matching lines, oldest first
    """
    if lines <= 0:
        return []

    with open(log_file, "r", encoding="utf-8") as f:
        all_logs = f.readlines()

    if component:
        filtered_logs = [line for line in all_logs if f" - {component} - " in line]
    else:
        filtered_logs = all_logs

    return filtered_logs[-lines:]

@app.get("/logs", response_model=List[str])
async def get_logs(lines: int = Query(100, ge=0), component: Optional[str] = None):
    """
    Get the most recent log entries.

    Args:
        lines: Number of most recent log lines to return
        component: Filter by logger name (e.g., "llm_service", "conversation", "violation_analysis")

    Returns:
        List of log lines
    """
    logger.info(f"Logs endpoint accessed: lines={lines}, component={component}")

    log_file = Path(LOG_FILE)
    if not log_file.exists():
        return ["No logs found"]

    try:
        return read_recent_logs(log_file, lines, component)
    except OSError as e:
        logger.error(f"Error reading logs: {str(e)}")
        return [f"Error reading logs: {str(e)}"]

if __name__ == "__main__":
    logger.info("Starting server")
    uvicorn.run("main:app", host=config.host, port=config.port, reload=True)
