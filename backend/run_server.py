#!/usr/bin/env python
import os
import uvicorn
from dotenv import load_dotenv
import argparse

# Load environment variables
load_dotenv()

def main():
    """Run the AI paralegal API server."""
    parser = argparse.ArgumentParser(description="Run the AI Paralegal server")
    parser.add_argument("--workers", type=int, default=1, help="Number of worker processes")
    parser.add_argument("--host", type=str, help="Host to run on")
    parser.add_argument("--port", type=int, help="Port to run on")
    parser.add_argument("--reload", action="store_true", help="Enable auto-reload")
    args = parser.parse_args()

    # Case state lives in process memory, so extra workers would each hold their own copy
    workers = args.workers

    host = args.host or os.getenv("HOST", "0.0.0.0")
    port = args.port or int(os.getenv("PORT", "8000"))
    reload = args.reload

    os.environ["PYTHONUNBUFFERED"] = "1"  # Ensure logs are output immediately

    print(f"✨ Starting AI Paralegal server")
    print(f"🖥️  Host: {host}, Port: {port}")
    print(f"👷 Workers: {workers}")
    print(f"🔄 Reload: {'Enabled' if reload else 'Disabled'}")
    print(f"📊 Available at: http://localhost:{port}")
    print(f"📚 API Docs: http://localhost:{port}/docs")
    print(f"🩺 Health Check: http://localhost:{port}/health")
    print(f"📈 Status: http://localhost:{port}/status")

    uvicorn_config = {
        "app": "main:app",
        "host": host,
        "port": port,
        "log_level": "info",
        "timeout_keep_alive": 300,    # Streaming responses can take a while
        "limit_concurrency": 100,
        "h11_max_incomplete_event_size": 10 * 1024 * 1024,  # Image uploads arrive as base64 data URLs
    }

    if reload:
        uvicorn_config["reload"] = True
        print("⚠️  Reload mode enabled - using single worker")
        uvicorn.run(**uvicorn_config)
    else:
        if workers > 1:
            print("⚠️  Each worker keeps its own in-memory case state")
        uvicorn_config["workers"] = workers
        uvicorn.run(**uvicorn_config)

if __name__ == "__main__":
    main()
