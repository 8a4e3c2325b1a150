#!/usr/bin/env python
"""Script to run the taskboard API server."""
import os
import sys
from pathlib import Path

# Run from the repository root so relative sqlite paths resolve there
root_dir = Path(__file__).resolve().parent
sys.path.insert(0, str(root_dir))
os.chdir(root_dir)

import uvicorn

if __name__ == "__main__":
    uvicorn.run(
        "taskboard.main:app",
        host=os.getenv("HOST", "0.0.0.0"),
        port=int(os.getenv("PORT", "8000")),
        reload=os.getenv("RELOAD", "1") == "1",
    )
