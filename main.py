#!/usr/bin/env python3
"""
templa

A FastAPI application that turns a topic into an editable business document
or slide deck, renders layout-tagged content to html, and exports it to
docx and pptx.

To start the server:
    python main.py
"""

import sys
from pathlib import Path

# add the project root to python path so we can import the src.templa modules
sys.path.insert(0, str(Path(__file__).parent))

# start the fastapi server when this file is run
if __name__ == "__main__":
    import uvicorn
    from src.templa.config import Config
    # run the api app with auto-reload when debugging
    uvicorn.run("src.templa.api:app", host=Config.HOST, port=Config.PORT, reload=Config.DEBUG)
