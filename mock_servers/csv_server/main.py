from fastapi import FastAPI, HTTPException
from fastapi.responses import PlainTextResponse
from pathlib import Path
import os

app = FastAPI(title="Mock CSV Export Server", version="1.0.0")
# Support both local development and Docker
DATA_DIR = Path("/csv_exports") if os.path.exists("/csv_exports") else Path(__file__).resolve().parents[2] / "data"

@app.get("/health")
def health(): return {"status": "ok"}

@app.get("/exports/{name}.csv")
def get_export(name: str):
    file = DATA_DIR / f"{name}.csv"
    if not file.is_file():
        raise HTTPException(status_code=404, detail="export not found")
    return PlainTextResponse(file.read_text(encoding="utf-8"), media_type="text/csv")
