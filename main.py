import argparse
import logging
import uvicorn
from fastapi import FastAPI, Request, Depends
from fastapi.templating import Jinja2Templates
from fastapi.responses import HTMLResponse
from contextlib import asynccontextmanager

import sys
from pathlib import Path

# Add project root to path for package imports
base_dir = Path(__file__).parent
sys.path.insert(0, str(base_dir))

from db.database import init_db, get_db
from config import load_config
from routes import quizzes, schedules, subjects, dashboard, feedback  # Import routers

logger = logging.getLogger("quickrevise")

templates = Jinja2Templates(directory=str(base_dir / "templates"))


# First-run init
@asynccontextmanager
async def lifespan(app: FastAPI):
    load_config()  # Ensures config exists
    init_db()
    yield


app = FastAPI(
    title="QuickRevise",
    description="Spaced-repetition quiz revision for students",
    lifespan=lifespan,
)

# Include routers
app.include_router(quizzes.router, prefix="/api/quizzes", tags=["quizzes"])
app.include_router(schedules.router, prefix="/api", tags=["schedules"])
app.include_router(subjects.router, prefix="/api", tags=["subjects"])
app.include_router(feedback.router, prefix="/api", tags=["feedback"])
app.include_router(dashboard.router, tags=["dashboard"])


# Home page - list students
@app.get("/", response_class=HTMLResponse)
async def home(request: Request, conn=Depends(get_db)):
    cursor = conn.cursor()
    cursor.execute("SELECT id, username FROM users ORDER BY username")
    users = [{"id": row[0], "username": row[1]} for row in cursor.fetchall()]
    return templates.TemplateResponse(request, "index.html", {"users": users})


if __name__ == "__main__":
    parser = argparse.ArgumentParser(description="QuickRevise App")
    parser.add_argument("--init", action="store_true", help="Initialize DB and config")
    parser.add_argument("--dev", action="store_true", help="Run in dev mode with reload")
    parser.add_argument("--port", type=int, default=None, help="Override the configured port")
    args = parser.parse_args()
    config = load_config()
    log_level = config["server"]["log_level"]
    logging.basicConfig(level=log_level.upper(), format="%(asctime)s %(levelname)s %(name)s: %(message)s")
    if args.init:
        init_db()
        logger.info("DB initialized and config copied to ~/.quickrevise/")
        sys.exit(0)
    uvicorn.run(
        "main:app",
        host=config["server"]["host"],
        port=args.port or config["server"]["port"],
        reload=args.dev,
        log_level=log_level,
    )
