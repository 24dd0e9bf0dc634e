import os

from dotenv import load_dotenv

load_dotenv()

ANTHROPIC_API_KEY = os.getenv("ANTHROPIC_API_KEY")
PLANNER_MODEL = os.getenv("PLANNER_MODEL", "claude-sonnet-4-5")
DATABASE_PATH = os.getenv("PLANNER_DB_PATH", "planner.db")
LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO").upper()
INTERACTION_LOG_CAPACITY = int(os.getenv("INTERACTION_LOG_CAPACITY", "100"))

CORS_ALLOW_ORIGINS = [
    origin.strip()
    for origin in os.getenv("CORS_ALLOW_ORIGINS", "http://localhost:5173").split(",")
    if origin.strip()
]

TIME_SLOTS = ("morning", "afternoon", "evening")


def api_key_configured() -> bool:
    return bool(ANTHROPIC_API_KEY) and ANTHROPIC_API_KEY != "your-api-key-here"
