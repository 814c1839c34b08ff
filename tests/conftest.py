import os

# Database credentials are required settings; application modules read them at import time
os.environ.setdefault("DB_USER", "taskboard")
os.environ.setdefault("DB_PASS", "taskboard")
