import os
from dotenv import load_dotenv

load_dotenv()

class Config:
    API_KEY = os.getenv("SPAM_CHECKER_API_KEY", "test_key_123")
    RULES_FILE = os.getenv("SPAM_CHECKER_RULES_FILE")  # Optional JSON rule overrides
    LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")
    HOST = os.getenv("HOST", "0.0.0.0")
    PORT = int(os.getenv("PORT", "8000"))

    # Longest message accepted before pattern matching
    MAX_INPUT_LENGTH = int(os.getenv("MAX_INPUT_LENGTH", "20000"))
