import os

from dotenv import load_dotenv

load_dotenv(os.getenv("ENV_FILE"), override=True)

# General
LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")
LOG_FORMAT = os.getenv("LOG_FORMAT", "text")

# LLM
LLM_MODEL = os.getenv("LLM_MODEL", "gpt-4o-mini")
LLM_TIMEOUT = float(os.getenv("LLM_TIMEOUT", "60"))
# Transport-level attempts per generation call; vocabulary retries are separate
LLM_TRANSPORT_RETRIES = int(os.getenv("LLM_TRANSPORT_RETRIES", "1"))
ENABLE_LANGFUSE = os.getenv("ENABLE_LANGFUSE", "false").lower() in ("1", "true", "yes")

# Generation
GENERATION_MAX_RETRIES = int(os.getenv("GENERATION_MAX_RETRIES", "3"))
KNOWN_WORDS_SAMPLE_SIZE = int(os.getenv("KNOWN_WORDS_SAMPLE_SIZE", "50"))
REGENERATE_MAX_EXPLANATIONS = 3

# Batch import
IMPORT_MAX_CONCURRENCY = int(os.getenv("IMPORT_MAX_CONCURRENCY", "5"))

BLANK_MARKER = "____"
THINKING_PLACEHOLDER = "🤔💭"
