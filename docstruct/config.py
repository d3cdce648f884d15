import os


class Config:
    """Document restructuring configuration"""

    # Chat provider
    LLM_PROVIDER_TYPE = os.getenv("LLM_PROVIDER_TYPE", "openai")
    LLM_TEMPERATURE = float(os.getenv("LLM_TEMPERATURE")) if os.getenv("LLM_TEMPERATURE") else None

    # OpenAI-compatible server
    OPENAI_API_KEY = os.getenv("OPENAI_API_KEY")
    OPENAI_BASE_URL = os.getenv("OPENAI_BASE_URL", "https://api.openai.com")
    OPENAI_CHAT_MODEL = os.getenv("OPENAI_CHAT_MODEL", "gpt-4o")
    OPENAI_EMBEDDING_MODEL = os.getenv("OPENAI_EMBEDDING_MODEL", "text-embedding-3-large")

    # Ollama
    OLLAMA_BASE_URL = os.getenv("OLLAMA_BASE_URL", "http://localhost:11434")
    OLLAMA_MODEL = os.getenv("OLLAMA_MODEL", "qwen2.5:14b")

    # Gemini
    GEMINI_API_KEY = os.getenv("GEMINI_API_KEY")
    GEMINI_MODEL = os.getenv("GEMINI_MODEL", "gemini-2.5-pro")

    # Segmentation
    CHUNK_WORDS_THRESHOLD = int(os.getenv("CHUNK_WORDS_THRESHOLD", "1000"))
    MAX_DISTANCE = int(os.getenv("MAX_DISTANCE", "64"))
    MAX_RETRIES = int(os.getenv("MAX_RETRIES", "10"))
    BOUNDARY_CHECK_WORDS = int(os.getenv("BOUNDARY_CHECK_WORDS", "25"))

    # Section assembly
    SUMMARY_MAX_PARALLEL = int(os.getenv("SUMMARY_MAX_PARALLEL", "4"))

    # Cache
    CACHE_MAX_WORKERS = int(os.getenv("CACHE_MAX_WORKERS", "2"))

    # Output artifacts (replace the source file's suffix)
    CACHE_FILE_EXT = os.getenv("CACHE_FILE_EXT", "docstruct.cache")
    RESULT_FILE_EXT = os.getenv("RESULT_FILE_EXT", "docstruct.text.md")
    SUMMARIES_FILE_EXT = os.getenv("SUMMARIES_FILE_EXT", "docstruct.summaries.md")
    SECTIONS_FILE_EXT = os.getenv("SECTIONS_FILE_EXT", "docstruct.sections.md")
    FINAL_FILE_EXT = os.getenv("FINAL_FILE_EXT", "docstruct.final.md")

    # HTTP Client & Retry Configuration
    HTTP_MAX_RETRIES = int(os.getenv("HTTP_MAX_RETRIES", "3"))
    HTTP_RETRY_DELAY = float(os.getenv("HTTP_RETRY_DELAY", "2.0"))
    HTTP_CONNECT_TIMEOUT = float(os.getenv("HTTP_CONNECT_TIMEOUT", "10.0"))
    HTTP_READ_TIMEOUT = float(os.getenv("HTTP_READ_TIMEOUT", "300.0"))
    HTTP_WRITE_TIMEOUT = float(os.getenv("HTTP_WRITE_TIMEOUT", "10.0"))
    HTTP_POOL_TIMEOUT = float(os.getenv("HTTP_POOL_TIMEOUT", "10.0"))

    LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")


config = Config()
