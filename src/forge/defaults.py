"""
Default configuration values for Forge.

Single source of truth for all default settings. Anything here can be
overridden through AgentConfig (and FORGE_* environment variables, see
AgentConfig.from_env).

LiteLLM format: provider/model-name (e.g., openai/gpt-4.1, gemini/gemini-2.5-pro).
Only the Anthropic default has been exercised end to end.
"""

# Planning model and response size
DEFAULT_MODEL = "anthropic/claude-sonnet-4-5-20250929"
MAX_TOKENS = 8000
TEMPERATURE = 0.0

# Budgets: planning calls per request / recovery planning calls per failure chain
MAX_TURNS = 5
MAX_RETRIES = 2

# Inference transport
LLM_TIMEOUT = 120          # seconds per completion call
LLM_NUM_RETRIES = 2        # transport-level retries handled by litellm

# Reply format
TOOL_CALLS_MARKER = "TOOL_CALLS:"

# Tool output
GREP_PREVIEW_LIMIT = 10    # matches shown to the model per grep call
SEARCH_RESULT_LIMIT = 5    # web search results kept

# Web
WEB_TIMEOUT = 30
WEB_USER_AGENT = "Forge/1.0"
SEARCH_USER_AGENT = "Mozilla/5.0"
SEARCH_URL = "https://html.duckduckgo.com/html/"

# Audit trail directory (relative to the working directory)
LOG_DIR = "_logs"
