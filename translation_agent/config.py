"""
Centralized configuration class
"""
import os
import logging
from pathlib import Path
from dataclasses import dataclass
from dotenv import load_dotenv

# Setup debug logger for configuration
_config_logger = logging.getLogger('config')

# Check for DEBUG_MODE early (before .env is loaded, check environment)
_debug_mode = os.getenv('DEBUG_MODE', 'false').lower() == 'true'
if _debug_mode:
    logging.basicConfig(level=logging.DEBUG, format='%(asctime)s - %(name)s - %(levelname)s - %(message)s')
    _config_logger.setLevel(logging.DEBUG)
    _config_logger.debug("DEBUG_MODE enabled - verbose logging active")

# .env is looked up in the current working directory
_env_file = Path.cwd() / '.env'

if _debug_mode:
    _config_logger.debug(f"Looking for .env at: {_env_file.absolute()}")
    _config_logger.debug(f".env exists: {_env_file.exists()}")

# Load .env file if it exists (missing file means defaults/environment only)
_dotenv_result = load_dotenv(_env_file)
if _debug_mode:
    _config_logger.debug(f"load_dotenv() returned: {_dotenv_result}")

# Load from environment variables with defaults
API_ENDPOINT = os.getenv('API_ENDPOINT', 'https://api.openai.com/v1')
API_KEY = os.getenv('API_KEY', '')
DEFAULT_MODEL = os.getenv('DEFAULT_MODEL', 'gpt-4o-mini')
TEMPERATURE = float(os.getenv('TEMPERATURE', '0.3'))
REQUEST_TIMEOUT = int(os.getenv('REQUEST_TIMEOUT', '900'))
MAX_TRANSLATION_ATTEMPTS = int(os.getenv('MAX_TRANSLATION_ATTEMPTS', '1'))
RETRY_DELAY_SECONDS = int(os.getenv('RETRY_DELAY_SECONDS', '2'))

# Token-based chunking configuration
# Texts above MAX_TOKENS_PER_CHUNK are split into evenly sized chunks.
# TOKEN_ENCODING overrides the tiktoken encoding resolved from the model name.
MAX_TOKENS_PER_CHUNK = int(os.getenv('MAX_TOKENS_PER_CHUNK', '1000'))
TOKEN_ENCODING = os.getenv('TOKEN_ENCODING', '')

# Number of completion calls allowed in flight within one pipeline stage
MAX_CONCURRENT_REQUESTS = int(os.getenv('MAX_CONCURRENT_REQUESTS', '1'))

# Default languages from environment
DEFAULT_SOURCE_LANGUAGE = os.getenv('DEFAULT_SOURCE_LANGUAGE', 'English')
DEFAULT_TARGET_LANGUAGE = os.getenv('DEFAULT_TARGET_LANGUAGE', 'Chinese')
DEFAULT_COUNTRY = os.getenv('DEFAULT_COUNTRY', '')

# Debug mode (reload after .env is loaded)
DEBUG_MODE = os.getenv('DEBUG_MODE', 'false').lower() == 'true'


def _mask_secret(value: str) -> str:
    return '***' + value[-4:] if value else '(not set)'


# Log loaded configuration in debug mode
if DEBUG_MODE or _debug_mode:
    _config_logger.setLevel(logging.DEBUG)
    _config_logger.debug("=" * 60)
    _config_logger.debug("LOADED CONFIGURATION VALUES:")
    _config_logger.debug("=" * 60)
    _config_logger.debug(f"   API_ENDPOINT: {API_ENDPOINT}")
    _config_logger.debug(f"   API_KEY: {_mask_secret(API_KEY)}")
    _config_logger.debug(f"   DEFAULT_MODEL: {DEFAULT_MODEL}")
    _config_logger.debug(f"   TEMPERATURE: {TEMPERATURE}")
    _config_logger.debug(f"   MAX_TOKENS_PER_CHUNK: {MAX_TOKENS_PER_CHUNK}")
    _config_logger.debug(f"   TOKEN_ENCODING: {TOKEN_ENCODING or '(from model)'}")
    _config_logger.debug(f"   REQUEST_TIMEOUT: {REQUEST_TIMEOUT}")
    _config_logger.debug(f"   MAX_CONCURRENT_REQUESTS: {MAX_CONCURRENT_REQUESTS}")
    _config_logger.debug(f"   DEFAULT_SOURCE_LANGUAGE: {DEFAULT_SOURCE_LANGUAGE}")
    _config_logger.debug(f"   DEFAULT_TARGET_LANGUAGE: {DEFAULT_TARGET_LANGUAGE}")
    _config_logger.debug("=" * 60)

# Fallbacks applied by the completion client
DEFAULT_SYSTEM_MESSAGE = "You are a helpful assistant."
FALLBACK_MODEL = "gpt-4o-mini"

# Delimiters marking the span to translate inside the whole-text context
TRANSLATE_THIS_TAG_IN = "<TRANSLATE_THIS>"
TRANSLATE_THIS_TAG_OUT = "</TRANSLATE_THIS>"

# Split boundaries, coarsest first. The separator stays with the piece it ends.
# "" means raw character boundaries and must stay last.
CHUNK_SEPARATORS = (
    "\n\n",
    "\n",
    "。", "！", "？", "；", "……", "…",
    ". ", "! ", "? ",
    " ",
    "",
)


@dataclass
class AgentConfig:
    """Unified configuration for the CLI and library callers"""

    # Core settings
    source_language: str = DEFAULT_SOURCE_LANGUAGE
    target_language: str = DEFAULT_TARGET_LANGUAGE
    country: str = DEFAULT_COUNTRY

    # LLM settings
    api_endpoint: str = API_ENDPOINT
    api_key: str = API_KEY
    model: str = DEFAULT_MODEL
    temperature: float = TEMPERATURE
    timeout: int = REQUEST_TIMEOUT
    max_attempts: int = MAX_TRANSLATION_ATTEMPTS
    retry_delay: int = RETRY_DELAY_SECONDS

    # Chunking
    max_tokens: int = MAX_TOKENS_PER_CHUNK
    token_encoding: str = TOKEN_ENCODING

    # Execution
    max_concurrency: int = MAX_CONCURRENT_REQUESTS
    enable_colors: bool = True

    @classmethod
    def from_cli_args(cls, args) -> 'AgentConfig':
        """Create config from CLI arguments"""
        return cls(
            source_language=args.source_lang,
            target_language=args.target_lang,
            country=getattr(args, 'country', DEFAULT_COUNTRY) or '',
            api_endpoint=args.api_endpoint,
            api_key=getattr(args, 'api_key', API_KEY),
            model=args.model,
            temperature=getattr(args, 'temperature', TEMPERATURE),
            max_tokens=getattr(args, 'max_tokens', MAX_TOKENS_PER_CHUNK),
            token_encoding=getattr(args, 'encoding', TOKEN_ENCODING) or '',
            max_concurrency=getattr(args, 'concurrency', MAX_CONCURRENT_REQUESTS),
            enable_colors=not getattr(args, 'no_color', False),
        )

    def to_dict(self) -> dict:
        """Convert to dictionary for serialization (API key masked)"""
        return {
            'source_language': self.source_language,
            'target_language': self.target_language,
            'country': self.country,
            'api_endpoint': self.api_endpoint,
            'api_key': _mask_secret(self.api_key),
            'model': self.model,
            'temperature': self.temperature,
            'timeout': self.timeout,
            'max_attempts': self.max_attempts,
            'retry_delay': self.retry_delay,
            'max_tokens': self.max_tokens,
            'token_encoding': self.token_encoding,
            'max_concurrency': self.max_concurrency,
        }
