"""
Command-line interface for text translation
"""
import argparse
import asyncio
import sys
from typing import List, Optional

import aiofiles

from translation_agent.config import (
    AgentConfig,
    API_ENDPOINT,
    API_KEY,
    DEFAULT_COUNTRY,
    DEFAULT_MODEL,
    DEFAULT_SOURCE_LANGUAGE,
    DEFAULT_TARGET_LANGUAGE,
    MAX_CONCURRENT_REQUESTS,
    MAX_TOKENS_PER_CHUNK,
    TEMPERATURE,
    TOKEN_ENCODING,
)
from translation_agent.core.exceptions import PartialTranslationError, TranslationError
from translation_agent.core.llm.factory import create_agent
from translation_agent.utils.unified_logger import setup_cli_logger, LogType, UnifiedLogger


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Translate text with an LLM using a translate / reflect / improve workflow."
    )
    source = parser.add_mutually_exclusive_group(required=True)
    source.add_argument("-i", "--input", help="Path to the input text file.")
    source.add_argument("--text", help="Literal text to translate instead of a file.")
    parser.add_argument("-o", "--output", default=None, help="Path to the output file. If not specified, the translation is printed.")
    parser.add_argument("-sl", "--source_lang", default=DEFAULT_SOURCE_LANGUAGE, help=f"Source language (default: {DEFAULT_SOURCE_LANGUAGE}).")
    parser.add_argument("-tl", "--target_lang", default=DEFAULT_TARGET_LANGUAGE, help=f"Target language (default: {DEFAULT_TARGET_LANGUAGE}).")
    parser.add_argument("--country", default=DEFAULT_COUNTRY, help="Region whose colloquial style the translation should match.")
    parser.add_argument("-m", "--model", default=DEFAULT_MODEL, help=f"LLM model (default: {DEFAULT_MODEL}).")
    parser.add_argument("--max-tokens", dest="max_tokens", type=int, default=MAX_TOKENS_PER_CHUNK, help=f"Token budget per request before splitting (default: {MAX_TOKENS_PER_CHUNK}).")
    parser.add_argument("--encoding", default=TOKEN_ENCODING, help="tiktoken encoding name (default: derived from the model).")
    parser.add_argument("--api_endpoint", default=API_ENDPOINT, help=f"OpenAI compatible API base URL (default: {API_ENDPOINT}).")
    parser.add_argument("--api_key", default=API_KEY, help="API key (default: API_KEY from the environment).")
    parser.add_argument("--temperature", type=float, default=TEMPERATURE, help=f"Sampling temperature (default: {TEMPERATURE}).")
    parser.add_argument("--concurrency", type=int, default=MAX_CONCURRENT_REQUESTS, help=f"Parallel requests within a stage (default: {MAX_CONCURRENT_REQUESTS}).")
    parser.add_argument("--no-color", action="store_true", help="Disable colored output.")
    return parser


async def read_source(args) -> str:
    if args.text is not None:
        return args.text
    async with aiofiles.open(args.input, 'r', encoding='utf-8') as f:
        return await f.read()


async def write_output(path: Optional[str], text: str) -> None:
    if path is None:
        print(text)
        return
    async with aiofiles.open(path, 'w', encoding='utf-8') as f:
        await f.write(text)


async def run(args, config: AgentConfig, logger: UnifiedLogger) -> int:
    """Translate according to parsed arguments; returns the exit code."""
    source_text = await read_source(args)

    agent = create_agent(config, logger=logger, show_progress=True)
    async with agent.client:
        result = await agent.translate(
            config.source_language,
            config.target_language,
            source_text,
            country=config.country
        )

    if result.is_ok():
        await write_output(args.output, result.unwrap())
        if args.output:
            logger.info("Translation saved", LogType.TRANSLATION_END, {'output_file': args.output})
        return 0

    error = result.error
    if isinstance(error, PartialTranslationError):
        logger.warning(f"Chunks {error.failed_indices} were not translated; writing partial output")
        await write_output(args.output, error.partial_text)

    logger.error(f"Translation failed: {error}", LogType.ERROR_DETAIL, {
        'details': str(error),
        'input_file': args.input
    })
    return 1


def main(argv: Optional[List[str]] = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    if args.max_tokens < 1:
        parser.error("--max-tokens must be a positive integer")
    if args.concurrency < 1:
        parser.error("--concurrency must be a positive integer")

    config = AgentConfig.from_cli_args(args)
    # Without -o the translation goes to stdout, so log lines go to stderr
    logger = setup_cli_logger(enable_colors=config.enable_colors, to_stderr=args.output is None)

    try:
        return asyncio.run(run(args, config, logger))
    except (TranslationError, OSError) as e:
        logger.error(f"Translation failed: {e}", LogType.ERROR_DETAIL, {'details': str(e)})
        return 1


if __name__ == "__main__":
    sys.exit(main())
