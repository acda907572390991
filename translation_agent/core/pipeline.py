"""
Translate / reflect / improve pipeline.

A text that fits the token budget goes through three completion calls as one
unit. A larger text is split into context-carrying chunks and every chunk goes
through the same three stages, stage by stage: all live chunks finish a stage
before any chunk starts the next one. Outputs are stored by chunk index, so
the result does not depend on completion order.

Usage:
    agent = TranslationAgent(client, TokenCounter.for_model("gpt-4o-mini"), 1000)
    result = await agent.translate("English", "Spanish", text)
    if result.is_ok():
        print(result.unwrap())
"""

import asyncio
from typing import Callable, List, Optional, Sequence

from tqdm.auto import tqdm

from translation_agent.config import MAX_TOKENS_PER_CHUNK
from translation_agent.core.chunking.chunk_sizer import decide_split
from translation_agent.core.chunking.models import (
    Chunk,
    ChunkTranslationState,
    NoSplitNeeded,
    StageStatus,
    TranslationRequest,
)
from translation_agent.core.chunking.reassembler import reassemble
from translation_agent.core.chunking.splitter import ContextPreservingSplitter
from translation_agent.core.chunking.statistics import calculate_chunk_statistics
from translation_agent.core.exceptions import (
    CompletionError,
    ConfigurationError,
    PartialTranslationError,
    TemplateError,
)
from translation_agent.core.llm.base import CompletionClient
from translation_agent.core.result import Ok, Err, Result, wrap_async_exception
from translation_agent.prompts.prompts import (
    PromptPair,
    generate_initial_prompt,
    generate_reflection_prompt,
    generate_improvement_prompt,
    generate_chunk_initial_prompt,
    generate_chunk_reflection_prompt,
    generate_chunk_improvement_prompt,
)
from translation_agent.utils.llm_logger import log_llm_interaction
from translation_agent.utils.unified_logger import UnifiedLogger, LogType, get_logger

# Stage names, in execution order
STAGE_INITIAL = "initial"
STAGE_REFLECT = "reflect"
STAGE_IMPROVE = "improve"

PromptBuilder = Callable[[ChunkTranslationState], PromptPair]


class TranslationAgent:
    """
    Orchestrates the three-stage translation of one text.

    Args:
        client: Completion client (anything with ``async complete(prompt, system_message)``)
        token_counter: Token counting function shared by the split decision and the splitter
        token_budget: Maximum tokens of source text per request
        max_concurrency: Completion calls allowed in flight within one stage
        logger: Logger for pipeline events (defaults to the global logger)
        show_progress: Show a tqdm progress bar per stage
    """

    def __init__(self, client: CompletionClient, token_counter: Callable[[str], int],
                 token_budget: int = MAX_TOKENS_PER_CHUNK, max_concurrency: int = 1,
                 logger: Optional[UnifiedLogger] = None, show_progress: bool = False):
        if max_concurrency < 1:
            raise ConfigurationError(
                "max_concurrency must be a positive integer",
                context={'max_concurrency': max_concurrency}
            )
        self.client = client
        self.token_counter = token_counter
        self.token_budget = token_budget
        self.max_concurrency = max_concurrency
        self.logger = logger or get_logger()
        self.show_progress = show_progress

    async def translate(self, source_lang: str, target_lang: str, source_text: str,
                        country: str = "") -> Result:
        """
        Translate source_text from source_lang to target_lang.

        Args:
            source_lang: Source language name
            target_lang: Target language name
            source_text: Text to translate (may be empty)
            country: Optional region whose colloquial style the translation should match

        Returns:
            Ok(translated_text), or Err with a ConfigurationError, the failing
            unit's TemplateError/CompletionError, or a PartialTranslationError
            when only some chunks failed
        """
        request = TranslationRequest(
            source_lang=source_lang,
            target_lang=target_lang,
            source_text=source_text,
            country=country or None,
            token_budget=self.token_budget
        )
        return await self.translate_request(request)

    async def translate_request(self, request: TranslationRequest) -> Result:
        """Translate a prepared TranslationRequest. See translate()."""
        try:
            decision = decide_split(request.source_text, request.token_budget, self.token_counter)
        except ConfigurationError as e:
            self.logger.error("Invalid chunking configuration", LogType.ERROR_DETAIL, {'details': str(e)})
            return Err(e)

        if isinstance(decision, NoSplitNeeded):
            self._log_start(request, total_chunks=1)
            self.logger.info(
                f"Translating as a single unit ({decision.num_tokens} tokens)",
                LogType.CHUNK_INFO,
                {'total_chunks': 1, 'num_tokens': decision.num_tokens}
            )
            states = await self.run_single(request)
            return self._collect_single(states[0])

        try:
            splitter = ContextPreservingSplitter(decision.chunk_size, self.token_counter)
            chunks = splitter.split(request.source_text)
        except ConfigurationError as e:
            self.logger.error("Invalid chunking configuration", LogType.ERROR_DETAIL, {'details': str(e)})
            return Err(e)

        self._log_start(request, total_chunks=len(chunks))
        stats = calculate_chunk_statistics(chunks, self.token_counter, decision.chunk_size)
        self.logger.info(
            f"Translating in {len(chunks)} chunks (chunk size {decision.chunk_size} tokens): {stats.summary()}",
            LogType.CHUNK_INFO,
            {
                'total_chunks': len(chunks),
                'num_tokens': decision.num_tokens,
                'chunk_size': decision.chunk_size,
                'statistics': stats.to_dict(),
            }
        )

        states = await self.run_chunks(request, chunks)
        return self._collect_chunks(states)

    # ------------------------------------------------------------------
    # Stage execution
    # ------------------------------------------------------------------

    async def run_single(self, request: TranslationRequest) -> List[ChunkTranslationState]:
        """Run the three stages on the whole text as one unit."""
        src, tgt = request.source_lang, request.target_lang
        country = request.country or ""
        states = [ChunkTranslationState(chunk=Chunk(index=0, text=request.source_text))]

        await self._run_stage(STAGE_INITIAL, states, StageStatus.TRANSLATED,
            lambda s: generate_initial_prompt(src, tgt, s.chunk.text))
        await self._run_stage(STAGE_REFLECT, states, StageStatus.REFLECTED,
            lambda s: generate_reflection_prompt(src, tgt, s.chunk.text, s.initial_translation, country))
        await self._run_stage(STAGE_IMPROVE, states, StageStatus.IMPROVED,
            lambda s: generate_improvement_prompt(src, tgt, s.chunk.text, s.initial_translation, s.critique))

        return states

    async def run_chunks(self, request: TranslationRequest,
                         chunks: Sequence[Chunk]) -> List[ChunkTranslationState]:
        """Run the three stages over all chunks, one stage at a time."""
        src, tgt = request.source_lang, request.target_lang
        country = request.country or ""
        states = [ChunkTranslationState(chunk=chunk) for chunk in chunks]

        await self._run_stage(STAGE_INITIAL, states, StageStatus.TRANSLATED,
            lambda s: generate_chunk_initial_prompt(src, tgt, s.chunk.tagged_text, s.chunk.text))
        await self._run_stage(STAGE_REFLECT, states, StageStatus.REFLECTED,
            lambda s: generate_chunk_reflection_prompt(
                src, tgt, s.chunk.tagged_text, s.chunk.text, s.initial_translation, country))
        await self._run_stage(STAGE_IMPROVE, states, StageStatus.IMPROVED,
            lambda s: generate_chunk_improvement_prompt(
                src, tgt, s.chunk.tagged_text, s.chunk.text, s.initial_translation, s.critique))

        return states

    async def _run_stage(self, stage: str, states: List[ChunkTranslationState],
                         next_status: StageStatus, build_prompt: PromptBuilder) -> None:
        """
        Run one stage for every live unit and wait for all of them.

        Failed units are skipped. With max_concurrency == 1 units run
        strictly in index order.
        """
        live = [state for state in states if not state.failed]
        total = len(states)
        semaphore = asyncio.Semaphore(self.max_concurrency)
        progress = tqdm(total=len(live), desc=stage, unit="chunk", disable=not self.show_progress)

        async def run_unit(state: ChunkTranslationState) -> None:
            async with semaphore:
                result = await self._call(stage, build_prompt, state, total)

            if result.is_ok():
                self._store(state, stage, next_status, result.value)
            else:
                state.fail(stage, result.error)
                self.logger.error(
                    f"Chunk {state.index + 1}/{total} failed during {stage}",
                    LogType.ERROR_DETAIL,
                    {'details': str(result.error), 'stage': stage, 'chunk': state.index}
                )
            progress.update(1)

        try:
            if self.max_concurrency == 1:
                for state in live:
                    await run_unit(state)
            else:
                await asyncio.gather(*(run_unit(state) for state in live))
        finally:
            progress.close()

        self.logger.info(f"Stage {stage} finished", LogType.STAGE_PROGRESS, {
            'stage': stage,
            'completed': sum(1 for s in states if s.status == next_status),
            'total': total,
            'failed': sum(1 for s in states if s.failed),
        })

    @wrap_async_exception(TemplateError, CompletionError)
    async def _call(self, stage: str, build_prompt: PromptBuilder,
                    state: ChunkTranslationState, total: int) -> str:
        prompt = build_prompt(state)
        output = await self.client.complete(prompt.user, prompt.system)

        # Sole dump of prompt and answer text; the provider logs usage only
        log_llm_interaction(prompt.system, prompt.user, output,
                            stage=stage, chunk_index=state.index, total_chunks=total)
        return output

    @staticmethod
    def _store(state: ChunkTranslationState, stage: str,
               next_status: StageStatus, output: str) -> None:
        if stage == STAGE_INITIAL:
            state.initial_translation = output
        elif stage == STAGE_REFLECT:
            state.critique = output
        else:
            state.final_translation = output
        state.status = next_status

    # ------------------------------------------------------------------
    # Results
    # ------------------------------------------------------------------

    def _collect_single(self, state: ChunkTranslationState) -> Result:
        if state.failed:
            self._log_end("Translation failed", completed=0, failed=1)
            return Err(state.error)

        self._log_end("Translation completed", completed=1, failed=0)
        return Ok(state.final_translation)

    def _collect_chunks(self, states: List[ChunkTranslationState]) -> Result:
        text = reassemble(state.final_translation for state in states)
        failed = [state for state in states if state.failed]

        if not failed:
            self._log_end("Translation completed", completed=len(states), failed=0)
            return Ok(text)

        self._log_end("Translation incomplete", completed=len(states) - len(failed), failed=len(failed))
        return Err(PartialTranslationError(
            f"{len(failed)} of {len(states)} chunks failed",
            failed_indices=[state.index for state in failed],
            partial_text=text,
            errors={state.index: state.error for state in failed}
        ))

    def _log_start(self, request: TranslationRequest, total_chunks: int) -> None:
        self.logger.info("Translation started", LogType.TRANSLATION_START, {
            'source_lang': request.source_lang,
            'target_lang': request.target_lang,
            'model': getattr(self.client, 'model', 'Unknown'),
            'country': request.country,
            'total_chunks': total_chunks,
        })

    def _log_end(self, message: str, completed: int, failed: int) -> None:
        self.logger.info(message, LogType.TRANSLATION_END, {
            'stats': {'completed': completed, 'failed': failed}
        })
