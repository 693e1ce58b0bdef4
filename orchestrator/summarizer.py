"""Summarizer: condenses limited search results into prose with a second model call."""

from config.config import OperatingMode
from models.errors import ModeNotSupported, NothingToSummarize, PipelineError, SummarizationError
from models.search import SearchResult
from utils.logger import get_logger

from .inference_gate import InferenceGate
from .prompts import build_summary_messages

logger = get_logger(__name__)

STAGE = "summarizing"
SUMMARY_MAX_TOKENS = 1024


class Summarizer:
    """
    Only usable in local operating mode. Each summary costs an extra,
    unbounded inference call, so a networked server refuses it outright.
    """

    def __init__(self, gate: InferenceGate, mode: OperatingMode, max_tokens: int = SUMMARY_MAX_TOKENS):
        self.gate = gate
        self.mode = mode
        self.max_tokens = max_tokens

    def ensure_enabled(self) -> None:
        if not self.mode.allows_summarization:
            raise ModeNotSupported(
                "Summary generation endpoint is only available on servers configured without --server",
                stage=STAGE,
            )

    async def summarize(self, query: str, results: list[SearchResult]) -> str:
        """
        Raises:
            ModeNotSupported: summarization disabled by the operating mode
            NothingToSummarize: no result survived limiting
            SummarizationError: backend failure or empty completion
        """
        self.ensure_enabled()
        if not results:
            raise NothingToSummarize("No search results to summarize", stage=STAGE)

        try:
            response = await self.gate.chat(
                build_summary_messages(query, results),
                stage=STAGE,
                max_tokens=self.max_tokens,
            )
        except PipelineError:
            raise
        except Exception as e:
            logger.error(f"Summary inference failed: {e}", exc_info=True)
            raise SummarizationError(
                f"Error while generating a summary from the language model: {e}",
                stage=STAGE,
                details={"error_type": type(e).__name__},
            ) from e

        summary = (response.text or "").strip()
        if not summary:
            raise SummarizationError("Language model returned an empty summary", stage=STAGE)
        return summary
