"""
Document analysis orchestrator.

Runs the requested sub-extractions (summary, keywords, skills, sentiment,
contact info) plus experience and document-type classification
concurrently over one document's text. Each sub-extraction is isolated:
a failure or timeout is recorded in ``AnalysisResult.failures`` and the
others still complete.
"""

import asyncio
import time
from typing import Any, Awaitable, Callable, Optional

from hr_assistant.core.errors import AnalysisFailed
from hr_assistant.data.models import (
    AnalysisOptions,
    AnalysisResult,
    ContactInfo,
    SentimentResult,
)
from hr_assistant.ml.llm import LLMClient, extract_json, require_object
from hr_assistant.ml.llm.prompts import (
    CONTACT_SYSTEM_PROMPT,
    SENTIMENT_SYSTEM_PROMPT,
    SUMMARY_SYSTEM_PROMPT,
    document_message,
)
from hr_assistant.utils.config import AnalysisSettings, get_settings
from hr_assistant.utils.constants import (
    AuditAction,
    DocumentType,
    ExperienceLevel,
    SentimentLabel,
)
from hr_assistant.utils.logger import LoggerMixin, audit_log

from .parsers import (
    ContactParser,
    ExperienceParser,
    KeywordParser,
    SentimentParser,
    SummaryParser,
    classify_document_type,
    classify_experience_level,
    get_skills_parser,
    merge_contact_info,
    truncate_text,
)
from .preprocessor import PreprocessedText, TextPreprocessor

_CONTACT_FIELDS = set(ContactInfo.model_fields)


class ModelContactExtractor:
    """Asks the generation model for contact details as JSON."""

    def __init__(self, client: LLMClient, max_chars: int = 4000):
        self.client = client
        self.max_chars = max_chars

    async def extract(self, text: str, filename: str = "document") -> Optional[ContactInfo]:
        raw = await self.client.complete(
            document_message(filename, text[: self.max_chars]),
            system=CONTACT_SYSTEM_PROMPT,
            json_mode=True,
        )
        data = extract_json(raw)
        if not isinstance(data, dict):
            return None

        fields: dict[str, Any] = {}
        for key, value in data.items():
            if key not in _CONTACT_FIELDS or value in (None, "", []):
                continue
            if key == "other_identifiers":
                if isinstance(value, list):
                    fields[key] = [str(v) for v in value if v]
            else:
                fields[key] = str(value).strip()

        info = ContactInfo(**fields)
        return None if info.is_empty else info


class DocumentAnalyzer(LoggerMixin):
    """
    Extracts structured knowledge from document text.

    Pattern-based parsers always run locally. When an LLM client is given
    and ``analysis.use_llm`` is set, summary, sentiment and contact
    extraction also consult the model and fall back to the local parsers
    if the model output is unusable.
    """

    def __init__(
        self,
        settings: Optional[AnalysisSettings] = None,
        llm_client: Optional[LLMClient] = None,
    ):
        self.settings = settings or get_settings().analysis
        self.llm_client = llm_client if self.settings.use_llm else None

        self.preprocessor = TextPreprocessor()
        self.contact_parser = ContactParser()
        self.skills_parser = get_skills_parser()
        self.keyword_parser = KeywordParser(
            max_keywords=self.settings.max_keywords,
            skills_parser=self.skills_parser,
        )
        self.summary_parser = SummaryParser(
            max_chars=self.settings.summary_max_chars,
            max_sentences=self.settings.summary_sentences,
        )
        self.sentiment_parser = SentimentParser()
        self.experience_parser = ExperienceParser()
        self.model_contact_extractor = (
            ModelContactExtractor(self.llm_client) if self.llm_client else None
        )

    async def analyze(
        self,
        text: str,
        filename: str = "document",
        options: Optional[AnalysisOptions] = None,
    ) -> AnalysisResult:
        """
        Analyze document text.

        Args:
            text: Normalized document text
            filename: Original filename, used as a document-type hint
            options: Which sub-extractions to run

        Returns:
            AnalysisResult with disabled or failed parts left empty

        Raises:
            AnalysisFailed: If the text is blank or every requested
                sub-extraction failed
        """
        start_time = time.time()
        options = options or AnalysisOptions()

        text = (text or "")[: self.settings.max_chars]
        if not text.strip():
            raise AnalysisFailed("Cannot analyze empty text")

        preprocessed = await asyncio.to_thread(self.preprocessor.preprocess, text)
        cleaned = preprocessed.cleaned_text

        # Requested sub-extractions count toward AnalysisFailed
        requested: dict[str, Callable[[], Awaitable[Any]]] = {}
        if options.generate_summary:
            requested["summary"] = lambda: self._summarize(cleaned, preprocessed, filename)
        if options.extract_keywords:
            requested["keywords"] = lambda: asyncio.to_thread(self.keyword_parser.parse, cleaned)
        if options.extract_skills:
            requested["skills"] = lambda: asyncio.to_thread(self._extract_skills, preprocessed)
        if options.analyze_sentiment:
            requested["sentiment"] = lambda: self._sentiment(cleaned, filename)
        if options.extract_contact_info:
            requested["contact_info"] = lambda: self._contact_info(cleaned, filename)

        always: dict[str, Callable[[], Awaitable[Any]]] = {
            "experience": lambda: asyncio.to_thread(self._experience, cleaned),
            "document_type": lambda: asyncio.to_thread(classify_document_type, cleaned, filename),
        }

        tasks = {**requested, **always}
        names = list(tasks)
        outcomes = await asyncio.gather(*(self._run_isolated(name, tasks[name]) for name in names))
        values = dict(zip(names, outcomes))

        failures = {name: error for name, (_, error) in values.items() if error}
        if requested and all(name in failures for name in requested):
            raise AnalysisFailed(
                "All requested analyses failed",
                failures=failures,
            )

        def value(name: str, default: Any = None) -> Any:
            result, error = values.get(name, (None, None))
            return default if error or result is None else result

        level, years = value("experience", (ExperienceLevel.UNKNOWN, None))

        result = AnalysisResult(
            summary=value("summary"),
            keywords=value("keywords", []),
            skills=value("skills", []),
            experience_level=level,
            years_of_experience=years,
            sentiment=value("sentiment"),
            contact_info=value("contact_info"),
            document_type=value("document_type", DocumentType.OTHER),
            failures=failures,
            options=options,
        )

        processing_time = int((time.time() - start_time) * 1000)
        self.logger.info(
            f"Analyzed {filename} in {processing_time}ms "
            f"({len(result.skills)} skills, {len(failures)} failures)"
        )
        audit_log(
            AuditAction.ANALYSIS_COMPLETED.value,
            {
                "filename": filename,
                "document_type": result.document_type,
                "failures": list(failures),
                "processing_time_ms": processing_time,
            },
            audit_type="DOCUMENT",
        )
        return result

    async def _run_isolated(
        self,
        name: str,
        factory: Callable[[], Awaitable[Any]],
    ) -> tuple[Any, Optional[str]]:
        """Run one sub-extraction under the timeout; never raises."""
        try:
            result = await asyncio.wait_for(factory(), timeout=self.settings.timeout_seconds)
            return result, None
        except asyncio.TimeoutError:
            self.logger.warning(f"{name} extraction timed out")
            return None, f"timed out after {self.settings.timeout_seconds}s"
        except Exception as e:
            self.logger.warning(f"{name} extraction failed: {e}")
            return None, str(e) or type(e).__name__

    def _extract_skills(self, preprocessed: PreprocessedText) -> list[str]:
        section = self.preprocessor.get_section_content(preprocessed, "skills")
        return self.skills_parser.parse(preprocessed.cleaned_text, section).names

    def _experience(self, text: str) -> tuple[ExperienceLevel, Optional[float]]:
        signals = self.experience_parser.parse(text)
        level = classify_experience_level(
            signals,
            senior_years=self.settings.senior_years,
            mid_years=self.settings.mid_years,
        )
        return level, signals.years

    async def _summarize(
        self,
        text: str,
        preprocessed: PreprocessedText,
        filename: str,
    ) -> Optional[str]:
        if self.llm_client:
            try:
                summary = await self.llm_client.complete(
                    document_message(filename, text),
                    system=SUMMARY_SYSTEM_PROMPT.format(
                        max_sentences=self.settings.summary_sentences
                    ),
                )
                summary = " ".join(summary.split())
                if summary:
                    return truncate_text(summary, self.settings.summary_max_chars)
            except Exception as e:
                self.logger.warning(f"Model summary failed, using extractive summary: {e}")

        section = self.preprocessor.get_section_content(preprocessed, "summary")
        parsed = await asyncio.to_thread(self.summary_parser.parse, text, section)
        return parsed.text or None

    async def _sentiment(self, text: str, filename: str) -> SentimentResult:
        if self.llm_client:
            try:
                raw = await self.llm_client.complete(
                    document_message(filename, text),
                    system=SENTIMENT_SYSTEM_PROMPT,
                    json_mode=True,
                )
                data = require_object(raw, "Sentiment response was not a JSON object")
                label = SentimentLabel.from_label(str(data.get("label", "")))
                if label is not None:
                    score = float(data.get("score", 0.0))
                    return SentimentResult(
                        label=label,
                        score=max(-1.0, min(1.0, score)),
                        source="model",
                    )
                self.logger.warning(f"Unknown sentiment label from model: {data.get('label')!r}")
            except Exception as e:
                self.logger.warning(f"Model sentiment unusable, using lexicon: {e}")

        return await asyncio.to_thread(self.sentiment_parser.parse, text)

    async def _contact_info(self, text: str, filename: str) -> Optional[ContactInfo]:
        pattern_task = asyncio.to_thread(self.contact_parser.parse, text)
        if not self.model_contact_extractor:
            info = await pattern_task
            return None if info.is_empty else info

        pattern_info, model_info = await asyncio.gather(
            pattern_task,
            self.model_contact_extractor.extract(text, filename),
            return_exceptions=True,
        )
        if isinstance(pattern_info, BaseException):
            raise pattern_info
        if isinstance(model_info, BaseException):
            self.logger.warning(f"Model contact extraction failed: {model_info}")
            model_info = None

        merged = merge_contact_info(pattern_info, model_info)
        return None if merged is None or merged.is_empty else merged
