import json
import logging
import re
from typing import List

from together import Together

from sheetsight.data_utils import Row, Sheet, raw_value
from sheetsight.env_loader import Settings, get_settings
from sheetsight.errors import (
    AnalysisRequestFailed,
    InvalidCredential,
    NoDataToAnalyze,
    SheetSightError,
)

logger = logging.getLogger(__name__)

DATA_SAMPLE_SIZE = 20

SAMPLE_PROMPTS = [
    "Summarize this dataset in 3 key points.",
    "What are the most interesting patterns or outliers?",
    "Calculate the average of the most relevant numerical column.",
    "Suggest a good chart to visualize this data.",
]

CREDENTIAL_SIGNATURES = (
    "api key not valid",
    "invalid api key",
    "invalid_api_key",
    "unauthorized",
    "authenticationerror",
)


def rows_to_records(rows: List[Row], headers: List[str]) -> List[dict]:
    return [
        {h: raw_value(row[h]) for h in headers if h in row}
        for row in rows
    ]


def format_prompt(sheet: Sheet, question: str, sample_size: int = DATA_SAMPLE_SIZE) -> str:
    """
    Build the analysis prompt: column list, a JSON sample of the first
    ``sample_size`` rows, the full row count and the user's question.
    """
    sample = rows_to_records(sheet.rows[:sample_size], sheet.headers)
    data_string = json.dumps(sample, indent=2, ensure_ascii=False)
    headers = ', '.join(sheet.headers) if sheet.headers else 'No headers found'

    prompt = f"""
You are an expert data analyst. Your task is to analyze the provided dataset based on the user's request.
The data has the following columns: {headers}.
Here is a sample of the data in JSON format (up to {sample_size} rows):
```json
{data_string}
```
The full dataset contains {len(sheet.rows)} rows.

User's request: "{question}"

Based on this data, please provide a concise and insightful analysis. If the user asks for a calculation, perform it. If they ask for a summary, provide one. Present your answer clearly. If the data sample is insufficient to answer, state that explicitly and explain what information would be needed.
"""
    return prompt.strip()


def is_credential_error(error: Exception) -> bool:
    text = f"{type(error).__name__} {error}".lower()
    if getattr(error, "status_code", None) == 401 or getattr(error, "http_status", None) == 401:
        return True
    if re.search(r"\b401\b", text):
        return True
    return any(signature in text for signature in CREDENTIAL_SIGNATURES)


def explain_error(error: Exception) -> SheetSightError:
    """Map any failure of the model call onto the analysis error types."""
    if isinstance(error, SheetSightError):
        return error
    if is_credential_error(error):
        return InvalidCredential(str(error))
    return AnalysisRequestFailed(str(error))


def make_client(settings: Settings):
    if not settings.api_key:
        raise InvalidCredential("TOGETHER_API_KEY is not set")
    return Together(api_key=settings.api_key)


def llama_query(prompt: str, client=None, settings: Settings = None) -> str:
    """
    Send one prompt to the model and return its text.
    Raises InvalidCredential or AnalysisRequestFailed; no retries.
    """
    settings = settings or get_settings()

    logger.debug("Prompt:\n%s", prompt)

    client = client or make_client(settings)

    try:
        response = client.chat.completions.create(
            model=settings.model_name,
            messages=[
                {"role": "system", "content": "You're a smart data analyst."},
                {"role": "user", "content": prompt},
            ],
            max_tokens=settings.max_tokens,
            temperature=settings.temperature,
        )
        text = response.choices[0].message.content if response.choices else None
    except Exception as e:
        logger.error("Model API call failed: %s", e)
        raise explain_error(e) from e

    if not text or not text.strip():
        raise AnalysisRequestFailed("No valid response from the model.")
    return text.strip()


def ask_about_sheet(sheet: Sheet, question: str, client=None, settings: Settings = None) -> str:
    if sheet is None or not sheet.rows:
        raise NoDataToAnalyze()
    if not question or not question.strip():
        raise ValueError("Question must not be empty.")

    settings = settings or get_settings()
    prompt = format_prompt(sheet, question.strip(), sample_size=settings.sample_size)
    return llama_query(prompt, client=client, settings=settings)
