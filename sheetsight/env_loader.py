# sheetsight/env_loader.py

import os
from dataclasses import dataclass

from dotenv import load_dotenv

DEFAULT_MODEL = "meta-llama/Llama-4-Maverick-17B-128E-Instruct-FP8"


@dataclass(frozen=True)
class Settings:
    api_key: str
    model_name: str = DEFAULT_MODEL
    sample_size: int = 20
    max_tokens: int = 512
    temperature: float = 0.7


def load_environment():
    load_dotenv()
    os.environ['TOGETHER_API_KEY'] = os.getenv('TOGETHER_API_KEY', '').strip()


def get_settings() -> Settings:
    """Read settings from the process environment (call load_environment() first for .env)."""
    return Settings(
        api_key=os.getenv('TOGETHER_API_KEY', '').strip(),
        model_name=os.getenv('SHEETSIGHT_MODEL', DEFAULT_MODEL),
        sample_size=int(os.getenv('SHEETSIGHT_SAMPLE_SIZE', '20')),
        max_tokens=int(os.getenv('SHEETSIGHT_MAX_TOKENS', '512')),
        temperature=float(os.getenv('SHEETSIGHT_TEMPERATURE', '0.7')),
    )
