import io
from types import SimpleNamespace

import pandas as pd
import pytest

from sheetsight.env_loader import Settings


def make_xlsx(frames: dict) -> bytes:
    buf = io.BytesIO()
    with pd.ExcelWriter(buf, engine='openpyxl') as writer:
        for name, df in frames.items():
            df.to_excel(writer, sheet_name=name, index=False)
    return buf.getvalue()


class FakeClient:
    """Stands in for the Together client: ``client.chat.completions.create``."""

    def __init__(self, text="Looks fine.", error=None, on_call=None):
        self.text = text
        self.error = error
        self.on_call = on_call
        self.calls = []
        self.chat = SimpleNamespace(completions=SimpleNamespace(create=self._create))

    def _create(self, **kwargs):
        self.calls.append(kwargs)
        if self.on_call is not None:
            self.on_call()
        if self.error is not None:
            raise self.error
        message = SimpleNamespace(content=self.text)
        return SimpleNamespace(choices=[SimpleNamespace(message=message)])


@pytest.fixture
def settings():
    return Settings(api_key="test-key", model_name="test-model")


@pytest.fixture
def people_csv():
    return b"name,age,city\nann,30,Oslo\nbob,25,Rome\n\ncid,-4.5,Paris\n"


@pytest.fixture
def three_sheet_xlsx():
    return make_xlsx({
        "A": pd.DataFrame({"x": [1, 2, 3]}),
        "B": pd.DataFrame(columns=["x"]),
        "C": pd.DataFrame({"y": [1, 2, 3, 4, 5], "label": list("abcde")}),
    })
