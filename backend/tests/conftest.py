from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, List, Optional, Sequence

import pytest

from app.core.dependencies import get_inference_client
from main import create_app


@dataclass
class RecordedCall:
    images: List[str]
    prompt_text: str
    max_output_tokens: int
    label_frames: bool


@dataclass
class StubInferenceClient:
    """Inference client double that records every call"""

    text: str = ""
    error: Optional[Exception] = None
    calls: List[RecordedCall] = field(default_factory=list)

    def invoke(
        self,
        images: Sequence[str],
        prompt_text: str,
        max_output_tokens: int,
        *,
        label_frames: bool = False,
    ) -> str:
        self.calls.append(RecordedCall(list(images), prompt_text, max_output_tokens, label_frames))
        if self.error is not None:
            raise self.error
        return self.text


@pytest.fixture
def stub_client() -> StubInferenceClient:
    return StubInferenceClient()


@pytest.fixture
def app(stub_client: StubInferenceClient) -> Any:
    application = create_app()
    application.dependency_overrides[get_inference_client] = lambda: stub_client
    return application
