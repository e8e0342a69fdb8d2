"""Offline analysis client.

Returns a valid analysis JSON without network calls. ``Title:`` and
``Genre:`` lines in the analysed text override the fixed defaults, so local
runs can exercise a full round trip. Also a template for new provider
adapters: implement BaseAnalysisClient and register the provider in
AnalyzerFactory.
"""

import json
import re
from typing import ClassVar

from ghost_protocol.analysis.client_base import BaseAnalysisClient

_MARKER_RE = re.compile(r"^(Title|Genre):[ \t]*(\S.*?)[ \t]*$", re.MULTILINE)


class ExampleClientAdapter(BaseAnalysisClient):
    DEFAULT_RESPONSE: ClassVar[dict[str, object]] = {
        "title": "Example Work",
        "publicationYear": None,
        "genre": "Fiction",
        "description": "A locally analysed creative work.",
        "detectedInfluences": [],
    }

    def create_chat_completion(
        self,
        *,
        model: str,
        temperature: float,
        max_tokens: int,
        user_prompt: str,
    ) -> str:
        _ = model, temperature, max_tokens
        markers: dict[str, str] = {}
        for key, value in _MARKER_RE.findall(user_prompt):
            markers.setdefault(key.lower(), value)
        return json.dumps({**self.DEFAULT_RESPONSE, **markers})
