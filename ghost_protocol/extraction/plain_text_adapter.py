from ghost_protocol.extraction.base import BaseTextExtractor


class PlainTextAdapter(BaseTextExtractor):
    """Decodes text/plain uploads as UTF-8, replacing undecodable bytes."""

    def extract(self, content: bytes) -> str:
        return content.decode("utf-8", errors="replace").strip()
